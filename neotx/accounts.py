"""Account balances, paying-account selection and signer ordering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .binary import UInt160, get_sign_data
from .signer import Signer
from .witness import sign_message
from .witness_scope import WitnessScope


@dataclass(frozen=True)
class AccountAndBalance:
    """An account and its balance of some asset."""

    account: UInt160
    value: int


def _take_from_single(
    accounts: list[AccountAndBalance], amount: int
) -> AccountAndBalance | None:
    for index, entry in enumerate(accounts):
        if entry.value < amount:
            continue
        if entry.value == amount:
            return accounts.pop(index)
        accounts[index] = AccountAndBalance(entry.account, entry.value - amount)
        return AccountAndBalance(entry.account, amount)
    return None


def find_paying_accounts(
    ordered_accounts: Sequence[AccountAndBalance], amount: int
) -> list[AccountAndBalance]:
    """Choose accounts, ordered by ascending balance, that together pay the amount."""
    accounts = list(ordered_accounts)
    if sum(entry.value for entry in accounts) <= amount:
        return accounts
    single = _take_from_single(accounts, amount)
    if single is not None:
        return [single]
    result: list[AccountAndBalance] = []
    while accounts and accounts[-1].value <= amount:
        largest = accounts.pop()
        result.append(largest)
        amount -= largest.value
    if amount > 0:
        rest = _take_from_single(accounts, amount)
        if rest is not None:
            result.append(rest)
    return result


def find_remaining_account_and_balance(
    used: Iterable[AccountAndBalance], all_accounts: Iterable[AccountAndBalance]
) -> list[AccountAndBalance]:
    """What is left of each account's balance after the used amounts are taken."""
    used_by_account = {entry.account: entry for entry in used}
    remaining: list[AccountAndBalance] = []
    for entry in all_accounts:
        spent = used_by_account.get(entry.account)
        if spent is None:
            remaining.append(entry)
        elif spent.value < entry.value:
            remaining.append(AccountAndBalance(entry.account, entry.value - spent.value))
    return remaining


def order_signers(sender: UInt160, cosigners: Sequence[Signer]) -> list[Signer]:
    """Put the sender's signer first, adding one with no scope if it is missing."""
    for index, signer in enumerate(cosigners):
        if signer.account == sender:
            return [signer, *cosigners[:index], *cosigners[index + 1:]]
    return [Signer(sender, WitnessScope.NONE), *cosigners]


def sign_verifiable(verifiable, private_key: bytes, magic: int) -> bytes:
    """Sign the network magic and hash of a transaction or other verifiable."""
    return sign_message(private_key, get_sign_data(verifiable, magic))