"""Transaction signers and their binary encoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .binary import BinaryReader, BinaryWriter, FormatError, UInt160, var_size
from .witness_scope import WitnessScope

MAX_SUBITEMS = 16

_POINT_BODY_LENGTHS = {0x00: 0, 0x02: 32, 0x03: 32, 0x04: 64}


def _read_public_key(reader: BinaryReader) -> bytes:
    prefix = reader.read_byte()
    try:
        body_length = _POINT_BODY_LENGTHS[prefix]
    except KeyError:
        raise FormatError(f"format error: invalid public key prefix {prefix:#04x}") from None
    return bytes([prefix]) + reader.read_bytes(body_length)


@dataclass
class Signer:
    """An account that signs a transaction, with the scope of its witness."""

    account: UInt160 = field(default_factory=UInt160)
    scopes: WitnessScope = WitnessScope.NONE
    allowed_contracts: list[UInt160] = field(default_factory=list)
    allowed_groups: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= int(self.scopes) <= 0xFF:
            raise ValueError(f"witness scope {self.scopes} does not fit in a byte")
        self.scopes = WitnessScope(self.scopes)

    def size(self) -> int:
        total = UInt160.SIZE + 1
        if self.scopes & WitnessScope.CUSTOM_CONTRACTS:
            total += var_size(len(self.allowed_contracts)) + UInt160.SIZE * len(
                self.allowed_contracts
            )
        if self.scopes & WitnessScope.CUSTOM_GROUPS:
            total += var_size(len(self.allowed_groups)) + sum(
                len(group) for group in self.allowed_groups
            )
        return total

    def compare_to(self, other: Signer) -> int:
        """Order by account first, then by scope."""
        if self.account != other.account:
            return -1 if self.account < other.account else 1
        return self.scopes.compare_to(other.scopes)

    def serialize(self, writer: BinaryWriter) -> None:
        writer.write_bytes(self.account.to_bytes())
        writer.write_byte(self.scopes)
        if self.scopes & WitnessScope.CUSTOM_CONTRACTS:
            writer.write_var_uint(len(self.allowed_contracts))
            for contract in self.allowed_contracts:
                writer.write_bytes(contract.to_bytes())
        # The group list is written under the contracts flag, as the wire format expects.
        if self.scopes & WitnessScope.CUSTOM_CONTRACTS:
            writer.write_var_uint(len(self.allowed_groups))
            for group in self.allowed_groups:
                writer.write_bytes(group)

    @classmethod
    def deserialize(cls, reader: BinaryReader) -> Signer:
        account = reader.read_uint160()
        scopes = WitnessScope(reader.read_byte())
        contracts: list[UInt160] = []
        groups: list[bytes] = []
        if scopes & WitnessScope.CUSTOM_CONTRACTS:
            count = reader.read_var_uint(MAX_SUBITEMS)
            contracts = [reader.read_uint160() for _ in range(count)]
        if scopes & WitnessScope.CUSTOM_GROUPS:
            count = reader.read_var_uint(MAX_SUBITEMS)
            groups = [_read_public_key(reader) for _ in range(count)]
        return cls(account, scopes, contracts, groups)


def signers_var_size(signers: Iterable[Signer]) -> int:
    """Encoded size of a count-prefixed list of signers."""
    items = list(signers)
    return var_size(len(items)) + sum(signer.size() for signer in items)