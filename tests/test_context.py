import pytest

from neotx.binary import UInt160, get_sign_data
from neotx.context import ContractParametersContext
from neotx.nep6 import Contract
from neotx.signer import Signer
from neotx.transaction import Transaction
from neotx.witness import (
    create_signature_witness,
    multisig_redeem_script,
    sign_message,
    signature_redeem_script,
    verify_multi_signature_witness,
    verify_signature_witness,
)

MAGIC = 860833102
KEY_ONE = bytes([1]) * 32
KEY_TWO = bytes([2]) * 32


def _public_key(private_key):
    return create_signature_witness(b"", private_key).verification_script[2:35]


def _context_for(contract):
    transaction = Transaction(signers=[Signer(contract.script_hash())], script=b"\x11")
    return ContractParametersContext(transaction), get_sign_data(transaction, MAGIC)


def test_single_signature_completes_and_verifies():
    public_key = _public_key(KEY_ONE)
    contract = Contract(signature_redeem_script(public_key), ["Signature"])
    context, msg = _context_for(contract)
    assert not context.completed()
    signature = sign_message(KEY_ONE, msg)
    assert context.add_signature(contract, public_key, signature)
    assert context.completed()
    assert context.get_parameter(contract.script_hash(), 0) == signature
    assert context.get_script(contract.script_hash()) == contract.script
    witnesses = context.get_witnesses()
    assert len(witnesses) == 1
    assert witnesses[0].invocation_script[:2] == b"\x0c\x40"
    assert verify_signature_witness(msg, witnesses[0])


def test_duplicate_signature_rejected():
    public_key = _public_key(KEY_ONE)
    contract = Contract(signature_redeem_script(public_key), ["Signature"])
    context, msg = _context_for(contract)
    signature = sign_message(KEY_ONE, msg)
    assert context.add_signature(contract, public_key, signature)
    assert not context.add_signature(contract, public_key, signature)


def test_contract_not_in_script_hashes():
    contract = Contract(signature_redeem_script(_public_key(KEY_ONE)), ["Signature"])
    other = Contract(signature_redeem_script(_public_key(KEY_TWO)), ["Signature"])
    context, msg = _context_for(contract)
    assert not context.add_signature(other, _public_key(KEY_TWO), sign_message(KEY_TWO, msg))
    assert context.get_parameters(other.script_hash()) is None


def test_contract_without_signature_parameter():
    contract = Contract(b"\x11", ["Integer"])
    context, _ = _context_for(contract)
    assert not context.add_signature(contract, _public_key(KEY_ONE), bytes(64))


def test_two_signature_parameters_not_supported():
    contract = Contract(b"\x11", ["Signature", "Signature"])
    context, _ = _context_for(contract)
    with pytest.raises(ValueError):
        context.add_signature(contract, _public_key(KEY_ONE), bytes(64))


def test_witnesses_before_completion_raise():
    contract = Contract(signature_redeem_script(_public_key(KEY_ONE)), ["Signature"])
    context, _ = _context_for(contract)
    with pytest.raises(ValueError):
        context.get_witnesses()


def test_multisig_collects_signatures_in_key_order():
    keys = [_public_key(KEY_ONE), _public_key(KEY_TWO)]
    contract = Contract(multisig_redeem_script(2, keys), ["Signature", "Signature"])
    context, msg = _context_for(contract)
    assert context.add_signature(contract, keys[1], sign_message(KEY_TWO, msg))
    assert not context.completed()
    assert context.add_signature(contract, keys[0], sign_message(KEY_ONE, msg))
    assert context.completed()
    assert context.get_signatures(contract.script_hash()) is None
    witness = context.get_witnesses()[0]
    assert witness.verification_script == contract.script
    assert verify_multi_signature_witness(msg, witness)


def test_multisig_rejects_foreign_key():
    keys = [_public_key(KEY_ONE), _public_key(KEY_TWO)]
    contract = Contract(multisig_redeem_script(2, keys), ["Signature", "Signature"])
    context, msg = _context_for(contract)
    stranger = bytes([3]) * 32
    assert not context.add_signature(contract, _public_key(stranger), sign_message(stranger, msg))


def test_add_item_with_params_completes_context():
    contract = Contract(b"\x11", [])
    context, _ = _context_for(contract)
    assert context.add_item_with_params(contract, None)
    assert context.completed()
    assert context.get_witnesses()[0].invocation_script == b""


def test_add_item_with_index_and_push():
    contract = Contract(b"\x11", ["Integer", "Boolean"])
    context, _ = _context_for(contract)
    assert context.add_item_with_index(contract, 0, 5)
    assert not context.completed()
    assert context.add_item_with_index(contract, 1, True)
    assert context.get_parameters(contract.script_hash()) == [5, True]
    assert context.get_witnesses()[0].invocation_script == b"\x08\x15"


def test_script_hashes_follow_signers():
    contract = Contract(b"\x11", [])
    context, _ = _context_for(contract)
    assert context.script_hashes() == [contract.script_hash()]
    assert context.get_script(UInt160()) is None