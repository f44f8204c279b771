import pytest

from neotx.attributes import HighPriorityAttribute, OracleResponseAttribute
from neotx.binary import BinaryReader, BinaryWriter, FormatError, UInt160
from neotx.signer import Signer
from neotx.transaction import GAS_FACTOR, GAS_TOKEN, NEO_TOKEN, Transaction
from neotx.witness import Witness
from neotx.witness_scope import WitnessScope

PUSH1 = 0x11

SIGNED_HEX = (
    "00"
    "04030201"
    "00e1f50500000000"
    "0100000000000000"
    "04030201"
    "01000000000000000000000000000000000000000000"
    "00"
    "0111"
    "00"
)

HEAD_HEX = "00" "04030201" "00e1f50500000000" "0100000000000000" "04030201"


def _sample():
    return Transaction(
        version=0,
        nonce=0x01020304,
        system_fee=GAS_FACTOR,
        network_fee=1,
        valid_until_block=0x01020304,
        signers=[],
        attributes=[],
        script=bytes([PUSH1]),
        witnesses=[],
    )


def test_get_script_default_is_empty():
    assert Transaction().script == b""


def test_set_script():
    value = bytearray(32)
    value[0] = 0x42
    transaction = Transaction()
    transaction.script = bytes(value)
    assert len(transaction.script) == 32


def test_system_fee_default_and_set():
    transaction = Transaction()
    assert transaction.system_fee == 0
    transaction.system_fee = 4200000000
    assert transaction.system_fee == 4200000000


def test_get_size():
    transaction = Transaction()
    transaction.script = b"\x42" + bytes(31)
    transaction.signers = []
    transaction.attributes = []
    transaction.witnesses = [Witness(b"", b"")]
    assert transaction.version == 0
    assert len(transaction.script) == 32
    assert transaction.size() == 63


def test_script_hashes_for_verifying():
    transaction = Transaction(signers=[Signer(UInt160(), WitnessScope.GLOBAL)])
    assert transaction.script_hashes_for_verifying() == [UInt160()]


def test_deserialize():
    transaction = Transaction()
    transaction.deserialize(BinaryReader(bytes.fromhex(SIGNED_HEX)))
    assert transaction.version == 0
    assert transaction.nonce == 0x01020304
    assert transaction.system_fee == 100000000
    assert transaction.network_fee == 1
    assert transaction.valid_until_block == 0x01020304
    assert len(transaction.signers) == 1
    assert len(transaction.attributes) == 0
    assert len(transaction.script) == 1
    assert len(transaction.witnesses) == 0


def test_deserialize_unsigned():
    transaction = Transaction()
    transaction.deserialize_unsigned(BinaryReader(bytes.fromhex(SIGNED_HEX)))
    assert transaction.nonce == 0x01020304
    assert transaction.system_fee == 100000000
    assert transaction.network_fee == 1
    assert transaction.valid_until_block == 0x01020304
    assert len(transaction.signers) == 1
    assert len(transaction.attributes) == 0
    assert transaction.script == bytes([PUSH1])


def test_deserialize_witnesses():
    transaction = Transaction(witnesses=[Witness(b"\x01", b"\x02")])
    transaction.deserialize_witnesses(BinaryReader(bytes.fromhex("00")))
    assert transaction.witnesses == []


def test_header_size():
    assert Transaction().header_size() == 25


def test_to_bytes():
    expected = HEAD_HEX + "00" + "00" + "0111" + "00"
    assert _sample().to_bytes().hex() == expected


def test_serialize():
    writer = BinaryWriter()
    _sample().serialize(writer)
    assert writer.getvalue().hex() == HEAD_HEX + "00" + "00" + "0111" + "00"


def test_serialize_unsigned():
    writer = BinaryWriter()
    _sample().serialize_unsigned(writer)
    assert writer.getvalue().hex() == HEAD_HEX + "00" + "00" + "0111"


def test_serialize_witnesses():
    writer = BinaryWriter()
    _sample().serialize_witnesses(writer)
    assert writer.getvalue().hex() == "00"


def test_round_trip_with_content():
    transaction = Transaction(
        nonce=7,
        system_fee=10,
        network_fee=20,
        valid_until_block=99,
        signers=[Signer(UInt160.from_bytes(b"\x05"), WitnessScope.CALLED_BY_ENTRY)],
        attributes=[HighPriorityAttribute(), OracleResponseAttribute(id=3, result=b"\x09")],
        script=b"\x11\x40",
        witnesses=[Witness(b"\x0c\x01\xaa", b"\x51")],
    )
    data = transaction.to_bytes()
    restored = Transaction.from_bytes(data)
    assert restored.to_bytes() == data
    assert restored.attributes[1] == OracleResponseAttribute(id=3, result=b"\x09")
    assert restored.hash() == transaction.hash()


def test_hash_changes_when_a_field_changes():
    transaction = _sample()
    first = transaction.hash()
    assert transaction.hash() == first
    transaction.nonce = 5
    assert transaction.hash() != first
    assert transaction.hash() == Transaction(
        nonce=5,
        system_fee=GAS_FACTOR,
        network_fee=1,
        valid_until_block=0x01020304,
        script=bytes([PUSH1]),
    ).hash()


def test_fee_per_byte():
    transaction = Transaction(script=b"\x42" + bytes(31), witnesses=[Witness()])
    transaction.network_fee = 6300
    assert transaction.fee_per_byte() == 100


def test_sender():
    account = UInt160.from_bytes(b"\x07")
    transaction = Transaction(signers=[Signer(account), Signer(UInt160())])
    assert transaction.sender() == account
    with pytest.raises(ValueError):
        Transaction().sender()


def test_token_hashes():
    assert NEO_TOKEN == UInt160.from_string("0xef4073a0f2b305a38ec4050e4d3d28bc40ea63f5")
    assert GAS_TOKEN == UInt160.from_string("0xd2a4cff31913016155e38e474a2c06d08be276cf")
    assert str(UInt160.from_string("0xef4073a0f2b305a38ec4050e4d3d28bc40ea63f5")) == (
        "ef4073a0f2b305a38ec4050e4d3d28bc40ea63f5"
    )


def test_rejects_bad_version():
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex("01" + SIGNED_HEX[2:]))


def test_rejects_negative_system_fee():
    data = "00" "04030201" "ffffffffffffffff" + SIGNED_HEX[26:]
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex(data))


def test_rejects_fee_overflow():
    data = (
        "00" "04030201" "ffffffffffffff7f" "0100000000000000" + SIGNED_HEX[42:]
    )
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex(data))


def test_rejects_zero_signers():
    data = HEAD_HEX + "00" + "00" + "0111" + "00"
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex(data))


def test_rejects_empty_script():
    data = HEAD_HEX + "01" + "00" * 21 + "00" + "00" + "00"
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex(data))


def test_rejects_duplicate_signer():
    data = HEAD_HEX + "02" + "00" * 21 + "00" * 21 + "00" + "0111" + "00"
    with pytest.raises(FormatError):
        Transaction.from_bytes(bytes.fromhex(data))


def test_rejects_duplicate_attribute():
    transaction = _sample()
    transaction.signers = [Signer()]
    transaction.attributes = [HighPriorityAttribute(), HighPriorityAttribute()]
    with pytest.raises(FormatError):
        Transaction.from_bytes(transaction.to_bytes())