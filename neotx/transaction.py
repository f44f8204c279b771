"""Transactions: the signed, serializable unit of work sent to the chain."""

from __future__ import annotations

from typing import Callable, Iterable

from .attributes import TransactionAttribute, deserialize_attribute
from .binary import (
    BinaryReader,
    BinaryWriter,
    FormatError,
    UInt160,
    UInt256,
    calculate_hash,
)
from .signer import Signer
from .witness import Witness

TRANSACTION_VERSION = 0
MAX_TRANSACTION_SIZE = 102400
MAX_VALID_UNTIL_BLOCK_INCREMENT = 5760  # 24 hours
MAX_TRANSACTION_ATTRIBUTES = 16
MAX_SIGNERS = 16
MAX_SCRIPT_SIZE = 65535

NEO_TOKEN_ID = "0xef4073a0f2b305a38ec4050e4d3d28bc40ea63f5"
GAS_TOKEN_ID = "0xd2a4cff31913016155e38e474a2c06d08be276cf"
NEO_TOKEN = UInt160.from_string(NEO_TOKEN_ID)
GAS_TOKEN = UInt160.from_string(GAS_TOKEN_ID)

GAS_FACTOR = 100000000
EXEC_FEE_FACTOR = 30
FEE_PER_BYTE = 1000
ECDSA_VERIFY_PRICE = 1 << 15

_MAX_INT64 = 2**63 - 1


class _CachedField:
    """A transaction field whose assignment drops the cached hash and size."""

    def __init__(self, convert: Callable[[object], object]) -> None:
        self._convert = convert

    def __set_name__(self, owner: type, name: str) -> None:
        self._slot = f"_{name}"

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return getattr(instance, self._slot)

    def __set__(self, instance, value) -> None:
        setattr(instance, self._slot, self._convert(value))
        instance._hash = None
        instance._size = None


def _deserialize_signers(reader: BinaryReader, max_count: int) -> list[Signer]:
    count = reader.read_var_uint(max_count)
    if count == 0:
        raise FormatError("format error: signer count is zero")
    signers: list[Signer] = []
    for _ in range(count):
        signer = Signer.deserialize(reader)
        if any(seen.compare_to(signer) == 0 for seen in signers):
            raise FormatError("format error: duplicate signer")
        signers.append(signer)
    return signers


def _deserialize_attributes(
    reader: BinaryReader, max_count: int
) -> list[TransactionAttribute]:
    count = reader.read_var_uint(max(max_count, 0))
    attributes: list[TransactionAttribute] = []
    seen_types: set[int] = set()
    for _ in range(count):
        attribute = deserialize_attribute(reader)
        if not attribute.allow_multiple and attribute.attribute_type in seen_types:
            raise FormatError("format error: duplicate attribute")
        seen_types.add(attribute.attribute_type)
        attributes.append(attribute)
    return attributes


class Transaction:
    """A transaction; changing any field invalidates its cached hash and size."""

    version = _CachedField(int)
    nonce = _CachedField(int)
    system_fee = _CachedField(int)
    network_fee = _CachedField(int)
    valid_until_block = _CachedField(int)
    signers = _CachedField(list)
    attributes = _CachedField(list)
    script = _CachedField(bytes)
    witnesses = _CachedField(list)

    def __init__(
        self,
        *,
        version: int = TRANSACTION_VERSION,
        nonce: int = 0,
        system_fee: int = 0,
        network_fee: int = 0,
        valid_until_block: int = 0,
        signers: Iterable[Signer] = (),
        attributes: Iterable[TransactionAttribute] = (),
        script: bytes = b"",
        witnesses: Iterable[Witness] = (),
    ) -> None:
        self._hash: UInt256 | None = None
        self._size: int | None = None
        self.version = version
        self.nonce = nonce
        self.system_fee = system_fee
        self.network_fee = network_fee
        self.valid_until_block = valid_until_block
        self.signers = signers
        self.attributes = attributes
        self.script = script
        self.witnesses = witnesses

    def __repr__(self) -> str:
        return f"Transaction(nonce={self.nonce}, script={self.script.hex()!r})"

    def header_size(self) -> int:
        """Size of version, nonce, fees and valid-until-block: always 25."""
        return 1 + 4 + 8 + 8 + 4

    def hash(self) -> UInt256:
        if self._hash is None:
            self._hash = calculate_hash(self)
        return self._hash

    def size(self) -> int:
        if self._size is None:
            self._size = len(self.to_bytes())
        return self._size

    def sender(self) -> UInt160:
        """The first signer's account, which pays the fees."""
        if not self.signers:
            raise ValueError("transaction has no signers")
        return self.signers[0].account

    def fee_per_byte(self) -> int:
        """Network fee divided by size; only meaningful once the transaction is built."""
        return self.network_fee // self.size()

    def to_bytes(self) -> bytes:
        writer = BinaryWriter()
        self.serialize(writer)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> Transaction:
        transaction = cls()
        transaction.deserialize(BinaryReader(data))
        return transaction

    def serialize(self, writer: BinaryWriter) -> None:
        self.serialize_unsigned(writer)
        self.serialize_witnesses(writer)

    def serialize_unsigned(self, writer: BinaryWriter) -> None:
        writer.write_byte(self.version)
        writer.write_uint(self.nonce, 4)
        writer.write_int(self.system_fee, 8)
        writer.write_int(self.network_fee, 8)
        writer.write_uint(self.valid_until_block, 4)
        writer.write_var_uint(len(self.signers))
        for signer in self.signers:
            signer.serialize(writer)
        writer.write_var_uint(len(self.attributes))
        for attribute in self.attributes:
            attribute.serialize(writer)
        writer.write_var_bytes(self.script)

    def serialize_witnesses(self, writer: BinaryWriter) -> None:
        writer.write_var_uint(len(self.witnesses))
        for witness in self.witnesses:
            witness.serialize(writer)

    def deserialize(self, reader: BinaryReader) -> None:
        self.deserialize_unsigned(reader)
        self.deserialize_witnesses(reader)

    def deserialize_unsigned(self, reader: BinaryReader) -> None:
        version = reader.read_byte()
        if version > TRANSACTION_VERSION:
            raise FormatError("format error: version > 0")
        nonce = reader.read_uint(4)
        system_fee = reader.read_int(8)
        if system_fee < 0:
            raise FormatError("format error: sysfee < 0")
        network_fee = reader.read_int(8)
        if network_fee < 0:
            raise FormatError("format error: netfee < 0")
        if system_fee + network_fee > _MAX_INT64:
            raise FormatError("format error: overflow")
        valid_until_block = reader.read_uint(4)
        signers = _deserialize_signers(reader, MAX_SIGNERS)
        attributes = _deserialize_attributes(
            reader, MAX_TRANSACTION_ATTRIBUTES - len(signers)
        )
        script = reader.read_var_bytes(MAX_SCRIPT_SIZE)
        if not script:
            raise FormatError("format error: script is empty")
        self.version = version
        self.nonce = nonce
        self.system_fee = system_fee
        self.network_fee = network_fee
        self.valid_until_block = valid_until_block
        self.signers = signers
        self.attributes = attributes
        self.script = script

    def deserialize_witnesses(self, reader: BinaryReader) -> None:
        count = reader.read_var_uint()
        self.witnesses = [Witness.deserialize(reader) for _ in range(count)]

    def script_hashes_for_verifying(self) -> list[UInt160]:
        return [signer.account for signer in self.signers]