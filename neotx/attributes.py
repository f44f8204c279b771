"""Transaction attributes and their binary encoding."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterable

from .binary import BinaryReader, BinaryWriter, FormatError, var_bytes_size, var_size


class TransactionAttributeType(IntEnum):
    HIGH_PRIORITY = 0x01
    ORACLE_RESPONSE = 0x11

    @classmethod
    def is_defined(cls, value: int) -> bool:
        return value in cls._value2member_map_

    def __str__(self) -> str:
        return _ATTRIBUTE_TYPE_NAMES[self.value]


_ATTRIBUTE_TYPE_NAMES = {0x01: "HighPriority", 0x11: "OracleResponse"}


class OracleResponseCode(IntEnum):
    SUCCESS = 0x00
    PROTOCOL_NOT_SUPPORTED = 0x10
    CONSENSUS_UNREACHABLE = 0x12
    NOT_FOUND = 0x14
    TIMEOUT = 0x16
    FORBIDDEN = 0x18
    RESPONSE_TOO_LARGE = 0x1A
    INSUFFICIENT_FUNDS = 0x1C
    ERROR = 0xFF

    @classmethod
    def is_defined(cls, value: int) -> bool:
        return value in cls._value2member_map_


class TransactionAttribute(ABC):
    """Base class of attributes carried by a transaction."""

    attribute_type: ClassVar[TransactionAttributeType]
    allow_multiple: ClassVar[bool] = False

    @abstractmethod
    def size(self) -> int:
        """Encoded size including the type byte."""

    @abstractmethod
    def serialize_without_type(self, writer: BinaryWriter) -> None:
        """Write the attribute body."""

    @abstractmethod
    def deserialize_without_type(self, reader: BinaryReader) -> None:
        """Read the attribute body."""

    def serialize(self, writer: BinaryWriter) -> None:
        writer.write_byte(self.attribute_type)
        self.serialize_without_type(writer)

    def deserialize(self, reader: BinaryReader) -> None:
        found = reader.read_byte()
        if found != self.attribute_type:
            raise FormatError(f"format error: not {self.attribute_type}")
        self.deserialize_without_type(reader)


@dataclass
class HighPriorityAttribute(TransactionAttribute):
    """Marks a transaction as high priority; only the committee may use it."""

    attribute_type: ClassVar[TransactionAttributeType] = TransactionAttributeType.HIGH_PRIORITY

    def size(self) -> int:
        return 1

    def serialize_without_type(self, writer: BinaryWriter) -> None:
        pass

    def deserialize_without_type(self, reader: BinaryReader) -> None:
        pass


@dataclass
class OracleResponseAttribute(TransactionAttribute):
    """Carries an oracle's response; only the oracle may use it."""

    attribute_type: ClassVar[TransactionAttributeType] = TransactionAttributeType.ORACLE_RESPONSE
    MAX_RESULT_SIZE: ClassVar[int] = 65535

    id: int = 0
    code: OracleResponseCode = OracleResponseCode.SUCCESS
    result: bytes = b""

    def size(self) -> int:
        return 1 + 8 + 1 + var_bytes_size(self.result)

    def serialize_without_type(self, writer: BinaryWriter) -> None:
        writer.write_uint(self.id, 8)
        writer.write_byte(self.code)
        writer.write_var_bytes(self.result)

    def deserialize_without_type(self, reader: BinaryReader) -> None:
        self.id = reader.read_uint(8)
        code = reader.read_byte()
        if not OracleResponseCode.is_defined(code):
            raise FormatError("format error: oracle response code is not defined")
        self.code = OracleResponseCode(code)
        result = reader.read_var_bytes(self.MAX_RESULT_SIZE)
        if self.code != OracleResponseCode.SUCCESS and result:
            raise FormatError("format error: wrong result")
        self.result = result


_ATTRIBUTE_CLASSES: dict[int, type[TransactionAttribute]] = {
    TransactionAttributeType.HIGH_PRIORITY: HighPriorityAttribute,
    TransactionAttributeType.ORACLE_RESPONSE: OracleResponseAttribute,
}


def create_transaction_attribute(attribute_type: int) -> TransactionAttribute:
    """Create an empty attribute of the given type."""
    try:
        attribute_class = _ATTRIBUTE_CLASSES[attribute_type]
    except KeyError:
        raise FormatError("format error: invalid attribute type") from None
    return attribute_class()


def deserialize_attribute(reader: BinaryReader) -> TransactionAttribute:
    """Read a type byte and the attribute body that follows it."""
    attribute = create_transaction_attribute(reader.read_byte())
    attribute.deserialize_without_type(reader)
    return attribute


def attributes_var_size(attributes: Iterable[TransactionAttribute]) -> int:
    """Encoded size of a count-prefixed list of attributes."""
    items = list(attributes)
    return var_size(len(items)) + sum(item.size() for item in items)