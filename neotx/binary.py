"""Little-endian binary encoding, fixed-size hash values and hashing helpers."""

from __future__ import annotations

import hashlib
from functools import total_ordering
from io import BytesIO

from Crypto.Hash import RIPEMD160

MAX_UINT64 = 2**64 - 1
DEFAULT_MAX_VAR_BYTES = 0x1000000


class FormatError(ValueError):
    """Raised when binary data does not follow the expected format."""


@total_ordering
class _UIntBase:
    """A fixed-size unsigned value stored as little-endian bytes."""

    SIZE = 0
    __slots__ = ("_data",)

    def __init__(self, data: bytes | None = None) -> None:
        raw = bytes(self.SIZE) if data is None else bytes(data)
        if len(raw) != self.SIZE:
            raise ValueError(
                f"{type(self).__name__} needs {self.SIZE} bytes, got {len(raw)}"
            )
        self._data = raw

    @classmethod
    def _padded(cls, data: bytes):
        raw = bytes(data)
        if len(raw) > cls.SIZE:
            raise ValueError(
                f"{cls.__name__} takes at most {cls.SIZE} bytes, got {len(raw)}"
            )
        return cls(raw + bytes(cls.SIZE - len(raw)))

    @classmethod
    def _parse_hex(cls, text: str):
        digits = text.strip()
        if digits[:2].lower() == "0x":
            digits = digits[2:]
        if len(digits) != cls.SIZE * 2:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE * 2} hex digits")
        try:
            raw = bytes.fromhex(digits)
        except ValueError as exc:
            raise ValueError(f"invalid hex string: {text!r}") from exc
        return cls(raw[::-1])

    def _key(self) -> int:
        return int.from_bytes(self._data, "little")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._data == other._data

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._data))

    def __str__(self) -> str:
        return self._data[::-1].hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


class UInt160(_UIntBase):
    """A 160-bit value such as a script hash."""

    SIZE = 20
    __slots__ = ()

    @classmethod
    def from_string(cls, text: str) -> "UInt160":
        """Parse the big-endian hex form, with or without a 0x prefix."""
        return cls._parse_hex(text)

    @classmethod
    def from_bytes(cls, data: bytes) -> "UInt160":
        """Build a value from little-endian bytes, zero-padding short input."""
        return cls._padded(data)

    def to_bytes(self) -> bytes:
        """Return the little-endian byte form."""
        return self._data


class UInt256(_UIntBase):
    """A 256-bit value such as a transaction hash."""

    SIZE = 32
    __slots__ = ()

    @classmethod
    def from_string(cls, text: str) -> "UInt256":
        """Parse the big-endian hex form, with or without a 0x prefix."""
        return cls._parse_hex(text)

    @classmethod
    def from_bytes(cls, data: bytes) -> "UInt256":
        """Build a value from little-endian bytes, zero-padding short input."""
        return cls._padded(data)

    def to_bytes(self) -> bytes:
        """Return the little-endian byte form."""
        return self._data


class BinaryReader:
    """Reads little-endian values from a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    def read_bytes(self, count: int) -> bytes:
        if count < 0:
            raise ValueError("count must not be negative")
        end = self._pos + count
        if end > len(self._data):
            raise FormatError("unexpected end of data")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint(self, size: int) -> int:
        return int.from_bytes(self.read_bytes(size), "little")

    def read_int(self, size: int) -> int:
        return int.from_bytes(self.read_bytes(size), "little", signed=True)

    def read_var_uint(self, max_value: int = MAX_UINT64) -> int:
        prefix = self.read_byte()
        if prefix == 0xFD:
            value = self.read_uint(2)
        elif prefix == 0xFE:
            value = self.read_uint(4)
        elif prefix == 0xFF:
            value = self.read_uint(8)
        else:
            value = prefix
        if value > max_value:
            raise FormatError(f"value {value} exceeds the limit {max_value}")
        return value

    def read_var_bytes(self, max_length: int = DEFAULT_MAX_VAR_BYTES) -> bytes:
        return self.read_bytes(self.read_var_uint(max_length))

    def read_uint160(self) -> UInt160:
        return UInt160(self.read_bytes(UInt160.SIZE))


class BinaryWriter:
    """Collects little-endian values into a byte string."""

    def __init__(self) -> None:
        self._buffer = BytesIO()

    def write_bytes(self, data: bytes) -> None:
        self._buffer.write(bytes(data))

    def write_byte(self, value: int) -> None:
        self.write_uint(value, 1)

    def write_uint(self, value: int, size: int) -> None:
        try:
            self._buffer.write(int(value).to_bytes(size, "little"))
        except OverflowError as exc:
            raise ValueError(f"{value} does not fit in {size} unsigned bytes") from exc

    def write_int(self, value: int, size: int) -> None:
        try:
            self._buffer.write(int(value).to_bytes(size, "little", signed=True))
        except OverflowError as exc:
            raise ValueError(f"{value} does not fit in {size} signed bytes") from exc

    def write_var_uint(self, value: int) -> None:
        if value < 0 or value > MAX_UINT64:
            raise ValueError(f"{value} is out of range for a variable-length integer")
        if value < 0xFD:
            self.write_byte(value)
        elif value <= 0xFFFF:
            self.write_byte(0xFD)
            self.write_uint(value, 2)
        elif value <= 0xFFFFFFFF:
            self.write_byte(0xFE)
            self.write_uint(value, 4)
        else:
            self.write_byte(0xFF)
            self.write_uint(value, 8)

    def write_var_bytes(self, data: bytes) -> None:
        self.write_var_uint(len(data))
        self.write_bytes(data)

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


def var_size(count: int) -> int:
    """Encoded size of a variable-length integer."""
    if count < 0xFD:
        return 1
    if count <= 0xFFFF:
        return 3
    if count <= 0xFFFFFFFF:
        return 5
    return 9


def var_bytes_size(data: bytes) -> int:
    """Encoded size of a length-prefixed byte string."""
    return var_size(len(data)) + len(data)


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160 of the SHA-256 of the data."""
    return RIPEMD160.new(sha256(data)).digest()


def get_sign_data(verifiable, magic: int) -> bytes:
    """The bytes to sign: the network magic followed by the object's hash."""
    writer = BinaryWriter()
    writer.write_uint(magic, 4)
    writer.write_bytes(verifiable.hash().to_bytes())
    return writer.getvalue()


def calculate_hash(verifiable) -> UInt256:
    """SHA-256 of the object's unsigned serialization."""
    writer = BinaryWriter()
    verifiable.serialize_unsigned(writer)
    return UInt256(sha256(writer.getvalue()))