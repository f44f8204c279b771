"""Types of the items on the virtual machine's evaluation stack."""

from __future__ import annotations

from enum import IntEnum


class StackItemType(IntEnum):
    """The type tag of a stack item."""

    ANY = 0x00
    POINTER = 0x10
    BOOLEAN = 0x20
    INTEGER = 0x21
    BYTE_STRING = 0x28
    BUFFER = 0x30
    ARRAY = 0x40
    STRUCT = 0x41
    MAP = 0x48
    INTEROP_INTERFACE = 0x60

    @classmethod
    def from_string(cls, text: str) -> StackItemType:
        """Look a type up by its display name, ignoring case."""
        try:
            return _BY_LOWER_NAME[text.lower()]
        except KeyError:
            raise ValueError(f"not supported string: {text!r}") from None

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    StackItemType.ANY: "Any",
    StackItemType.POINTER: "Pointer",
    StackItemType.BOOLEAN: "Boolean",
    StackItemType.INTEGER: "Integer",
    StackItemType.BYTE_STRING: "ByteString",
    StackItemType.BUFFER: "Buffer",
    StackItemType.ARRAY: "Array",
    StackItemType.STRUCT: "Struct",
    StackItemType.MAP: "Map",
    StackItemType.INTEROP_INTERFACE: "InteropInterface",
}

_BY_LOWER_NAME = {name.lower(): member for member, name in _DISPLAY_NAMES.items()}