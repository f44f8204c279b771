"""Witness scopes that restrict where a signer's witness is valid."""

from __future__ import annotations

from enum import IntFlag


class WitnessScope(IntFlag):
    """Flags describing the contexts a witness applies to."""

    NONE = 0x00
    CALLED_BY_ENTRY = 0x01
    CUSTOM_CONTRACTS = 0x10
    CUSTOM_GROUPS = 0x20
    GLOBAL = 0x80

    def compare_to(self, other: int) -> int:
        """Return -1, 0 or 1 comparing the numeric values."""
        mine, theirs = int(self), int(other)
        return (mine > theirs) - (mine < theirs)

    def __str__(self) -> str:
        return _SCOPE_NAMES.get(int(self), "")


_SCOPE_NAMES = {
    0x00: "None",
    0x01: "CalledByEntry",
    0x10: "CustomContracts",
    0x20: "CustomGroups",
    0x80: "Global",
}