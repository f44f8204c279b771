"""Collects the parameters and signatures needed to build witnesses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .binary import UInt160, _UIntBase
from .nep6 import Contract
from .witness import Witness

_PUSHINT8 = 0x00
_PUSHDATA1 = 0x0C
_PUSHDATA2 = 0x0D
_PUSHDATA4 = 0x0E
_PUSHT = 0x08
_PUSHF = 0x09
_PUSHM1 = 0x0F
_PUSH0 = 0x10
_PUSH1 = 0x11
_PUSH16 = 0x20
_SYSCALL = 0x41
_CHECK_MULTISIG = bytes.fromhex("9ed0dc3a")
_PUSHED_KEY_LENGTH = 35


def _push_bytes(data: bytes) -> bytes:
    length = len(data)
    if length < 0x100:
        return bytes([_PUSHDATA1, length]) + data
    if length < 0x10000:
        return bytes([_PUSHDATA2]) + length.to_bytes(2, "little") + data
    return bytes([_PUSHDATA4]) + length.to_bytes(4, "little") + data


def _push_integer(value: int) -> bytes:
    if value == -1:
        return bytes([_PUSHM1])
    if 0 <= value <= 16:
        return bytes([_PUSH0 + value])
    for opcode, size in enumerate((1, 2, 4, 8, 16, 32), start=_PUSHINT8):
        try:
            return bytes([opcode]) + value.to_bytes(size, "little", signed=True)
        except OverflowError:
            continue
    raise ValueError(f"integer {value} is too large to push")


def _push_parameter(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return _push_bytes(bytes(value))
    if isinstance(value, bool):
        return bytes([_PUSHT if value else _PUSHF])
    if isinstance(value, int):
        return _push_integer(value)
    if isinstance(value, str):
        return _push_bytes(value.encode("utf-8"))
    if isinstance(value, _UIntBase):
        return _push_bytes(value.to_bytes())
    raise TypeError(f"cannot push a parameter of type {type(value).__name__}")


def _read_push_int(script: bytes, pos: int) -> tuple[int, int] | None:
    if pos >= len(script):
        return None
    opcode = script[pos]
    if _PUSH1 <= opcode <= _PUSH16:
        return opcode - _PUSH0, pos + 1
    if opcode in (_PUSHINT8, _PUSHINT8 + 1):
        size = 1 if opcode == _PUSHINT8 else 2
        end = pos + 1 + size
        if end > len(script):
            return None
        return int.from_bytes(script[pos + 1:end], "little", signed=True), end
    return None


def _multisig_points(script: bytes) -> list[bytes] | None:
    """Public keys of a multi-signature script, or None if it is not one."""
    parsed = _read_push_int(script, 0)
    if parsed is None:
        return None
    least, pos = parsed
    points: list[bytes] = []
    while (
        pos + _PUSHED_KEY_LENGTH <= len(script)
        and script[pos] == _PUSHDATA1
        and script[pos + 1] == 33
    ):
        points.append(script[pos + 2:pos + _PUSHED_KEY_LENGTH])
        pos += _PUSHED_KEY_LENGTH
    if not points:
        return None
    parsed = _read_push_int(script, pos)
    if parsed is None:
        return None
    count, pos = parsed
    if count != len(points) or not 1 <= least <= count:
        return None
    if script[pos:] != bytes([_SYSCALL]) + _CHECK_MULTISIG:
        return None
    return points


@dataclass
class ContextItem:
    """Parameters and collected signatures for one contract."""

    script: bytes
    parameter_types: list[str]
    parameters: list[Any]
    signatures: dict[bytes, bytes] | None = field(default_factory=dict)


class ContractParametersContext:
    """Gathers what each script hash of a verifiable needs to be witnessed."""

    def __init__(self, verifiable) -> None:
        self.verifiable = verifiable
        self.context_items: dict[UInt160, ContextItem] = {}
        self._script_hashes: list[UInt160] | None = None

    def script_hashes(self) -> list[UInt160]:
        if self._script_hashes is None:
            self._script_hashes = list(self.verifiable.script_hashes_for_verifying())
        return self._script_hashes

    def completed(self) -> bool:
        """True once every script hash has an item with all parameters set."""
        if len(self.context_items) < len(self.script_hashes()):
            return False
        zero = UInt160()
        for script_hash, item in self.context_items.items():
            if script_hash == zero:
                return False
            if any(value is None for value in item.parameters):
                return False
        return True

    def _create_item(self, contract: Contract) -> ContextItem | None:
        script_hash = contract.script_hash()
        item = self.context_items.get(script_hash)
        if item is not None:
            return item
        if script_hash not in self.script_hashes():
            return None
        item = ContextItem(
            script=contract.script,
            parameter_types=list(contract.parameter_list),
            parameters=[None] * len(contract.parameter_list),
        )
        self.context_items[script_hash] = item
        return item

    def add_item_with_index(self, contract: Contract, index: int, parameter: Any) -> bool:
        item = self._create_item(contract)
        if item is None:
            return False
        item.parameters[index] = parameter
        return True

    def add_item_with_params(self, contract: Contract, parameters) -> bool:
        item = self._create_item(contract)
        if item is None:
            return False
        for index, value in enumerate(parameters or ()):
            item.parameters[index] = value
        return True

    def add_signature(self, contract: Contract, public_key: bytes, signature: bytes) -> bool:
        public_key = bytes(public_key)
        points = _multisig_points(contract.script)
        if points is not None:
            return self._add_multisig_signature(contract, points, public_key, signature)
        signature_indexes = [
            index for index, kind in enumerate(contract.parameter_list) if kind == "Signature"
        ]
        if len(signature_indexes) > 1:
            raise ValueError("not supported operation")
        if not signature_indexes:
            return False
        item = self._create_item(contract)
        if item is None:
            return False
        if item.signatures is None:
            item.signatures = {}
        if public_key in item.signatures:
            return False
        item.signatures[public_key] = signature
        item.parameters[signature_indexes[0]] = signature
        return True

    def _add_multisig_signature(
        self, contract: Contract, points: list[bytes], public_key: bytes, signature: bytes
    ) -> bool:
        if public_key not in points:
            return False
        item = self._create_item(contract)
        if item is None:
            return False
        if all(value is not None for value in item.parameters):
            return False
        if item.signatures is None:
            item.signatures = {}
        if public_key in item.signatures:
            return False
        item.signatures[public_key] = signature
        if len(item.signatures) == len(contract.parameter_list):
            positions = {point: index for index, point in enumerate(points)}
            ordered = sorted(
                item.signatures.items(), key=lambda pair: positions[pair[0]], reverse=True
            )
            for index, (_, collected) in enumerate(ordered):
                if not self.add_item_with_index(contract, index, collected):
                    raise ValueError("invalid operation when adding item")
            item.signatures = None
        return True

    def get_parameter(self, script_hash: UInt160, index: int) -> Any:
        parameters = self.get_parameters(script_hash)
        if parameters is None:
            return None
        return parameters[index]

    def get_parameters(self, script_hash: UInt160) -> list[Any] | None:
        item = self.context_items.get(script_hash)
        return None if item is None else item.parameters

    def get_signatures(self, script_hash: UInt160) -> dict[bytes, bytes] | None:
        item = self.context_items.get(script_hash)
        return None if item is None else item.signatures

    def get_script(self, script_hash: UInt160) -> bytes | None:
        item = self.context_items.get(script_hash)
        return None if item is None else item.script

    def get_witnesses(self) -> list[Witness]:
        if not self.completed():
            raise ValueError("invalid operation when getting witnesses")
        witnesses: list[Witness] = []
        for script_hash in self.script_hashes():
            item = self.context_items[script_hash]
            invocation = b"".join(
                _push_parameter(value) for value in reversed(item.parameters)
            )
            witnesses.append(Witness(invocation, item.script or b""))
        return witnesses