"""NEP-6 wallet contracts and scrypt parameters."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .binary import UInt160, hash160

_PARAMETER_TYPE_NAMES = (
    "Any",
    "Boolean",
    "Integer",
    "ByteArray",
    "String",
    "Hash160",
    "Hash256",
    "PublicKey",
    "Signature",
    "Array",
    "Map",
    "InteropInterface",
    "Void",
)
_CANONICAL_TYPES = {name.lower(): name for name in _PARAMETER_TYPE_NAMES}


def _canonical_parameter_type(name: str) -> str:
    try:
        return _CANONICAL_TYPES[name.lower()]
    except KeyError:
        raise ValueError(f"unknown contract parameter type: {name!r}") from None


@dataclass
class ScryptParameters:
    """Parameters of the scrypt key derivation."""

    n: int = 16384
    r: int = 8
    p: int = 8


DEFAULT_SCRYPT_PARAMETERS = ScryptParameters(16384, 8, 8)


@dataclass
class NEP6ParameterDescriptor:
    """Name and type of one contract parameter."""

    name: str
    type: str


@dataclass
class Contract:
    """A verification script and the types of the parameters it takes."""

    script: bytes
    parameter_list: list[str] = field(default_factory=list)

    def script_hash(self) -> UInt160:
        return UInt160(hash160(self.script))


@dataclass
class NEP6Contract:
    """A contract as stored in a NEP-6 wallet file."""

    script: str
    parameters: list[NEP6ParameterDescriptor] = field(default_factory=list)
    deployed: bool = False

    @classmethod
    def create(
        cls,
        script: bytes,
        parameter_list: Sequence[str],
        parameter_names: Sequence[str],
        deployed: bool = False,
    ) -> NEP6Contract:
        if len(parameter_list) != len(parameter_names):
            raise ValueError("parameter length does not match")
        descriptors = [
            NEP6ParameterDescriptor(name, _canonical_parameter_type(kind))
            for kind, name in zip(parameter_list, parameter_names)
        ]
        return cls(base64.b64encode(bytes(script)).decode("ascii"), descriptors, deployed)

    def script_bytes(self) -> bytes:
        return base64.b64decode(self.script, validate=True)

    def script_hash(self) -> UInt160:
        return UInt160(hash160(self.script_bytes()))

    def to_contract(self) -> Contract:
        parameter_list = [
            _canonical_parameter_type(descriptor.type) for descriptor in self.parameters
        ]
        return Contract(self.script_bytes(), parameter_list)

    def to_json(self) -> dict[str, Any]:
        return {
            "script": self.script,
            "parameters": [
                {"name": descriptor.name, "type": descriptor.type}
                for descriptor in self.parameters
            ],
            "deployed": self.deployed,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> NEP6Contract:
        parameters = [
            NEP6ParameterDescriptor(item["name"], item["type"])
            for item in data.get("parameters") or []
        ]
        return cls(data["script"], parameters, bool(data.get("deployed", False)))