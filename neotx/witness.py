"""Witnesses: invocation and verification scripts that prove a signature."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from .binary import BinaryReader, BinaryWriter, UInt160, hash160, var_bytes_size

# A committee multi-signature (11 of 21) needs 11 * (64 + 2) = 726 bytes.
MAX_INVOCATION_SCRIPT = 1024
# m + (PUSH_PubKey * 21) + length + null + syscall = 744 bytes.
MAX_VERIFICATION_SCRIPT = 1024
MAX_MULTISIG_KEYS = 1024

_PUSHINT8 = 0x00
_PUSHINT16 = 0x01
_PUSHDATA1 = 0x0C
_PUSHDATA2 = 0x0D
_PUSHDATA4 = 0x0E
_PUSHM1 = 0x0F
_PUSH0 = 0x10
_PUSH1 = 0x11
_SYSCALL = 0x41
_CHECK_SIG = bytes.fromhex("56e7b327")
_CHECK_MULTISIG = bytes.fromhex("9ed0dc3a")

_CURVE = ec.SECP256R1()
_SIGNATURE_LENGTH = 64
_PUSHED_SIGNATURE_LENGTH = 2 + _SIGNATURE_LENGTH
_PUSHED_KEY_LENGTH = 2 + 33


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
    if -128 <= value <= 127:
        return bytes([_PUSHINT8]) + value.to_bytes(1, "little", signed=True)
    if -32768 <= value <= 32767:
        return bytes([_PUSHINT16]) + value.to_bytes(2, "little", signed=True)
    raise ValueError(f"integer {value} is too large to push here")


def _public_key_sort_key(public_key: bytes) -> tuple[bytes, int]:
    return bytes(public_key[1:]), public_key[0]


def _load_private_key(private_key: bytes) -> ec.EllipticCurvePrivateKey:
    if len(private_key) != 32:
        raise ValueError("a private key must be 32 bytes")
    return ec.derive_private_key(int.from_bytes(private_key, "big"), _CURVE)


def _public_key_of(private_key: bytes) -> bytes:
    return _load_private_key(private_key).public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )


@dataclass
class Witness:
    """An invocation script (signatures) and a verification script (keys)."""

    invocation_script: bytes = b""
    verification_script: bytes = b""
    _script_hash: UInt160 | None = field(default=None, repr=False, compare=False)

    def script_hash(self) -> UInt160:
        """Hash of the verification script, or the given hash if there is none."""
        if self.verification_script or self._script_hash is None:
            self._script_hash = UInt160(hash160(self.verification_script))
        return self._script_hash

    def size(self) -> int:
        return var_bytes_size(self.invocation_script) + var_bytes_size(
            self.verification_script
        )

    def serialize(self, writer: BinaryWriter) -> None:
        writer.write_var_bytes(self.invocation_script)
        writer.write_var_bytes(self.verification_script)

    @classmethod
    def deserialize(cls, reader: BinaryReader) -> Witness:
        invocation = reader.read_var_bytes(MAX_INVOCATION_SCRIPT)
        verification = reader.read_var_bytes(MAX_VERIFICATION_SCRIPT)
        return cls(invocation, verification)

    def to_json(self) -> str:
        return json.dumps(
            {
                "invocation": self.invocation_script.hex(),
                "verification": self.verification_script.hex(),
            },
            separators=(",", ":"),
            sort_keys=True,
        )


def create_witness(invocation_script: bytes, verification_script: bytes) -> Witness:
    """Build a witness; the verification script must not be empty."""
    if not verification_script:
        raise ValueError("verificationScript should not be empty")
    verification = bytes(verification_script)
    return Witness(bytes(invocation_script), verification, UInt160(hash160(verification)))


def create_witness_with_script_hash(
    script_hash: UInt160, invocation_script: bytes
) -> Witness:
    """A witness with no verification script; the chain looks the contract up by hash."""
    return Witness(bytes(invocation_script), b"", script_hash)


def signature_redeem_script(public_key: bytes) -> bytes:
    """Verification script for a single compressed public key."""
    if len(public_key) != 33:
        raise ValueError("a compressed public key must be 33 bytes")
    return _push_bytes(bytes(public_key)) + bytes([_SYSCALL]) + _CHECK_SIG


def multisig_redeem_script(least: int, public_keys: Iterable[bytes]) -> bytes:
    """Verification script needing ``least`` signatures from the given keys."""
    keys = sorted((bytes(key) for key in public_keys), key=_public_key_sort_key)
    if not 1 <= least <= len(keys) <= MAX_MULTISIG_KEYS:
        raise ValueError(
            f"cannot require {least} signatures from {len(keys)} public keys"
        )
    if any(len(key) != 33 for key in keys):
        raise ValueError("a compressed public key must be 33 bytes")
    body = b"".join(_push_bytes(key) for key in keys)
    return (
        _push_integer(least)
        + body
        + _push_integer(len(keys))
        + bytes([_SYSCALL])
        + _CHECK_MULTISIG
    )


def sign_message(private_key: bytes, msg: bytes) -> bytes:
    """ECDSA P-256 / SHA-256 signature as 64 bytes of r followed by s."""
    der = _load_private_key(private_key).sign(bytes(msg), ec.ECDSA(hashes.SHA256()))
    r, s = decode_dss_signature(der)
    return r.to_bytes(32, "big") + s.to_bytes(32, "big")


def verify_signature(msg: bytes, signature: bytes, public_key: bytes) -> bool:
    """Check a 64-byte signature against an encoded public key."""
    if len(signature) != _SIGNATURE_LENGTH:
        return False
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(_CURVE, bytes(public_key))
    except ValueError:
        return False
    der = encode_dss_signature(
        int.from_bytes(signature[:32], "big"), int.from_bytes(signature[32:], "big")
    )
    try:
        key.verify(der, bytes(msg), ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True


def create_invocation_script(msg: bytes, private_keys: Iterable[bytes]) -> bytes:
    """Push a signature from each key, ordered by ascending public key."""
    ordered = sorted(
        private_keys, key=lambda private: _public_key_sort_key(_public_key_of(private))
    )
    return b"".join(_push_bytes(sign_message(key, msg)) for key in ordered)


def create_signature_witness(msg: bytes, private_key: bytes) -> Witness:
    invocation = _push_bytes(sign_message(private_key, msg))
    verification = signature_redeem_script(_public_key_of(private_key))
    return create_witness(invocation, verification)


def create_multi_signature_witness(
    msg: bytes,
    private_keys: Sequence[bytes],
    least: int,
    public_keys: Iterable[bytes],
) -> Witness:
    if len(private_keys) < least:
        raise ValueError(
            f"the multi-signature contract needs least {least} signatures"
        )
    invocation = create_invocation_script(msg, private_keys)
    verification = multisig_redeem_script(least, public_keys)
    return create_witness(invocation, verification)


def verify_signature_witness(msg: bytes, witness: Witness) -> bool:
    invocation = witness.invocation_script
    if len(invocation) != _PUSHED_SIGNATURE_LENGTH:
        return False
    if invocation[0] != _PUSHDATA1 or invocation[1] != _SIGNATURE_LENGTH:
        return False
    verification = witness.verification_script
    if len(verification) != 40:
        return False
    return verify_signature(msg, invocation[2:], verification[2:35])


def _verify_multisig(
    msg: bytes, signatures: Sequence[bytes], public_keys: Sequence[bytes]
) -> bool:
    m, n = len(signatures), len(public_keys)
    i = j = 0
    while i < m and j < n:
        if verify_signature(msg, signatures[i], public_keys[j]):
            i += 1
        j += 1
        if m - i > n - j:
            return False
    return i == m


def verify_multi_signature_witness(msg: bytes, witness: Witness) -> bool:
    invocation = witness.invocation_script
    verification = witness.verification_script
    if len(invocation) % _PUSHED_SIGNATURE_LENGTH or len(verification) < 6:
        return False
    m = len(invocation) // _PUSHED_SIGNATURE_LENGTH
    least = (verification[0] - _PUSH1 + 1) & 0xFF
    if m < least:
        return False
    signatures = [
        invocation[offset + 2:offset + _PUSHED_SIGNATURE_LENGTH]
        for offset in range(0, len(invocation), _PUSHED_SIGNATURE_LENGTH)
    ]
    n = (verification[-6] - _PUSH1 + 1) & 0xFF
    if m > n:
        return False
    if len(verification) < 1 + n * _PUSHED_KEY_LENGTH:
        return False
    public_keys = [
        verification[offset + 3:offset + 1 + _PUSHED_KEY_LENGTH]
        for offset in range(0, n * _PUSHED_KEY_LENGTH, _PUSHED_KEY_LENGTH)
    ]
    return _verify_multisig(msg, signatures, public_keys)