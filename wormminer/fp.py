"""Elements of the BN254 scalar field, represented as plain integers."""

from __future__ import annotations

MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617
GENERATOR = 7
BYTE_LENGTH = 32

_DECIMAL_DIGITS = frozenset("0123456789")


def _check(value: int) -> int:
    if not 0 <= value < MODULUS:
        raise ValueError(f"{value} is not a canonical field element")
    return value


def from_be_bytes(data: bytes) -> int:
    """Read big-endian bytes of any length as an integer reduced modulo the field."""
    return int.from_bytes(bytes(data), "big") % MODULUS


def from_le_bytes(data: bytes) -> int:
    """Decode a canonical 32-byte little-endian field element."""
    raw = bytes(data)
    if len(raw) != BYTE_LENGTH:
        raise ValueError(f"expected {BYTE_LENGTH} bytes, got {len(raw)}")
    return _check(int.from_bytes(raw, "little"))


def to_le_bytes(value: int) -> bytes:
    """Encode a field element as 32 little-endian bytes."""
    return _check(value).to_bytes(BYTE_LENGTH, "little")


def from_str(text: str) -> int:
    """Parse a decimal string into a field element, reducing it modulo the field.

    Empty strings, non-digit characters and leading zeros are rejected.
    """
    if not text:
        raise ValueError("empty field element string")
    if not set(text) <= _DECIMAL_DIGITS:
        raise ValueError(f"invalid decimal field element: {text!r}")
    if text == "0":
        return 0
    if text[0] == "0":
        raise ValueError(f"leading zero in field element: {text!r}")
    return int(text) % MODULUS