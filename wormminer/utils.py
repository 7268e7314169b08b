"""Burn keys, burn addresses, proof-of-burn circuit inputs and prover output."""

from __future__ import annotations

import json
import secrets
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from Crypto.Hash import keccak

from . import fp
from .poseidon2 import poseidon2

U256_MAX = (1 << 256) - 1
ADDRESS_LENGTH = 20

MAX_LAYERS = 16
MAX_LAYER_LEN = 4 * 136
MAX_HEADER_LEN = 8 * 136
EMPTY_LAYER_LEN = 32

_BURN_KEY_SUFFIX = b"EIP-7503"


class RlpError(ValueError):
    """Raised when RLP data is malformed."""


def _check_u256(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if not 0 <= value <= U256_MAX:
        raise ValueError(f"{name} does not fit in 256 bits: {value}")
    return value


def _parse_u256(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"not a 256-bit integer: {value!r}")
    if isinstance(value, int):
        return _check_u256(value, "value")
    if not isinstance(value, str):
        raise ValueError(f"not a 256-bit integer: {value!r}")
    text = value.strip()
    if not text or "_" in text:
        raise ValueError(f"not a 256-bit integer: {value!r}")
    prefixes = {"0x": 16, "0o": 8, "0b": 2}
    base = prefixes.get(text[:2].lower(), 10)
    digits = text[2:] if base != 10 else text
    try:
        parsed = int(digits, base)
    except ValueError:
        raise ValueError(f"not a 256-bit integer: {value!r}") from None
    if digits.startswith(("+", "-")):
        raise ValueError(f"not a 256-bit integer: {value!r}")
    return _check_u256(parsed, "value")


def _u256_list(items: Any, length: int, name: str) -> tuple[int, ...]:
    if not isinstance(items, list) or len(items) != length:
        raise ValueError(f"{name} must be a list of {length} integers")
    return tuple(_parse_u256(item) for item in items)


def _hex(value: int) -> str:
    return f"0x{value:x}"


@dataclass(frozen=True)
class RapidsnarkProof:
    """A Groth16 proof as produced by the prover."""

    pi_a: tuple[int, int, int]
    pi_b: tuple[tuple[int, int], tuple[int, int], tuple[int, int]]
    pi_c: tuple[int, int, int]
    protocol: str

    @classmethod
    def from_dict(cls, data: dict) -> RapidsnarkProof:
        """Build a proof from its JSON object; unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ValueError("proof must be a JSON object")
        try:
            pi_a, pi_b, pi_c, protocol = (
                data["pi_a"], data["pi_b"], data["pi_c"], data["protocol"],
            )
        except KeyError as exc:
            raise ValueError(f"proof is missing field {exc.args[0]!r}") from None
        if not isinstance(pi_b, list) or len(pi_b) != 3:
            raise ValueError("pi_b must be a list of 3 pairs")
        if not isinstance(protocol, str):
            raise ValueError("protocol must be a string")
        return cls(
            pi_a=_u256_list(pi_a, 3, "pi_a"),
            pi_b=tuple(_u256_list(pair, 2, "pi_b entry") for pair in pi_b),
            pi_c=_u256_list(pi_c, 3, "pi_c"),
            protocol=protocol,
        )

    def to_dict(self) -> dict:
        """Return the JSON object form, with integers as hex strings."""
        return {
            "pi_a": [_hex(v) for v in self.pi_a],
            "pi_b": [[_hex(v) for v in pair] for pair in self.pi_b],
            "pi_c": [_hex(v) for v in self.pi_c],
            "protocol": self.protocol,
        }


@dataclass(frozen=True)
class RapidsnarkOutput:
    """A proof together with its public signals."""

    proof: RapidsnarkProof
    public: tuple[int, ...]

    @classmethod
    def from_json(cls, text: str | bytes) -> RapidsnarkOutput:
        """Parse the combined JSON document."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("output must be a JSON object")
        try:
            proof, public = data["proof"], data["public"]
        except KeyError as exc:
            raise ValueError(f"output is missing field {exc.args[0]!r}") from None
        if not isinstance(public, list):
            raise ValueError("public must be a list")
        return cls(
            proof=RapidsnarkProof.from_dict(proof),
            public=tuple(_parse_u256(item) for item in public),
        )

    def to_json(self) -> str:
        """Serialise to compact JSON."""
        return json.dumps(
            {"proof": self.proof.to_dict(), "public": [_hex(v) for v in self.public]},
            separators=(",", ":"),
        )


@dataclass(frozen=True)
class AccountProof:
    """The parts of an account proof that the circuit input needs."""

    balance: int
    account_proof: Sequence[bytes] = field(default_factory=tuple)


@dataclass(frozen=True)
class RlpLeaf:
    """A Merkle-Patricia trie leaf: encoded key path and value."""

    key: bytes
    value: bytes


def keccak256(data: bytes) -> bytes:
    """Return the Keccak-256 digest of ``data``."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def _address_bytes(address: bytes | str) -> bytes:
    if isinstance(address, str):
        text = address[2:] if address[:2].lower() == "0x" else address
        if len(text) != 2 * ADDRESS_LENGTH:
            raise ValueError(f"invalid address: {address!r}")
        try:
            return bytes.fromhex(text)
        except ValueError:
            raise ValueError(f"invalid address: {address!r}") from None
    raw = bytes(address)
    if len(raw) != ADDRESS_LENGTH:
        raise ValueError(f"an address has {ADDRESS_LENGTH} bytes, got {len(raw)}")
    return raw


def to_checksum_address(address: bytes | str) -> str:
    """Format an address in mixed-case checksum form."""
    lower = _address_bytes(address).hex()
    digest = keccak256(lower.encode("ascii")).hex()
    return "0x" + "".join(
        ch.upper() if int(h, 16) >= 8 else ch for ch, h in zip(lower, digest)
    )


def _read_header(buf: bytes, pos: int) -> tuple[bool, int, int]:
    """Return (is_list, payload_start, payload_length) for the item at ``pos``."""
    if pos >= len(buf):
        raise RlpError("input too short")
    first = buf[pos]
    if first < 0x80:
        return False, pos, 1
    if first <= 0xB7 or 0xC0 <= first <= 0xF7:
        is_list = first >= 0xC0
        length = first - (0xC0 if is_list else 0x80)
        start = pos + 1
        if not is_list and length == 1:
            if start >= len(buf):
                raise RlpError("input too short")
            if buf[start] < 0x80:
                raise RlpError("non-canonical single byte")
    else:
        is_list = first >= 0xC0
        size = first - (0xF7 if is_list else 0xB7)
        size_bytes = buf[pos + 1 : pos + 1 + size]
        if len(size_bytes) != size:
            raise RlpError("input too short")
        if size_bytes[0] == 0:
            raise RlpError("leading zero in length")
        length = int.from_bytes(size_bytes, "big")
        if length < 56:
            raise RlpError("non-canonical size")
        start = pos + 1 + size
    if start + length > len(buf):
        raise RlpError("input too short")
    return is_list, start, length


def _read_bytes(buf: bytes, pos: int) -> tuple[bytes, int]:
    is_list, start, length = _read_header(buf, pos)
    if is_list:
        raise RlpError("unexpected list")
    return buf[start : start + length], start + length


def decode_rlp_leaf(data: bytes) -> RlpLeaf:
    """Decode an RLP list of two byte strings; trailing data is ignored."""
    buf = bytes(data)
    is_list, start, length = _read_header(buf, 0)
    if not is_list:
        raise RlpError("unexpected string")
    end = start + length
    payload = buf[:end]
    key, pos = _read_bytes(payload, start)
    value, pos = _read_bytes(payload, pos)
    if pos != end:
        raise RlpError("list length mismatch")
    return RlpLeaf(key=key, value=value)


def find_burn_key(pow_min_zero_bytes: int, start: int | None = None) -> int:
    """Search upwards from ``start`` (random if not given) for a burn key.

    A candidate qualifies when Keccak-256 of its 32 big-endian bytes followed
    by ``EIP-7503`` begins with ``pow_min_zero_bytes`` zero bytes. The result
    is the candidate reduced into the field.
    """
    if not 0 <= pow_min_zero_bytes <= 32:
        raise ValueError("pow_min_zero_bytes must be between 0 and 32")
    current = secrets.randbelow(fp.MODULUS) if start is None else _check_u256(start, "start")
    prefix = bytes(pow_min_zero_bytes)
    while True:
        candidate = current.to_bytes(32, "big")
        if keccak256(candidate + _BURN_KEY_SUFFIX).startswith(prefix):
            return fp.from_be_bytes(candidate)
        current = (current + 1) & U256_MAX


def generate_burn_address(burn_key: int, receiver: bytes | str) -> bytes:
    """Derive the 20-byte burn address for a burn key and receiver."""
    receiver_fp = fp.from_be_bytes(_address_bytes(receiver))
    digest = fp.to_le_bytes(poseidon2([burn_key, receiver_fp]))
    return digest[12:32][::-1]


def _fit(data: bytes, length: int) -> list[int]:
    return list(data[:length]) + [0] * max(0, length - len(data))


def input_file(
    proof: AccountProof,
    header_bytes: bytes,
    burn_key: int,
    fee: int,
    spend: int,
    receiver: bytes | str,
) -> dict:
    """Build the JSON input of the proof-of-burn circuit."""
    layers_raw = [bytes(layer) for layer in proof.account_proof]
    if not layers_raw:
        raise ValueError("Leaf doesn't exist!")
    leaf = decode_rlp_leaf(layers_raw[-1])
    if not leaf.key:
        raise ValueError("Unexpected leaf-key prefix!")
    prefix = leaf.key[0] & 0xF0
    if prefix == 0x20:
        num_nibbles = 2 * len(leaf.key) - 2
    elif prefix == 0x30:
        num_nibbles = 2 * len(leaf.key) - 1
    else:
        raise ValueError("Unexpected leaf-key prefix!")

    layers = [_fit(layer, MAX_LAYER_LEN) for layer in layers_raw]
    layers += [[0] * MAX_LAYER_LEN for _ in range(MAX_LAYERS - len(layers))]
    layer_lens = [len(layer) for layer in layers_raw][:MAX_LAYERS]
    layer_lens += [EMPTY_LAYER_LEN] * (MAX_LAYERS - len(layer_lens))

    header = bytes(header_bytes)
    return {
        "balance": str(_check_u256(proof.balance, "balance")),
        "numLayers": len(layers_raw),
        "layerLens": layer_lens,
        "layers": layers,
        "blockHeader": _fit(header, MAX_HEADER_LEN),
        "blockHeaderLen": len(header),
        "receiverAddress": str(int.from_bytes(_address_bytes(receiver), "big")),
        "numLeafAddressNibbles": str(num_nibbles),
        "burnKey": str(int.from_bytes(fp.to_le_bytes(burn_key), "little")),
        "fee": str(_check_u256(fee, "fee")),
        "spend": str(_check_u256(spend, "spend")),
        "byteSecurityRelax": 0,
    }