import json

import pytest

from wormminer import fp
from wormminer.utils import (
    AccountProof,
    RapidsnarkOutput,
    RapidsnarkProof,
    RlpLeaf,
    decode_rlp_leaf,
    find_burn_key,
    generate_burn_address,
    input_file,
    keccak256,
    to_checksum_address,
)

RECEIVER = bytes(range(1, 21))


def _leaf(key: bytes, value: bytes) -> bytes:
    # short strings and a short list only (all lengths < 56)
    payload = bytes([0x80 + len(key)]) + key + bytes([0x80 + len(value)]) + value
    return bytes([0xC0 + len(payload)]) + payload


def _proof_dict():
    return {
        "pi_a": ["1", "2", "1"],
        "pi_b": [["3", "4"], ["5", "6"], ["1", "0"]],
        "pi_c": ["7", "8", "1"],
        "protocol": "groth16",
        "curve": "bn128",
    }


def test_keccak256_empty_input():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_keccak256_digest_length_and_determinism():
    assert len(keccak256(b"EIP-7503")) == 32
    assert keccak256(b"abc") == keccak256(bytearray(b"abc"))


def test_checksum_address_known_vector():
    expected = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
    assert to_checksum_address(bytes.fromhex(expected[2:].lower())) == expected


def test_checksum_address_accepts_hex_string():
    as_text = "0x" + RECEIVER.hex()
    assert to_checksum_address(as_text) == to_checksum_address(RECEIVER)
    assert to_checksum_address(as_text).lower() == as_text


def test_checksum_address_rejects_wrong_length():
    with pytest.raises(ValueError):
        to_checksum_address(b"\x00" * 19)


def test_decode_rlp_leaf_short_items():
    data = _leaf(b"\x20\xab\xcd", b"\x01\x02")
    assert decode_rlp_leaf(data) == RlpLeaf(key=b"\x20\xab\xcd", value=b"\x01\x02")


def test_decode_rlp_leaf_single_byte_and_trailing_data():
    data = bytes([0xC3, 0x82, 0x30, 0x01, 0x05]) + b"\xff\xff"
    assert decode_rlp_leaf(data) == RlpLeaf(key=b"\x30\x01", value=b"\x05")


def test_decode_rlp_leaf_long_string():
    key = b"\x20\x01"
    value = bytes(range(60))
    payload = bytes([0x82]) + key + bytes([0xB8, 60]) + value
    data = bytes([0xF8, len(payload)]) + payload
    leaf = decode_rlp_leaf(data)
    assert leaf.key == key
    assert leaf.value == value


@pytest.mark.parametrize(
    "data",
    [
        bytes([0x83, 0x20, 0x01, 0x02]),  # a string, not a list
        bytes([0xC5, 0x82, 0x20]),  # truncated
        bytes([0xC4, 0x81, 0x05, 0x81, 0x80]),  # non-canonical single byte
        bytes([0xC6, 0x81, 0x80, 0x81, 0x80, 0x81, 0x80]),  # three items
        bytes([0xC4, 0xC1, 0x80, 0x81, 0x80]),  # nested list as key
        bytes([0xC5, 0xB8, 0x02, 0x20, 0x01, 0x80]),  # long form for short string
        b"",
    ],
)
def test_decode_rlp_leaf_rejects_malformed(data):
    with pytest.raises(ValueError):
        decode_rlp_leaf(data)


def test_find_burn_key_without_work_returns_start():
    assert find_burn_key(0, start=5) == 5


def test_find_burn_key_reduces_into_field():
    assert find_burn_key(0, start=fp.MODULUS + 3) == 3


def test_find_burn_key_meets_work_requirement():
    start = 123456789
    key = find_burn_key(1, start=start)
    assert key >= start
    assert keccak256(key.to_bytes(32, "big") + b"EIP-7503")[0] == 0
    for candidate in range(start, key):
        assert keccak256(candidate.to_bytes(32, "big") + b"EIP-7503")[0] != 0


def test_find_burn_key_random_start_is_field_element():
    key = find_burn_key(0)
    assert 0 <= key < fp.MODULUS


def test_find_burn_key_rejects_impossible_requirement():
    with pytest.raises(ValueError):
        find_burn_key(33, start=0)


def test_generate_burn_address_properties():
    addr = generate_burn_address(42, RECEIVER)
    assert len(addr) == 20
    assert addr == generate_burn_address(42, "0x" + RECEIVER.hex())
    assert addr != generate_burn_address(43, RECEIVER)
    assert addr != generate_burn_address(42, bytes(20))


def test_generate_burn_address_rejects_bad_input():
    with pytest.raises(ValueError):
        generate_burn_address(fp.MODULUS, RECEIVER)
    with pytest.raises(ValueError):
        generate_burn_address(1, b"\x01\x02")


def test_input_file_layout():
    leaf = _leaf(b"\x20" + bytes(32), b"\xc0")
    branch = bytes(range(100))
    header = bytes(range(200))
    proof = AccountProof(balance=10**18, account_proof=[branch, leaf])
    result = input_file(proof, header, 77, 5, 6, RECEIVER)

    assert result["numLeafAddressNibbles"] == "64"
    assert result["balance"] == str(10**18)
    assert result["numLayers"] == 2
    assert result["layerLens"] == [len(branch), len(leaf)] + [32] * 14
    assert len(result["layers"]) == 16
    assert all(len(layer) == 544 for layer in result["layers"])
    assert result["layers"][0][: len(branch)] == list(branch)
    assert set(result["layers"][0][len(branch):]) == {0}
    assert set(result["layers"][5]) == {0}
    assert len(result["blockHeader"]) == 1088
    assert result["blockHeader"][:200] == list(header)
    assert result["blockHeaderLen"] == 200
    assert result["receiverAddress"] == str(int.from_bytes(RECEIVER, "big"))
    assert result["burnKey"] == "77"
    assert result["fee"] == "5"
    assert result["spend"] == "6"
    assert result["byteSecurityRelax"] == 0
    assert json.loads(json.dumps(result)) == result


def test_input_file_odd_leaf_key_has_one_more_nibble():
    even = AccountProof(balance=1, account_proof=[_leaf(b"\x20" + bytes(32), b"\x01")])
    odd = AccountProof(balance=1, account_proof=[_leaf(b"\x3a" + bytes(32), b"\x01")])
    n_even = int(input_file(even, b"", 1, 0, 0, RECEIVER)["numLeafAddressNibbles"])
    n_odd = int(input_file(odd, b"", 1, 0, 0, RECEIVER)["numLeafAddressNibbles"])
    assert n_odd == n_even + 1


def test_input_file_requires_a_leaf():
    with pytest.raises(ValueError, match="Leaf"):
        input_file(AccountProof(balance=0, account_proof=[]), b"", 1, 0, 0, RECEIVER)


def test_input_file_rejects_unexpected_key_prefix():
    proof = AccountProof(balance=0, account_proof=[_leaf(b"\x10\x01", b"\x01")])
    with pytest.raises(ValueError, match="prefix"):
        input_file(proof, b"", 1, 0, 0, RECEIVER)


def test_proof_from_dict_parses_decimal_and_ignores_extra_keys():
    proof = RapidsnarkProof.from_dict(_proof_dict())
    assert proof.pi_a == (1, 2, 1)
    assert proof.pi_b == ((3, 4), (5, 6), (1, 0))
    assert proof.pi_c == (7, 8, 1)
    assert proof.protocol == "groth16"


def test_proof_dict_round_trip():
    proof = RapidsnarkProof.from_dict(_proof_dict())
    assert RapidsnarkProof.from_dict(proof.to_dict()) == proof
    assert [int(v, 16) for v in proof.to_dict()["pi_c"]] == [7, 8, 1]


@pytest.mark.parametrize(
    "field_name, bad",
    [
        ("pi_a", ["1", "2"]),
        ("pi_b", [["1", "2"], ["3", "4"]]),
        ("pi_c", ["1", "2", "-3"]),
        ("pi_a", ["1", "2", str(2**256)]),
        ("pi_a", ["1", "2", "abc"]),
    ],
)
def test_proof_from_dict_rejects_bad_values(field_name, bad):
    data = _proof_dict()
    data[field_name] = bad
    with pytest.raises(ValueError):
        RapidsnarkProof.from_dict(data)


def test_proof_from_dict_rejects_missing_field():
    data = _proof_dict()
    del data["protocol"]
    with pytest.raises(ValueError):
        RapidsnarkProof.from_dict(data)


def test_output_json_round_trip():
    text = json.dumps({"proof": _proof_dict(), "public": ["11", "0x10", 3]})
    output = RapidsnarkOutput.from_json(text)
    assert output.public == (11, 16, 3)
    again = RapidsnarkOutput.from_json(output.to_json())
    assert again == output
    assert " " not in output.to_json()


def test_output_from_json_rejects_missing_public():
    with pytest.raises(ValueError):
        RapidsnarkOutput.from_json(json.dumps({"proof": _proof_dict()}))