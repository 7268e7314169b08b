# wormminer

Building blocks for minting BETH through proof-of-burn (EIP-7503):

- `wormminer.fp`: the BN254 scalar field, with elements held as plain
  Python integers;
- `wormminer.poseidon2`: the width-3 Poseidon hash of two field elements;
- `wormminer.utils`: Keccak-256, checksum addresses, RLP leaf decoding,
  burn-key search, burn-address derivation, circuit input generation and
  reading and writing prover output;
- `wormminer.networks`: the known networks and their contract addresses.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Field elements

```python
from wormminer import fp

x = fp.from_be_bytes(b"\x01\x02")    # 258; any length, reduced modulo fp.MODULUS
data = fp.to_le_bytes(x)             # 32 little-endian bytes
fp.from_le_bytes(data)               # 258
fp.from_str("12345")                 # 12345
```

`from_le_bytes` needs exactly 32 bytes holding a value below `fp.MODULUS`,
and `to_le_bytes` needs a value in that range; otherwise they raise
`ValueError`. `from_str` takes decimal digits only, rejects empty input and
leading zeros with `ValueError`, and reduces larger values modulo the field.

## Poseidon2

```python
from wormminer.poseidon2 import poseidon2, sigma

digest = poseidon2([1, 2])
sigma(3)   # 3 ** 5 modulo the field
```

`poseidon2` takes exactly two field elements below `fp.MODULUS` and raises
`ValueError` otherwise.

## Burn keys and burn addresses

A burn key is found by counting upwards from a starting value until the
Keccak-256 hash of its 32 big-endian bytes followed by `EIP-7503` begins
with the requested number of zero bytes. The start is random unless given;
the result is the candidate reduced into the field.

```python
from wormminer.utils import find_burn_key, generate_burn_address, to_checksum_address

burn_key = find_burn_key(2)
receiver = bytes(20)   # or a "0x..." hex string
burn_address = generate_burn_address(burn_key, receiver)   # 20 bytes
print(to_checksum_address(burn_address))
```

`keccak256(data)` returns the 32-byte digest, and `to_checksum_address`
accepts 20 bytes or a 40-digit hex string with or without `0x`.

## Circuit input

`input_file` builds the JSON object for the proof-of-burn circuit from an
account proof, the RLP-encoded block header, the burn key, the fee, the
spend amount and the receiver:

```python
import json
from wormminer.utils import AccountProof, input_file

proof = AccountProof(balance=balance, account_proof=proof_nodes)
circuit_input = input_file(proof, header_bytes, burn_key, fee, spend, receiver)
with open("input.json", "w") as fh:
    json.dump(circuit_input, fh)
```

Proof nodes are padded to 544 bytes and their list to 16 entries, the
header to 1088 bytes. The last node is decoded with `decode_rlp_leaf`,
which returns an `RlpLeaf(key, value)` or raises `RlpError`; a missing leaf
or a leaf key without a `0x2` or `0x3` prefix nibble raises `ValueError`.

## Prover output

```python
from wormminer.utils import RapidsnarkOutput

output = RapidsnarkOutput.from_json(text)
output.proof.pi_a, output.proof.pi_b, output.proof.pi_c, output.public
output.to_json()   # compact JSON, integers written as 0x-prefixed hex
```

`RapidsnarkProof.from_dict` and `to_dict` handle the proof object alone.
Integers may be given as decimal or `0x` hex strings, or as JSON numbers.

## Networks

```python
from wormminer.networks import NETWORKS, get_network

net = get_network("anvil")
net.rpc, net.beth, net.worm
```

The registered names are `anvil` and `sepolia`. An unknown name raises
`KeyError`.

## What this package does not do

There is no command-line tool. The package does not talk to an RPC node,
sign or send transactions, fetch account proofs or block headers, generate
witnesses or run a prover, and it does not download circuit parameter
files. It computes the values those steps need and reads the prover's JSON
output.