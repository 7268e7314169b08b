"""BN254 field, Poseidon2, burn keys, circuit inputs and network settings for proof-of-burn."""

__version__ = "0.1.2"