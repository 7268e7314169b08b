[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wormminer"
version = "0.1.2"
description = "BN254 field helpers, Poseidon2 hashing, burn keys and proof-of-burn circuit inputs"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = ["poseidon", "bn254", "proof-of-burn", "eip-7503", "keccak", "rlp", "ethereum"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["wormminer"]

[tool.pytest.ini_options]
addopts = "-ra"
