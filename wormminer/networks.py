"""Known networks and the addresses of the contracts deployed on them."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class Network:
    """An RPC endpoint together with the BETH and WORM contract addresses."""

    rpc: str
    beth: str
    worm: str


NETWORKS = MappingProxyType(
    {
        "anvil": Network(
            rpc="http://127.0.0.1:8545",
            beth="0xe78A0F7E598Cc8b0Bb87894B0F60dD2a88d6a8Ab",
            worm="0x5b1869D9A4C187F2EAa108f3062412ecf0526b24",
        ),
        "sepolia": Network(
            rpc="https://sepolia.drpc.org",
            beth="0x6fa638704a839B28C5B7168C8916AdD9F75CDEEc",
            worm="0x557E9e7Eed905C7d21183Ec333dB2a8B1e34A85F",
        ),
    }
)


def get_network(name: str) -> Network:
    """Return the network registered under ``name``."""
    try:
        return NETWORKS[name]
    except KeyError:
        known = ", ".join(sorted(NETWORKS))
        raise KeyError(f"unknown network {name!r} (known: {known})") from None