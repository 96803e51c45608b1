#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcoin networks supported by Copay wallets.

Copay and bitcore name the main network 'livenet':
both spellings, and the short 'main' and 'test', are accepted.
"""

from dataclasses import InitVar, dataclass
from typing import Dict

from copayproof.exceptions import ConfigurationError, CopayProofValueError


@dataclass(frozen=True)
class Network:
    name: str
    # SLIP44 coin type, the second level of BIP44 paths
    coin_type: int
    # address version bytes: '1' and '3' (mainnet), 'm'/'n' and '2' (testnet)
    p2pkh: bytes
    p2sh: bytes
    # extended key versions: xprv/xpub (mainnet), tprv/tpub (testnet)
    bip32_prv: bytes
    bip32_pub: bytes
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:

        if not 0 <= self.coin_type < 0x80000000:
            raise CopayProofValueError(f"invalid coin type: {self.coin_type}")

        sizes = {"p2pkh": 1, "p2sh": 1, "bip32_prv": 4, "bip32_pub": 4}
        for name, size in sizes.items():
            value: bytes = getattr(self, name)
            if len(value) != size:
                err_msg = f"invalid {name} length: {len(value)} bytes instead of {size}"
                raise CopayProofValueError(err_msg)


NETWORKS: Dict[str, Network] = {
    "mainnet": Network(
        name="mainnet",
        coin_type=0,
        p2pkh=b"\x00",
        p2sh=b"\x05",
        bip32_prv=bytes.fromhex("0488ade4"),
        bip32_pub=bytes.fromhex("0488b21e"),
    ),
    "testnet": Network(
        name="testnet",
        coin_type=1,
        p2pkh=b"\x6f",
        p2sh=b"\xc4",
        bip32_prv=bytes.fromhex("04358394"),
        bip32_pub=bytes.fromhex("043587cf"),
    ),
}

_ALIASES = {"livenet": "mainnet", "main": "mainnet", "test": "testnet"}

XPRV_VERSIONS = [network.bip32_prv for network in NETWORKS.values()]
XPUB_VERSIONS = [network.bip32_pub for network in NETWORKS.values()]


def network_from_name(name: str) -> Network:
    "Return the network of a, possibly aliased, network name."

    key = name.strip().lower()
    network = NETWORKS.get(_ALIASES.get(key, key))
    if network is None:
        raise ConfigurationError(f"unknown network: {name!r}")
    return network

