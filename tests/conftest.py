#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Shared fixtures: deterministic Copay-like multisig wallets."

from typing import Any, Dict, Optional

import pytest

from copayproof.bip32 import derive, rootxprv_from_seed, xpub_from_xprv
from copayproof.bws import AddressManagerStatus
from copayproof.network import network_from_name

SEEDS = (
    "5b56c417303faa3fcba7e57400e120a0",
    "000102030405060708090a0b0c0d0e0f",
    "0f0e0d0c0b0a09080706050403020100",
    "fffefdfcfbfaf9f8f7f6f5f4f3f2f1f0",
)


def make_credentials(
    strategy: str = "BIP44",
    network: str = "livenet",
    m: int = 2,
    n: int = 3,
    account: int = 0,
    copayer: int = 0,
) -> Dict[str, Any]:
    """Return decrypted Copay credentials of an m-of-n wallet.

    Copayer keys are rooted at the SEEDS, the operator being SEEDS[copayer].
    """

    net = network_from_name(network)
    roots = [rootxprv_from_seed(seed, net.bip32_prv) for seed in SEEDS[:n]]
    if strategy == "BIP45":
        account_path = "m/45'"
    else:
        account_path = f"m/44'/{net.coin_type}'/{account}'"
    ring = [xpub_from_xprv(derive(root, account_path)) for root in roots]

    return {
        "version": 2,
        "network": network,
        "derivationStrategy": strategy,
        "account": account,
        "m": m,
        "n": n,
        "xPrivKey": roots[copayer],
        "xPubKey": ring[copayer],
        "publicKeyRing": [{"xPubKey": xpub, "requestPubKey": "00"} for xpub in ring],
        "compliantDerivation": True,
        "copayerId": "ab" * 32,
        "requestPrivKey": "11" * 32,
        "walletId": "00000000-0000-0000-0000-000000000000",
        "walletName": "test wallet",
        "entropySource": "cd" * 32,
    }


class StubStatusClient:
    "Stand-in for the wallet service: a fixed address manager status."

    def __init__(
        self, receive: int, change: int, copayer_index: Optional[int] = None
    ) -> None:
        self.status = AddressManagerStatus(receive, change, copayer_index)
        self.calls = 0

    def get_status(self) -> AddressManagerStatus:
        self.calls += 1
        return self.status


@pytest.fixture
def credentials() -> Dict[str, Any]:
    return make_credentials()


@pytest.fixture
def credentials_factory():
    return make_credentials


@pytest.fixture
def status_client_factory():
    return StubStatusClient
