#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.wallet` module."

import json

import pytest

from copayproof.exceptions import ConfigurationError
from copayproof.network import NETWORKS
from copayproof.policy import DerivationStrategy
from copayproof.wallet import WalletMetadata


def test_from_credentials(credentials) -> None:

    metadata = WalletMetadata.from_credentials(credentials)
    assert metadata.network == "livenet"
    assert metadata.network_params == NETWORKS["mainnet"]
    assert metadata.strategy is DerivationStrategy.BIP44
    assert metadata.m == 2
    assert metadata.n == 3
    assert metadata.account == 0
    assert metadata.xprv == credentials["xPrivKey"]
    assert metadata.xpub == credentials["xPubKey"]
    assert metadata.public_key_ring == tuple(
        entry["xPubKey"] for entry in credentials["publicKeyRing"]
    )
    assert metadata.copayer_index is None
    assert metadata.compliant_derivation
    assert metadata.copayer_id == credentials["copayerId"]
    assert metadata.request_priv_key == credentials["requestPrivKey"]

    # private material is not in repr
    assert credentials["xPrivKey"] not in repr(metadata)
    assert credentials["requestPrivKey"] not in repr(metadata)

    # read-only
    with pytest.raises(AttributeError):
        metadata.m = 1  # type: ignore


def test_optional_fields(credentials) -> None:

    for key in ("account", "xPubKey", "compliantDerivation", "copayerId"):
        del credentials[key]
    credentials["copayerIndex"] = 0
    metadata = WalletMetadata.from_credentials(credentials)
    assert metadata.account == 0
    assert metadata.xpub is None
    assert metadata.compliant_derivation
    assert metadata.copayer_id is None
    assert metadata.copayer_index == 0


def test_from_json(credentials) -> None:

    metadata = WalletMetadata.from_credentials(json.loads(json.dumps(credentials)))
    assert metadata == WalletMetadata.from_credentials(credentials)

    encoded = metadata.to_dict()
    assert encoded["xPrivKey"] == credentials["xPrivKey"]
    assert encoded["publicKeyRing"] == [
        {"xPubKey": entry["xPubKey"]} for entry in credentials["publicKeyRing"]
    ]


def test_testnet(credentials_factory) -> None:

    credentials = credentials_factory(network="testnet")
    metadata = WalletMetadata.from_credentials(credentials)
    assert metadata.network_params == NETWORKS["testnet"]
    assert metadata.xprv.startswith("tprv")


def test_missing_fields(credentials) -> None:

    for key in ("network", "derivationStrategy", "m", "n", "xPrivKey", "publicKeyRing"):
        data = dict(credentials)
        del data[key]
        with pytest.raises(ConfigurationError, match=f"missing wallet fields: {key}"):
            WalletMetadata.from_credentials(data)

    with pytest.raises(ConfigurationError, match="not a JSON object"):
        WalletMetadata.from_credentials([credentials])  # type: ignore


def test_invalid_fields(credentials_factory) -> None:

    credentials = credentials_factory()
    credentials["derivationStrategy"] = "BIP48"
    with pytest.raises(ConfigurationError, match="unknown derivation strategy: "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["network"] = "regtest"
    with pytest.raises(ConfigurationError, match="unknown network: "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["m"] = 4
    with pytest.raises(ConfigurationError, match="invalid m-of-n: 4-of-3"):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["m"] = 0
    with pytest.raises(ConfigurationError, match="invalid m-of-n: 0-of-3"):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["m"] = "2"
    with pytest.raises(ConfigurationError, match="invalid m: "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["publicKeyRing"] = credentials["publicKeyRing"][:2]
    with pytest.raises(ConfigurationError, match="invalid publicKeyRing size: 2"):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["publicKeyRing"] = [{"requestPubKey": "00"}] * 3
    with pytest.raises(ConfigurationError, match="invalid publicKeyRing entry: "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["account"] = -1
    with pytest.raises(ConfigurationError, match="negative account: "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["xPrivKey"] = credentials["xPubKey"]
    with pytest.raises(ConfigurationError, match="xPrivKey version "):
        WalletMetadata.from_credentials(credentials)

    credentials = credentials_factory()
    credentials["xPrivKey"] = credentials["xPrivKey"][:-1]
    with pytest.raises(ConfigurationError, match="invalid xPrivKey: "):
        WalletMetadata.from_credentials(credentials)

    # testnet keys in a livenet wallet
    credentials = credentials_factory(network="testnet")
    credentials["network"] = "livenet"
    with pytest.raises(ConfigurationError, match="does not match network mainnet"):
        WalletMetadata.from_credentials(credentials)
