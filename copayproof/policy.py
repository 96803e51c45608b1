#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Derivation path policy of a Copay wallet.

Copay wallets derive their multisig addresses along one of two schemes:

- BIP44: account key at m/44'/coin_type'/account',
  address keys at chain/index below it
- BIP45: account key at m/45',
  address keys at copayer_index/chain/index below it

where chain is 0 for receive addresses and 1 for change addresses.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union

from copayproof.bip32.der_path import HARDENED, DerPath, str_from_bip32_path
from copayproof.exceptions import ConfigurationError
from copayproof.network import Network, network_from_name

RECEIVE_CHAIN = 0
CHANGE_CHAIN = 1


class DerivationStrategy(enum.Enum):
    BIP44 = "BIP44"
    BIP45 = "BIP45"

    @classmethod
    def from_name(cls, name: Union[str, "DerivationStrategy"]) -> "DerivationStrategy":
        if isinstance(name, cls):
            return name
        # exact names only, as written in the wallet export
        try:
            return cls(name)
        except ValueError:
            raise ConfigurationError(f"unknown derivation strategy: {name!r}") from None


@dataclass(frozen=True)
class PathPolicy:
    strategy: DerivationStrategy
    account_path: DerPath
    # only used by BIP45
    copayer_index: Optional[int] = None

    def address_path(self, chain: int, index: int) -> DerPath:
        "Return the address path relative to the account key."

        if chain not in (RECEIVE_CHAIN, CHANGE_CHAIN):
            raise ConfigurationError(f"invalid chain: {chain}")
        if not 0 <= index < HARDENED:
            raise ConfigurationError(f"invalid address index: {index}")
        if self.strategy is DerivationStrategy.BIP45:
            return (self.copayer_index, chain, index)  # type: ignore
        return (chain, index)

    def full_path(self, chain: int, index: int) -> DerPath:
        "Return the address path from the master key."
        return self.account_path + self.address_path(chain, index)

    @property
    def account_path_str(self) -> str:
        return str_from_bip32_path(self.account_path)

    def full_path_str(self, chain: int, index: int) -> str:
        return str_from_bip32_path(self.full_path(chain, index))


def resolve_policy(
    strategy: Union[str, DerivationStrategy],
    network: Union[str, Network],
    account: int = 0,
    copayer_index: Optional[int] = None,
) -> PathPolicy:
    """Return the path policy of the wallet.

    Unknown strategies and networks, invalid accounts,
    and BIP45 wallets without copayer index
    raise ConfigurationError.
    """

    strategy = DerivationStrategy.from_name(strategy)
    if not isinstance(network, Network):
        network = network_from_name(network)

    if strategy is DerivationStrategy.BIP44:
        if not 0 <= account < HARDENED:
            raise ConfigurationError(f"invalid account: {account}")
        account_path = (44 + HARDENED, network.coin_type + HARDENED, account + HARDENED)
        return PathPolicy(strategy, account_path)

    # copayer index 0 is a valid index
    if copayer_index is None:
        raise ConfigurationError("missing copayer index for BIP45 wallet")
    if not 0 <= copayer_index < HARDENED:
        raise ConfigurationError(f"invalid copayer index: {copayer_index}")
    return PathPolicy(strategy, (45 + HARDENED,), copayer_index)
