#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Wallet metadata recovered from the decrypted Copay credentials.

Copay credentials are a JSON object with many fields:
only the ones needed to rebuild and sign the wallet addresses
are mapped here, every other key is ignored.
The metadata is validated once, when created, and is read-only.
"""

from dataclasses import InitVar, dataclass, field
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from dataclasses_json import DataClassJsonMixin, config

from copayproof.bip32 import BIP32KeyData
from copayproof.exceptions import ConfigurationError, CopayProofValueError
from copayproof.network import Network, network_from_name
from copayproof.policy import DerivationStrategy

MAX_COPAYERS = 15

_REQUIRED_KEYS = (
    "network",
    "derivationStrategy",
    "m",
    "n",
    "xPrivKey",
    "publicKeyRing",
)

_WalletMetadata = TypeVar("_WalletMetadata", bound="WalletMetadata")


def _decode_key_ring(ring: Any) -> Tuple[str, ...]:
    try:
        return tuple(entry["xPubKey"] for entry in ring)
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"invalid publicKeyRing entry: {e}") from e


def _encode_key_ring(ring: Tuple[str, ...]) -> Any:
    return [{"xPubKey": xpub} for xpub in ring]


@dataclass(frozen=True)
class WalletMetadata(DataClassJsonMixin):
    network: str
    derivation_strategy: str = field(metadata=config(field_name="derivationStrategy"))
    m: int
    n: int
    xprv: str = field(repr=False, metadata=config(field_name="xPrivKey"))
    public_key_ring: Tuple[str, ...] = field(
        metadata=config(
            field_name="publicKeyRing",
            encoder=_encode_key_ring,
            decoder=_decode_key_ring,
        )
    )
    account: int = 0
    # the operator's own account xpub, if available
    xpub: Optional[str] = field(default=None, metadata=config(field_name="xPubKey"))
    copayer_index: Optional[int] = field(
        default=None, metadata=config(field_name="copayerIndex")
    )
    compliant_derivation: bool = field(
        default=True, metadata=config(field_name="compliantDerivation")
    )
    # coordination service credentials
    copayer_id: Optional[str] = field(
        default=None, metadata=config(field_name="copayerId")
    )
    request_priv_key: Optional[str] = field(
        default=None, repr=False, metadata=config(field_name="requestPrivKey")
    )
    wallet_id: Optional[str] = field(
        default=None, metadata=config(field_name="walletId")
    )
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    @property
    def network_params(self) -> Network:
        return network_from_name(self.network)

    @property
    def strategy(self) -> DerivationStrategy:
        return DerivationStrategy.from_name(self.derivation_strategy)

    def assert_valid(self) -> None:

        network = self.network_params
        DerivationStrategy.from_name(self.derivation_strategy)

        if not 0 < self.m <= self.n <= MAX_COPAYERS:
            raise ConfigurationError(f"invalid m-of-n: {self.m}-of-{self.n}")
        if len(self.public_key_ring) != self.n:
            err_msg = f"invalid publicKeyRing size: {len(self.public_key_ring)}"
            err_msg += f" instead of {self.n}"
            raise ConfigurationError(err_msg)
        if self.account < 0:
            raise ConfigurationError(f"negative account: {self.account}")
        if self.copayer_index is not None and self.copayer_index < 0:
            raise ConfigurationError(f"negative copayer index: {self.copayer_index}")

        try:
            xkey = BIP32KeyData.b58decode(self.xprv)
        except CopayProofValueError as e:
            raise ConfigurationError(f"invalid xPrivKey: {e}") from e
        if xkey.version != network.bip32_prv:
            err_msg = f"xPrivKey version 0x{xkey.version.hex()}"
            err_msg += f" does not match network {network.name}"
            raise ConfigurationError(err_msg)

        ring = self.public_key_ring + ((self.xpub,) if self.xpub else ())
        for i, xpub in enumerate(ring):
            try:
                xkey = BIP32KeyData.b58decode(xpub)
            except CopayProofValueError as e:
                raise ConfigurationError(f"invalid xPubKey #{i}: {e}") from e
            if xkey.version != network.bip32_pub:
                err_msg = f"xPubKey #{i} version 0x{xkey.version.hex()}"
                err_msg += f" does not match network {network.name}"
                raise ConfigurationError(err_msg)

    @classmethod
    def from_credentials(
        cls: Type[_WalletMetadata], data: Mapping[str, Any]
    ) -> _WalletMetadata:
        """Return the validated metadata from decrypted credentials.

        Missing required keys and malformed values raise ConfigurationError.
        """

        if not isinstance(data, Mapping):
            raise ConfigurationError("credentials are not a JSON object")
        missing = [key for key in _REQUIRED_KEYS if data.get(key) is None]
        if missing:
            raise ConfigurationError(f"missing wallet fields: {', '.join(missing)}")
        # dataclasses_json does not coerce: reject mistyped scalars upfront
        for key in ("m", "n", "account", "copayerIndex"):
            value = data.get(key)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int)
            ):
                raise ConfigurationError(f"invalid {key}: {value!r}")

        return cls.from_dict(dict(data))
