#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcore Wallet Service (BWS) client.

Only the wallet status is queried: it reports how many receive and
change addresses have been issued, and the copayer index used by
BIP45 wallets.

Requests are authenticated as the Copay client does:
the x-identity header carries the copayer id, the x-signature header
the hex DER ECDSA signature, with the request private key,
of the double SHA256 of "method|url|json-args".
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from copayproof import dsa
from copayproof.exceptions import ConfigurationError, ServiceError
from copayproof.hashes import hash256
from copayproof.wallet import WalletMetadata

logger = logging.getLogger(__name__)

DEFAULT_BWS_URL = "https://bws.bitpay.com/bws/api"
BWS_URL_ENV = "COPAYPROOF_BWS_URL"
DEFAULT_TIMEOUT = 30

STATUS_URL = "/v2/wallets/?includeExtendedInfo=1"


def bws_url(url: Optional[str] = None) -> str:
    "Return the BWS base url: explicit, from the environment, or default."
    return (url or os.environ.get(BWS_URL_ENV) or DEFAULT_BWS_URL).rstrip("/")


@dataclass(frozen=True)
class AddressManagerStatus:
    receive_address_index: int
    change_address_index: int
    copayer_index: Optional[int] = None


def sign_request(method: str, url: str, args: Dict[str, Any], prv_key: int) -> str:
    "Return the hex DER signature of the request."

    message = "|".join([method.lower(), url, json.dumps(args, separators=(",", ":"))])
    sig = dsa.sign_(hash256(message.encode("utf-8")), prv_key)
    return sig.serialize().hex()


class BWSClient:
    def __init__(
        self,
        copayer_id: str,
        request_priv_key: str,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:

        self.copayer_id = copayer_id
        try:
            self._request_prv_key = int(request_priv_key, 16)
        except (TypeError, ValueError):
            raise ConfigurationError("invalid requestPrivKey") from None
        self.base_url = bws_url(base_url)
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_metadata(
        cls, metadata: WalletMetadata, base_url: Optional[str] = None, **kwargs: Any
    ) -> "BWSClient":

        if not metadata.copayer_id or not metadata.request_priv_key:
            raise ConfigurationError("missing copayerId or requestPrivKey")
        return cls(metadata.copayer_id, metadata.request_priv_key, base_url, **kwargs)

    def _get(self, url: str) -> Any:

        headers = {
            "x-identity": self.copayer_id,
            "x-signature": sign_request("get", url, {}, self._request_prv_key),
        }
        logger.debug("GET %s%s", self.base_url, url)
        try:
            resp = self.session.get(
                self.base_url + url, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ServiceError(f"wallet service connection failed: {e}") from e

        if resp.status_code != 200:
            try:
                body = resp.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = f"{body.get('code', resp.status_code)}: {body.get('message')}"
            else:
                message = f"HTTP {resp.status_code}: {resp.text[:200]}"
            raise ServiceError(f"wallet service error {message}")

        try:
            return resp.json()
        except ValueError as e:
            raise ServiceError(f"invalid wallet service response: {e}") from e

    def get_status(self) -> AddressManagerStatus:
        "Return the address manager status of the wallet."

        status = self._get(STATUS_URL)
        try:
            manager = status["wallet"]["addressManager"]
            result = AddressManagerStatus(
                receive_address_index=int(manager["receiveAddressIndex"]),
                change_address_index=int(manager["changeAddressIndex"]),
                copayer_index=(
                    None
                    if manager.get("copayerIndex") is None
                    else int(manager["copayerIndex"])
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(f"invalid wallet status: {e!r}") from e

        logger.info(
            "receiveAddressIndex %d, changeAddressIndex %d",
            result.receive_address_index,
            result.change_address_index,
        )
        return result
