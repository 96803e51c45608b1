#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Integrity checks between local and externally-supplied public keys.

Any mismatch is fatal: the attestation would otherwise bind the
message to an address the operator cannot sign for.
"""

from typing import Sequence, Union

from copayproof.bip32 import DerPath, str_from_bip32_path, xpub_from_xprv
from copayproof.bip32.bip32 import BIP32Key
from copayproof.exceptions import IntegrityError
from copayproof.wallet import WalletMetadata


def assert_same_pub_key(
    local: bytes, expected: bytes, path: Union[DerPath, str]
) -> None:
    "Require the locally derived public key to be the expected one."

    if local != expected:
        path_str = path if isinstance(path, str) else str_from_bip32_path(path)
        err_msg = f"public key mismatch at {path_str}: "
        err_msg += f"{local.hex()} instead of {expected.hex()}"
        raise IntegrityError(err_msg)


def operator_ring_index(metadata: WalletMetadata, account_xprv: BIP32Key) -> int:
    """Return the position of the operator's own xpub in the key ring.

    The operator's xpub is the declared one, if any,
    and it must be the neutered account key anyway.
    """

    account_xpub = xpub_from_xprv(account_xprv)
    if metadata.xpub is not None and metadata.xpub != account_xpub:
        raise IntegrityError("xPubKey is not the neutered account key")

    try:
        return metadata.public_key_ring.index(account_xpub)
    except ValueError:
        raise IntegrityError(
            f"account key not in publicKeyRing: {account_xpub}"
        ) from None


def assert_valid_participants(
    pub_keys: Sequence[bytes], operator_pub_key: bytes, n: int
) -> None:
    "Require n distinct participant keys, the operator's one included."

    if len(pub_keys) != n:
        raise IntegrityError(f"invalid number of keys: {len(pub_keys)} instead of {n}")
    if len(set(pub_keys)) != n:
        raise IntegrityError("duplicated participant public keys")
    if operator_pub_key not in pub_keys:
        raise IntegrityError(f"public key mismatch: {operator_pub_key.hex()}")
