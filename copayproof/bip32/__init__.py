#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Module copayproof.bip32."""

from copayproof.bip32.bip32 import (
    BIP32Key,
    BIP32KeyData,
    KeyPair,
    derive,
    derive_private,
    derive_public,
    rootxprv_from_seed,
    xpub_from_xprv,
)
from copayproof.bip32.der_path import (
    HARDENED,
    DerPath,
    indexes_from_bip32_path,
    int_from_index_str,
    str_from_bip32_path,
    str_from_index_int,
)

__all__ = [
    "BIP32Key",
    "BIP32KeyData",
    "KeyPair",
    "derive",
    "derive_private",
    "derive_public",
    "rootxprv_from_seed",
    "xpub_from_xprv",
    "HARDENED",
    "DerPath",
    "indexes_from_bip32_path",
    "int_from_index_str",
    "str_from_bip32_path",
    "str_from_index_int",
]
