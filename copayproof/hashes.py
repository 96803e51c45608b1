#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash functions of the Bitcoin protocol."""

import hashlib

from copayproof.alias import Octets
from copayproof.utils import bytes_from_octets

# OpenSSL 3 moved ripemd160 to its legacy provider:
# load it, if missing, before the first hashlib.new("ripemd160")
try:
    hashlib.new("ripemd160")
except ValueError:  # pragma: no cover
    import ctypes

    _LIBSSL = ctypes.CDLL("libssl.so")
    _LIBSSL.OSSL_PROVIDER_load(None, b"legacy")
    _LIBSSL.OSSL_PROVIDER_load(None, b"default")


def sha256(octets: Octets) -> bytes:
    return hashlib.sha256(bytes_from_octets(octets)).digest()


def ripemd160(octets: Octets) -> bytes:
    return hashlib.new("ripemd160", bytes_from_octets(octets)).digest()


def hash160(octets: Octets) -> bytes:
    "Return RIPEMD160(SHA256(octets)), the digest committed to by addresses."
    return ripemd160(sha256(octets))


def hash256(octets: Octets) -> bytes:
    "Return SHA256(SHA256(octets)), used by checksums and message signing."
    return sha256(sha256(octets))
