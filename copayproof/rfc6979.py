#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Deterministic ECDSA nonce, as in RFC6979 section 3.2.

The nonce is an HMAC-DRBG output seeded with the private key
and the message hash: signing the same message hash with the same key
always gives the same signature, with no need of a random source.

https://tools.ietf.org/html/rfc6979
"""

import hashlib
import hmac

from copayproof.alias import HashF, Octets
from copayproof.curve import Curve, secp256k1
from copayproof.utils import bytes_from_octets, int_from_bits


def challenge_(
    msg_hash: Octets, ec: Curve = secp256k1, hf: HashF = hashlib.sha256
) -> int:
    "Return the hf-sized message hash as a scalar: bits2int mod n."

    msg_hash = bytes_from_octets(msg_hash, hf().digest_size)
    return int_from_bits(msg_hash, ec.nlen) % ec.n


def _rfc6979_nonce_(c: int, q: int, ec: Curve, hf: HashF) -> int:
    # c is the challenge, i.e. the already reduced bits2octets(h1)

    def mac(key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, hf).digest()

    seed = q.to_bytes(ec.n_size, "big") + c.to_bytes(ec.n_size, "big")
    hf_size = hf().digest_size
    k = b"\x00" * hf_size
    v = b"\x01" * hf_size
    for separator in (b"\x00", b"\x01"):  # steps d-e, then f-g
        k = mac(k, v + separator + seed)
        v = mac(k, v)

    while True:  # step h
        t = b""
        while len(t) < ec.n_size:
            v = mac(k, v)
            t += v
        nonce = int_from_bits(t, ec.nlen)
        if 0 < nonce < ec.n:
            return nonce
        k = mac(k, v + b"\x00")
        v = mac(k, v)


def rfc6979_nonce_(
    msg_hash: Octets, q: int, ec: Curve = secp256k1, hf: HashF = hashlib.sha256
) -> int:
    "Return the deterministic nonce for signing msg_hash with q."

    c = challenge_(msg_hash, ec, hf)
    return _rfc6979_nonce_(c, q, ec, hf)
