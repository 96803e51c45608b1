#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Modular inverse and modular square root."""

from typing import Tuple

from copayproof.exceptions import CopayProofValueError
from copayproof.utils import short_repr


def xgcd(a: int, b: int) -> Tuple[int, int, int]:
    """Return (g, x, y) such that g = gcd(a, b) = a*x + b*y."""

    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    return old_r, old_x, old_y


def mod_inv(a: int, m: int) -> int:
    """Return the inverse of a (mod m).

    m does not have to be prime, but it must be coprime with a.
    """

    a %= m
    g, x, _ = xgcd(a, m)
    if g != 1:
        err_msg = f"No inverse for {short_repr(a)} mod {short_repr(m)}"
        raise CopayProofValueError(err_msg)
    return x % m


def mod_sqrt(a: int, p: int) -> int:
    """Return a square root of a (mod p), p being a 3 mod 4 prime.

    The other root is p - r.
    """

    if p % 4 != 3:
        raise CopayProofValueError(f"unsupported prime, not 3 mod 4: {p}")

    a %= p
    r = pow(a, (p + 1) // 4, p)
    if r * r % p != a:
        raise CopayProofValueError(f"no root for {short_repr(a)}")
    return r
