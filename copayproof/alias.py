#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Type aliases shared across the package."""

from io import BytesIO
from typing import Any, Callable, Tuple, Union

# bytes, or their hex-string representation:
# public keys, scripts, hash digests, BIP32 versions
Octets = Union[bytes, str]

# bytes, or text to be utf-8 encoded:
# messages, base58 strings
String = Union[bytes, str]

# a byte stream, or Octets to be wrapped in one
BinaryData = Union[BytesIO, Octets]

# hashlib-like constructor, e.g. hashlib.sha256
HashF = Callable[[], Any]

# affine point (x, y); y == 0 marks the point at infinity,
# as no point of a prime order group has a zero y-coordinate
Point = Tuple[int, int]
INF: Point = (1, 0)

# Jacobian point (X, Y, Z), with x = X / Z^2 and y = Y / Z^3;
# Z == 0 marks the point at infinity
JacPoint = Tuple[int, int, int]
INFJ: JacPoint = (1, 1, 0)
