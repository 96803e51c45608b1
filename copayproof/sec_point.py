#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""SEC 1 v.2 encoding of curve points (sections 2.3.3 and 2.3.4).

Compressed points are the x-coordinate prefixed by 0x02 (even y)
or 0x03 (odd y), uncompressed points are x and y prefixed by 0x04.
"""

from copayproof.alias import Octets, Point
from copayproof.curve import Curve, secp256k1
from copayproof.exceptions import CopayProofValueError
from copayproof.utils import bytes_from_octets, hex_string


def bytes_from_point(Q: Point, ec: Curve = secp256k1, compressed: bool = True) -> bytes:
    "Return the SEC 1 encoding of a curve point."

    ec.require_on_curve(Q)
    if Q[1] == 0:
        raise CopayProofValueError("no bytes representation for infinity point")

    x = Q[0].to_bytes(ec.p_size, byteorder="big", signed=False)
    if compressed:
        return bytes([0x02 | Q[1] & 1]) + x
    return b"\x04" + x + Q[1].to_bytes(ec.p_size, byteorder="big", signed=False)


def point_from_octets(pub_key: Octets, ec: Curve = secp256k1) -> Point:
    "Return the curve point of a SEC 1 encoding."

    data = bytes_from_octets(pub_key, (ec.p_size + 1, 2 * ec.p_size + 1))
    prefix, body = data[0], data[1:]

    if prefix in (0x02, 0x03):
        if len(body) != ec.p_size:
            err_msg = "invalid size for compressed point: "
            err_msg += f"{len(data)} instead of {ec.p_size + 1}"
            raise CopayProofValueError(err_msg)
        x = int.from_bytes(body, byteorder="big", signed=False)
        try:
            y = ec.y_even(x)
        except CopayProofValueError as e:
            err_msg = f"invalid x-coordinate: '{hex_string(x)}'"
            raise CopayProofValueError(err_msg) from e
        return x, ec.p - y if prefix == 0x03 else y

    if prefix == 0x04:
        if len(body) != 2 * ec.p_size:
            err_msg = "invalid size for uncompressed point: "
            err_msg += f"{len(data)} instead of {2 * ec.p_size + 1}"
            raise CopayProofValueError(err_msg)
        x = int.from_bytes(body[: ec.p_size], byteorder="big", signed=False)
        y = int.from_bytes(body[ec.p_size :], byteorder="big", signed=False)
        if y == 0 or not ec.is_on_curve((x, y)):
            raise CopayProofValueError(f"point not on curve: {(x, y)}")
        return x, y

    raise CopayProofValueError(f"not a point: {data!r}")
