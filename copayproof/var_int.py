#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcoin variable length integer (CompactSize).

Integers below 0xfd take a single byte; larger ones are
a 0xfd, 0xfe or 0xff marker followed by the little endian
2, 4 or 8 bytes integer.
"""

from copayproof.alias import BinaryData
from copayproof.exceptions import CopayProofValueError
from copayproof.utils import bytesio_from_binarydata, hex_string

_MARKERS = {0xFD: 2, 0xFE: 4, 0xFF: 8}


def serialize(i: int) -> bytes:
    "Return the var_int encoding of a non-negative integer."

    if i < 0:
        raise CopayProofValueError(f"negative integer: {i}")
    if i < 0xFD:
        return bytes([i])
    for marker, size in _MARKERS.items():
        if i < 1 << (8 * size):
            return bytes([marker]) + i.to_bytes(size, byteorder="little", signed=False)
    raise CopayProofValueError(
        f"integer too big for var_int encoding: '{hex_string(i)}'"
    )


def parse(stream: BinaryData) -> int:
    "Return the integer of the var_int read from the stream."

    stream = bytesio_from_binarydata(stream)
    first = stream.read(1)
    if not first:
        raise CopayProofValueError("not enough bytes: empty var_int")
    size = _MARKERS.get(first[0])
    if size is None:
        return first[0]
    return int.from_bytes(stream.read(size), byteorder="little", signed=False)
