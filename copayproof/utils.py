#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Byte and integer conversion helpers."""

from io import BytesIO
from typing import Iterable, Optional, Union

from copayproof.alias import BinaryData, Octets
from copayproof.exceptions import CopayProofValueError

Sizes = Optional[Union[int, Iterable[int]]]


def bytes_from_octets(octets: Octets, out_size: Sizes = None) -> bytes:
    """Return bytes from bytes or hex-string.

    out_size, if given, is the required size
    or a collection of the allowed sizes.
    """

    data = bytes.fromhex(octets) if isinstance(octets, str) else octets
    if out_size is None:
        return data

    allowed = (out_size,) if isinstance(out_size, int) else tuple(out_size)
    if len(data) not in allowed:
        err_msg = f"invalid size: {len(data)} bytes instead of {out_size}"
        raise CopayProofValueError(err_msg)
    return data


def bytesio_from_binarydata(stream: BinaryData) -> BytesIO:
    "Wrap bytes or hex-string in a stream; a stream is returned as it is."

    if isinstance(stream, (bytes, str)):
        return BytesIO(bytes_from_octets(stream))
    return stream


def int_from_bits(octets: Octets, nlen: int) -> int:
    """Return the integer of the leftmost nlen bits of octets.

    This is bits2int of RFC6979 section 2.3.2,
    i.e. SEC 1 v.2 section 4.1.3 step 5:
    no reduction modulo the curve order is performed.
    """

    data = bytes_from_octets(octets)
    i = int.from_bytes(data, byteorder="big", signed=False)
    excess = len(data) * 8 - nlen
    return i >> excess if excess > 0 else i


def hex_string(i: int) -> str:
    """Return the upper case hex-string of a non-negative integer.

    Digits are padded to whole bytes and grouped by four bytes
    from the right, e.g. "DE ADBEEF01".
    """

    if i < 0:
        raise CopayProofValueError(f"negative integer: {i}")

    digits = f"{i:X}"
    if len(digits) % 2:
        digits = "0" + digits
    head = len(digits) % 8
    groups = [digits[:head]] if head else []
    groups += [digits[j : j + 8] for j in range(head, len(digits), 8)]
    return " ".join(groups)


def short_repr(i: int) -> str:
    "Return i in decimal if it fits 32 bits, as hex_string otherwise."
    return hex_string(i) if i > 0xFFFFFFFF else str(i)
