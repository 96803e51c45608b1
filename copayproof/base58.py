#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Base58Check encoding and decoding.

Base58 omits the similar-looking characters 0, O, I, and l,
and the non-alphanumeric '+' and '/' of Base64.
Base58Check appends hash256(payload)[:4] as checksum before encoding;
decoding verifies it.

Leading zero bytes are preserved as leading '1' characters,
which is why version-prefixed payloads keep their fixed address prefix.
"""

from typing import Optional

from copayproof.alias import Octets, String
from copayproof.exceptions import CopayProofValueError
from copayproof.hashes import hash256
from copayproof.utils import bytes_from_octets

_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE = len(_ALPHABET)
_CHECKSUM_SIZE = 4


def _b58encode(v: bytes) -> bytes:

    stripped = v.lstrip(b"\0")
    prefix = _ALPHABET[:1] * (len(v) - len(stripped))

    i = int.from_bytes(stripped, byteorder="big", signed=False)
    digits = bytearray()
    while i:
        i, idx = divmod(i, _BASE)
        digits.append(_ALPHABET[idx])
    digits.reverse()
    return prefix + bytes(digits)


def _b58decode(v: bytes) -> bytes:

    invalid = [chr(c) for c in v if c not in _ALPHABET]
    if invalid:
        raise CopayProofValueError(
            f"Base58 string contains invalid characters: {''.join(invalid)}"
        )

    stripped = v.lstrip(_ALPHABET[:1])
    prefix = b"\0" * (len(v) - len(stripped))

    i = 0
    for char in stripped:
        i = i * _BASE + _ALPHABET.index(char)
    nbytes = (i.bit_length() + 7) // 8
    return prefix + i.to_bytes(nbytes, byteorder="big", signed=False)


def b58encode(v: Octets, in_size: Optional[int] = None) -> bytes:
    """Encode a bytes-like object using Base58Check."""

    v = bytes_from_octets(v, in_size)
    return _b58encode(v + hash256(v)[:_CHECKSUM_SIZE])


def b58decode(v: String, out_size: Optional[int] = None) -> bytes:
    """Decode a Base58Check encoded bytes-like object or ASCII string.

    Optionally, it also ensures the required output size.
    """

    if isinstance(v, str):
        # do not trim spaces
        v = v.encode("ascii")

    decoded = _b58decode(v)
    if len(decoded) < _CHECKSUM_SIZE:
        err_msg = "not enough bytes for checksum, "
        err_msg += f"invalid base58 decoded size: {len(decoded)}"
        raise CopayProofValueError(err_msg)

    payload, checksum = decoded[:-_CHECKSUM_SIZE], decoded[-_CHECKSUM_SIZE:]
    expected = hash256(payload)[:_CHECKSUM_SIZE]
    if checksum != expected:
        err_msg = f"invalid checksum: 0x{checksum.hex()} instead of 0x{expected.hex()}"
        raise CopayProofValueError(err_msg)

    if out_size is not None and len(payload) != out_size:
        err_msg = "valid checksum, invalid decoded size: "
        err_msg += f"{len(payload)} bytes instead of {out_size}"
        raise CopayProofValueError(err_msg)

    return payload
