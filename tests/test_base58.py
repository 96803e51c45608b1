#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.base58` module."

import pytest

from copayproof.base58 import _b58decode, _b58encode, b58decode, b58encode
from copayproof.exceptions import CopayProofValueError
from copayproof.hashes import hash256


@pytest.mark.parametrize(
    "raw, encoded",
    [
        (b"", b""),
        (b"\x00", b"1"),
        (b"hello world", b"StV1DL6CwTryKyV"),
        (b"\x00\x00hello world", b"11StV1DL6CwTryKyV"),
    ],
)
def test_raw_base58(raw: bytes, encoded: bytes) -> None:
    assert _b58encode(raw) == encoded
    assert _b58decode(encoded) == raw


def test_p2sh_payload() -> None:
    # version byte 0x05 always encodes to a leading '3'
    payload = b"\x05" + bytes(range(20))
    encoded = b58encode(payload)
    assert encoded.startswith(b"3")
    assert _b58decode(encoded) == payload + hash256(payload)[:4]
    assert b58decode(encoded, 21) == payload
    assert b58decode(encoded.decode("ascii")) == payload


def test_exceptions() -> None:

    encoded = b58encode(b"\x05" + bytes(20))

    with pytest.raises(CopayProofValueError, match="invalid decoded size: "):
        b58decode(encoded, 20)

    with pytest.raises(CopayProofValueError, match="invalid checksum: "):
        b58decode(encoded[:-4] + (b"1111" if encoded[-4:] != b"1111" else b"2222"))

    with pytest.raises(CopayProofValueError, match="invalid characters: 0O"):
        b58decode(b"3J98t1Wp0OXbL")

    err_msg = "not enough bytes for checksum, invalid base58 decoded size: "
    with pytest.raises(CopayProofValueError, match=err_msg):
        b58decode(_b58encode(b"\x05\x01\x02"))
