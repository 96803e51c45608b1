#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.bip32.der_path` module."

import pytest

from copayproof.bip32.der_path import (
    HARDENED,
    indexes_from_bip32_path,
    int_from_index_str,
    str_from_bip32_path,
    str_from_index_int,
)
from copayproof.exceptions import CopayProofValueError


def test_indexes_from_bip32_path() -> None:

    expected = (44 + HARDENED, HARDENED, HARDENED, 0, 5)
    for der_path in (
        "m/44'/0'/0'/0/5",
        "m/44h/0H/0'/0/5",
        "44'/0'/0'/0/5",
        " m / 44' / 0' / 0' / 0 / 5 ",
        [44 + HARDENED, HARDENED, HARDENED, 0, 5],
        expected,
    ):
        assert indexes_from_bip32_path(der_path) == expected

    assert indexes_from_bip32_path("m") == ()
    assert indexes_from_bip32_path("m/") == ()
    assert indexes_from_bip32_path(7) == (7,)


def test_str_from_bip32_path() -> None:

    assert str_from_bip32_path((44 + HARDENED, HARDENED, HARDENED, 0, 2)) == (
        "m/44'/0'/0'/0/2"
    )
    assert str_from_bip32_path("m/45h/0/1/7") == "m/45'/0/1/7"
    assert str_from_bip32_path("m/45'", hardening="h") == "m/45h"
    assert str_from_bip32_path(()) == "m"

    for der_path in ("m/44'/1'/0'", "m/44'/0'/0'", "m/45'", "m/0/2147483647'"):
        assert str_from_bip32_path(indexes_from_bip32_path(der_path)) == der_path


def test_distinct_paths() -> None:

    assert indexes_from_bip32_path("m/0/1") != indexes_from_bip32_path("m/1/0")
    assert indexes_from_bip32_path("m/0'") != indexes_from_bip32_path("m/0")
    assert indexes_from_bip32_path("m/44'/0'/0'") != indexes_from_bip32_path(
        "m/44'/1'/0'"
    )


def test_index_conversion() -> None:

    assert int_from_index_str("0") == 0
    assert int_from_index_str("0'") == HARDENED
    assert int_from_index_str("1H") == HARDENED + 1
    assert int_from_index_str("2147483647") == HARDENED - 1

    assert str_from_index_int(0) == "0"
    assert str_from_index_int(HARDENED) == "0'"
    assert str_from_index_int(HARDENED + 44, "h") == "44h"
    assert str_from_index_int(0xFFFFFFFF) == "2147483647'"


def test_exceptions() -> None:

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        int_from_index_str("2147483648")

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        int_from_index_str("-1")

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        indexes_from_bip32_path("m/a/1")

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        indexes_from_bip32_path([0, -1])

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        indexes_from_bip32_path([0x100000000])

    with pytest.raises(CopayProofValueError, match="invalid index: "):
        str_from_index_int(0x100000000)

    with pytest.raises(CopayProofValueError, match="invalid hardening symbol: "):
        str_from_index_int(HARDENED, "#")

    with pytest.raises(CopayProofValueError, match="depth greater than 255: "):
        indexes_from_bip32_path("m" + "/0" * 256)
