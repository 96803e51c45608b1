#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 derivation path.

A BIP32 derivation path can be represented as:

- "m/44'/0'/1h/0/10" or "44'/0'/1H/0/10" string
- sequence of integer indexes (even a single int)

Internally paths are immutable tuples of 32-bit indexes,
an index >= 0x80000000 being hardened.
Rendered paths use the "'" hardening symbol, as Copay does.
"""

from typing import Sequence, Tuple, Union

from copayproof.exceptions import CopayProofValueError

HARDENED = 0x80000000

# default hardening symbol among the possible ones: "h", "H", "'"
_HARDENING = "'"

DerPath = Tuple[int, ...]
BIP32DerPath = Union[str, Sequence[int], int]


def int_from_index_str(s: str) -> int:

    s = s.strip().lower()
    hardened = False
    if s and s[-1] in ("'", "h"):
        s = s[:-1]
        hardened = True

    try:
        index = int(s)
    except ValueError:
        raise CopayProofValueError(f"invalid index: {s!r}") from None
    if not 0 <= index < HARDENED:
        raise CopayProofValueError(f"invalid index: {index}")
    return index + (HARDENED if hardened else 0)


def str_from_index_int(i: int, hardening: str = _HARDENING) -> str:

    if hardening not in ("'", "h", "H"):
        raise CopayProofValueError(f"invalid hardening symbol: {hardening}")
    if not 0 <= i <= 0xFFFFFFFF:
        raise CopayProofValueError(f"invalid index: {i}")
    if i < HARDENED:
        return str(i)
    return str(i - HARDENED) + hardening


def is_hardened(i: int) -> bool:
    return i >= HARDENED


def _indexes_from_bip32_path_str(der_path: str) -> DerPath:

    steps = [x.strip().lower() for x in der_path.split("/")]
    if steps[0] == "m":
        steps = steps[1:]

    return tuple(int_from_index_str(s) for s in steps if s != "")


def indexes_from_bip32_path(der_path: BIP32DerPath) -> DerPath:

    if isinstance(der_path, str):
        indexes = _indexes_from_bip32_path_str(der_path)
    elif isinstance(der_path, int):
        indexes = (der_path,)
    else:
        indexes = tuple(int(i) for i in der_path)

    for i in indexes:
        if not 0 <= i <= 0xFFFFFFFF:
            raise CopayProofValueError(f"invalid index: {i}")
    if len(indexes) > 255:
        err_msg = f"depth greater than 255: {len(indexes)}"
        raise CopayProofValueError(err_msg)
    return indexes


def str_from_bip32_path(der_path: BIP32DerPath, hardening: str = _HARDENING) -> str:
    indexes = indexes_from_bip32_path(der_path)
    result = "/".join(str_from_index_int(i, hardening) for i in indexes)
    return "m" + ("/" + result if result else "")
