#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Unsealing of SJCL encrypted JSON envelopes.

Copay exports the wallet credentials encrypted with the
Stanford Javascript Crypto Library (SJCL) defaults:
AES in CCM mode, key derived with PBKDF2-HMAC-SHA256.
The envelope is a JSON object like

{"iv": "<base64>", "v": 1, "iter": 10000, "ks": 128, "ts": 64,
 "mode": "ccm", "adata": "", "cipher": "aes", "salt": "<base64>",
 "ct": "<base64 ciphertext || tag>"}

SJCL always generates a 16 bytes iv, while CCM takes a 15-L bytes nonce:
L is the smallest length field (at least 2) able to hold the plaintext size,
and the iv is truncated accordingly.
A shorter iv, at least 7 bytes, is used whole with a wider length field.
"""

import base64
import binascii
import json
import os
from typing import Any, Dict, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESCCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from copayproof.exceptions import AuthenticationError, UnsealError

DEFAULT_ITER = 10000
DEFAULT_KS = 128
DEFAULT_TS = 64

_KEY_SIZES = (128, 192, 256)
_TAG_SIZES = (64, 96, 128)


def _b64decode(envelope: Dict[str, Any], key: str) -> bytes:
    try:
        return base64.b64decode(envelope[key], validate=True)
    except KeyError:
        raise UnsealError(f"missing envelope field: {key}") from None
    except (binascii.Error, TypeError, ValueError) as e:
        raise UnsealError(f"invalid base64 envelope field {key}: {e}") from e


def _nonce(iv: bytes, plaintext_size: int) -> bytes:
    "Return the CCM nonce: the first 15 - L bytes of the iv."

    if len(iv) < 7:
        raise UnsealError(f"iv too short: {len(iv)} bytes")
    # CCM length field size L, at least 2 and at most 4 for the plaintext,
    # widened as SJCL does when the iv is shorter than 15 - L
    size = 2
    while size < 4 and plaintext_size >> (8 * size):
        size += 1
    size = max(size, 15 - len(iv))
    return iv[: 15 - size]


def _derive_key(password: str, salt: bytes, iterations: int, key_size: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=key_size // 8,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def _load(sealed: Union[str, bytes, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(sealed, dict):
        return sealed
    try:
        envelope = json.loads(sealed)
    except ValueError as e:
        raise UnsealError(f"invalid JSON envelope: {e}") from e
    if not isinstance(envelope, dict):
        raise UnsealError("invalid JSON envelope: not an object")
    return envelope


def decrypt(password: str, sealed: Union[str, bytes, Dict[str, Any]]) -> str:
    """Return the plaintext of the SJCL envelope.

    A wrong password raises AuthenticationError,
    any other problem raises UnsealError.
    """

    envelope = _load(sealed)

    mode = envelope.get("mode", "ccm")
    cipher = envelope.get("cipher", "aes")
    if mode != "ccm" or cipher != "aes":
        raise UnsealError(f"unsupported cipher: {cipher}-{mode}")

    try:
        iterations = int(envelope.get("iter", DEFAULT_ITER))
        key_size = int(envelope.get("ks", DEFAULT_KS))
        tag_size = int(envelope.get("ts", DEFAULT_TS))
    except (TypeError, ValueError) as e:
        raise UnsealError(f"invalid envelope parameters: {e}") from e
    if key_size not in _KEY_SIZES:
        raise UnsealError(f"invalid key size: {key_size}")
    if tag_size not in _TAG_SIZES:
        raise UnsealError(f"invalid tag size: {tag_size}")
    if iterations < 1:
        raise UnsealError(f"invalid iteration count: {iterations}")

    iv = _b64decode(envelope, "iv")
    salt = _b64decode(envelope, "salt")
    ct = _b64decode(envelope, "ct")
    adata = _b64decode(envelope, "adata") if envelope.get("adata") else b""

    plaintext_size = len(ct) - tag_size // 8
    if plaintext_size < 0:
        raise UnsealError(f"ciphertext too short: {len(ct)} bytes")
    nonce = _nonce(iv, plaintext_size)

    key = _derive_key(password, salt, iterations, key_size)
    aesccm = AESCCM(key, tag_length=tag_size // 8)
    try:
        plaintext = aesccm.decrypt(nonce, ct, adata or None)
    except InvalidTag:
        raise AuthenticationError("Incorrect Password") from None

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UnsealError(f"invalid UTF-8 plaintext: {e}") from e


def encrypt(
    password: str,
    plaintext: str,
    iterations: int = DEFAULT_ITER,
    key_size: int = DEFAULT_KS,
    tag_size: int = DEFAULT_TS,
    salt: Optional[bytes] = None,
    iv: Optional[bytes] = None,
) -> str:
    "Return the SJCL JSON envelope of plaintext."

    if key_size not in _KEY_SIZES:
        raise UnsealError(f"invalid key size: {key_size}")
    if tag_size not in _TAG_SIZES:
        raise UnsealError(f"invalid tag size: {tag_size}")
    salt = os.urandom(8) if salt is None else salt
    iv = os.urandom(16) if iv is None else iv

    data = plaintext.encode("utf-8")
    nonce = _nonce(iv, len(data))
    key = _derive_key(password, salt, iterations, key_size)
    ct = AESCCM(key, tag_length=tag_size // 8).encrypt(nonce, data, None)

    envelope = {
        "iv": base64.b64encode(iv).decode("ascii"),
        "v": 1,
        "iter": iterations,
        "ks": key_size,
        "ts": tag_size,
        "mode": "ccm",
        "adata": "",
        "cipher": "aes",
        "salt": base64.b64encode(salt).decode("ascii"),
        "ct": base64.b64encode(ct).decode("ascii"),
    }
    return json.dumps(envelope)
