#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.rfc6979` module."

import hashlib

import pytest

from copayproof import dsa
from copayproof.curve import mult, secp256k1
from copayproof.exceptions import CopayProofValueError
from copayproof.rfc6979 import rfc6979_nonce_


def test_rfc6979() -> None:
    # source: https://bitcointalk.org/index.php?topic=285142.40

    msg_hash = hashlib.sha256(b"Satoshi Nakamoto").digest()
    nonce = rfc6979_nonce_(msg_hash, 0x1)
    expected = 0x8F8A276C19F4149656B280621E358CCE24F5F52542772691EE69063B74F15D15
    assert nonce == expected

    # the signature commits to the very same nonce
    sig = dsa.sign_(msg_hash, 0x1)
    assert sig.r == mult(nonce)[0] % secp256k1.n

    # mismatch between hf digest size and hashed message size
    with pytest.raises(CopayProofValueError, match="invalid size: "):
        rfc6979_nonce_(msg_hash[:-1], 0x1)
