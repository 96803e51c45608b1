#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `copayproof.script` module."

import pytest

from copayproof.base58 import b58decode, b58encode
from copayproof.curve import mult
from copayproof.exceptions import ConfigurationError, CopayProofValueError
from copayproof.hashes import hash160
from copayproof.network import NETWORKS
from copayproof.script import (
    multisig_address,
    op_int,
    p2ms,
    p2sh_address,
    sorted_pub_keys,
)
from copayproof.sec_point import bytes_from_point

# https://github.com/bitcoin/bips/blob/master/bip-0067.mediawiki#test-vectors
BIP67_KEYS = [
    "02ff12471208c14bd580709cb2358d98975247d8765f92bc25eab3b2763ed605f8",
    "02fe6f0a5a297eb38c391581c4413e084773ea23954d93f7753db7dc0adc188b2f",
]
BIP67_SCRIPT = (
    "5221"
    "02fe6f0a5a297eb38c391581c4413e084773ea23954d93f7753db7dc0adc188b2f"
    "21"
    "02ff12471208c14bd580709cb2358d98975247d8765f92bc25eab3b2763ed605f8"
    "52ae"
)
BIP67_ADDRESS = "39bgKC7RFbpoCRbtD5KEdkYKtNyhpsNa3Z"


def test_op_int() -> None:
    assert op_int(1) == b"\x51"
    assert op_int(16) == b"\x60"
    for i in (0, 17, -1):
        with pytest.raises(CopayProofValueError, match="invalid OP_INT: "):
            op_int(i)


def test_bip67() -> None:

    sorted_keys = sorted_pub_keys(BIP67_KEYS)
    assert sorted_keys == [bytes.fromhex(k) for k in reversed(BIP67_KEYS)]

    script = p2ms(2, BIP67_KEYS, lexi_sort=True)
    assert script.hex() == BIP67_SCRIPT
    assert p2ms(2, sorted_keys) == script
    # keys are serialized in the given order
    assert p2ms(2, BIP67_KEYS) != script

    assert p2sh_address(script) == BIP67_ADDRESS
    assert p2sh_address(script, NETWORKS["mainnet"]) == BIP67_ADDRESS

    multisig = multisig_address(sorted_keys, 2, "livenet")
    assert multisig.redeem_script == script
    assert multisig.address == BIP67_ADDRESS
    assert multisig.network == NETWORKS["mainnet"]


def test_p2sh_address() -> None:
    # documented test case: https://learnmeabitcoin.com/guide/p2sh
    payload = bytes.fromhex("748284390f9e263a4b766a75d0633c50426eb875")
    addr = "3CK4fEwbMP7heJarmU4eqA3sMbVJyEnU3V"
    assert b58encode(NETWORKS["mainnet"].p2sh + payload).decode("ascii") == addr
    assert b58decode(addr, 21) == b"\x05" + payload


def test_testnet_address() -> None:

    pub_keys = sorted_pub_keys([bytes_from_point(mult(q)) for q in (1, 2, 3)])
    mainnet = multisig_address(pub_keys, 2, "mainnet")
    testnet = multisig_address(pub_keys, 2, "testnet")

    assert mainnet.redeem_script == testnet.redeem_script
    assert mainnet.address.startswith("3")
    assert testnet.address.startswith("2")

    assert b58decode(testnet.address, 21) == b"\xc4" + hash160(testnet.redeem_script)


def test_address_determinism() -> None:

    pub_keys = [bytes_from_point(mult(q)) for q in (7, 5, 3)]
    first = multisig_address(sorted_pub_keys(pub_keys), 2, "mainnet")
    again = multisig_address(sorted_pub_keys(pub_keys[::-1]), 2, "mainnet")
    assert first == again

    # different threshold, different address
    assert multisig_address(sorted_pub_keys(pub_keys), 3).address != first.address

    # 2-of-3 script layout
    script = first.redeem_script
    assert len(script) == 1 + 3 * 34 + 2
    assert script[0] == 0x52
    assert script[-2] == 0x53
    assert script[-1] == 0xAE


def test_exceptions() -> None:

    pub_keys = [bytes_from_point(mult(q)) for q in (1, 2, 3)]

    with pytest.raises(CopayProofValueError, match="invalid m in m-of-n: "):
        p2ms(4, pub_keys)

    with pytest.raises(CopayProofValueError, match="invalid m in m-of-n: "):
        p2ms(0, pub_keys)

    with pytest.raises(CopayProofValueError, match="invalid n in m-of-n: "):
        p2ms(1, pub_keys[:1] * 17)

    with pytest.raises(CopayProofValueError, match="invalid n in m-of-n: "):
        p2ms(1, [])

    uncompressed = bytes_from_point(mult(1), compressed=False)
    with pytest.raises(CopayProofValueError, match="invalid public key size: "):
        p2ms(1, [uncompressed])

    with pytest.raises(CopayProofValueError, match="invalid size for uncompressed"):
        p2ms(1, [b"\x04" + pub_keys[0][1:]])

    with pytest.raises(ConfigurationError, match="unknown network: "):
        multisig_address(pub_keys, 2, "regtest")
