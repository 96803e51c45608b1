#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Multisig redeem script and P2SH address.

The m-of-n bare multisig script is:

OP_m <pub_key_1> ... <pub_key_n> OP_n OP_CHECKMULTISIG

BIP67 endorses lexicographic key sorting
according to the compressed key representation:
Copay (through bitcore) builds its wallet scripts with sorted keys.

https://github.com/bitcoin/bips/blob/master/bip-0067.mediawiki
"""

from dataclasses import dataclass
from typing import List, Sequence, Union

from copayproof.alias import Octets
from copayproof.base58 import b58encode
from copayproof.exceptions import CopayProofValueError
from copayproof.hashes import hash160
from copayproof.network import Network, network_from_name
from copayproof.sec_point import point_from_octets
from copayproof.utils import bytes_from_octets

OP_CHECKMULTISIG = b"\xae"
# OP_1 is 0x51, OP_16 is 0x60
_OP_1 = 0x51

NetworkLike = Union[Network, str]


def _network(network: NetworkLike) -> Network:
    return network if isinstance(network, Network) else network_from_name(network)


def op_int(i: int) -> bytes:
    # Short 1-byte op_codes exist to push numbers in [1, 16]
    if not 1 <= i <= 16:
        raise CopayProofValueError(f"invalid OP_INT: {i}")
    return bytes([_OP_1 + i - 1])


def _serialize_pub_key(pub_key: Octets) -> bytes:
    pub_key = bytes_from_octets(pub_key)
    if len(pub_key) != 33:
        err_msg = f"invalid public key size: {len(pub_key)} bytes instead of 33"
        raise CopayProofValueError(err_msg)
    # also validates the prefix and the x-coordinate
    point_from_octets(pub_key)
    # 33 bytes is pushed with a plain 1-byte length
    return bytes([len(pub_key)]) + pub_key


def sorted_pub_keys(pub_keys: Sequence[Octets]) -> List[bytes]:
    "Return the public keys in BIP67 lexicographic order."
    return sorted(bytes_from_octets(k) for k in pub_keys)


def p2ms(m: int, pub_keys: Sequence[Octets], lexi_sort: bool = False) -> bytes:
    """Return the m-of-n multisig redeem script of the provided keys.

    Keys are serialized in the given order, unless lexi_sort is True.
    """
    n = len(pub_keys)
    if not 0 < n < 17:
        raise CopayProofValueError(f"invalid n in m-of-n: {n}")
    if not 0 < m <= n:
        raise CopayProofValueError(f"invalid m in m-of-n: {m}-of-{n}")

    keys = sorted_pub_keys(pub_keys) if lexi_sort else pub_keys
    script = [op_int(m)]
    script += [_serialize_pub_key(k) for k in keys]
    script += [op_int(n), OP_CHECKMULTISIG]
    return b"".join(script)


def p2sh_address(redeem_script: Octets, network: NetworkLike = "mainnet") -> str:
    "Return the p2sh base58 address corresponding to a redeem script."
    payload = _network(network).p2sh + hash160(redeem_script)
    return b58encode(payload).decode("ascii")


@dataclass(frozen=True)
class MultisigAddress:
    redeem_script: bytes
    address: str
    network: Network


def multisig_address(
    pub_keys: Sequence[Octets], m: int, network: NetworkLike = "mainnet"
) -> MultisigAddress:
    """Return the P2SH multisig address of the keys, in the given order.

    Callers wanting the wallet address must provide BIP67 sorted keys.
    """
    net = _network(network)
    redeem_script = p2ms(m, pub_keys)
    return MultisigAddress(redeem_script, p2sh_address(redeem_script, net), net)
