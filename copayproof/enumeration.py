#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Enumeration of the issued wallet addresses and their signature.

Receive addresses come first, then change addresses.
The first failure aborts the enumeration: nothing is retried or skipped.
"""

import logging
from typing import Iterator, List, Tuple

from copayproof import bms
from copayproof.alias import String
from copayproof.bip32 import BIP32KeyData, derive, derive_private, derive_public
from copayproof.exceptions import ConfigurationError
from copayproof.integrity import (
    assert_same_pub_key,
    assert_valid_participants,
    operator_ring_index,
)
from copayproof.policy import CHANGE_CHAIN, RECEIVE_CHAIN, PathPolicy
from copayproof.record import SignedRecord
from copayproof.script import multisig_address, sorted_pub_keys
from copayproof.wallet import WalletMetadata

logger = logging.getLogger(__name__)

PROGRESS_STEP = 10


def address_slots(
    receive_count: int, change_count: int
) -> Iterator[Tuple[int, int, bool]]:
    """Yield (chain, index, last) for every issued address.

    last flags the final index of each non-empty chain.
    """

    for name, count in (("receive", receive_count), ("change", change_count)):
        if count < 0:
            raise ConfigurationError(f"negative {name} address count: {count}")

    for chain, count in ((RECEIVE_CHAIN, receive_count), (CHANGE_CHAIN, change_count)):
        for index in range(count):
            yield chain, index, index == count - 1


class AddressSigner:
    """Sign the message with the operator key of each wallet address."""

    def __init__(self, metadata: WalletMetadata, message: String, policy: PathPolicy):
        self.metadata = metadata
        self.message = message
        self.policy = policy
        self.network = metadata.network_params

        self._account_xprv = derive(metadata.xprv, policy.account_path)
        self._operator_index = operator_ring_index(metadata, self._account_xprv)
        self._ring: List[BIP32KeyData] = [
            BIP32KeyData.b58decode(xpub) for xpub in metadata.public_key_ring
        ]

    @property
    def operator_index(self) -> int:
        return self._operator_index

    def sign_slot(self, chain: int, index: int, last: bool = False) -> SignedRecord:

        address_path = self.policy.address_path(chain, index)
        full_path = self.policy.full_path(chain, index)
        key_pair = derive_private(self._account_xprv, address_path)

        pub_keys = [derive_public(xkey, address_path) for xkey in self._ring]
        assert_same_pub_key(key_pair.pub_key, pub_keys[self._operator_index], full_path)
        assert_valid_participants(pub_keys, key_pair.pub_key, self.metadata.n)

        ordered = sorted_pub_keys(pub_keys)
        multisig = multisig_address(ordered, self.metadata.m, self.network)
        sig = bms.sign(self.message, key_pair.prv_key)

        return SignedRecord(
            address=multisig.address,
            threshold=self.metadata.m,
            path=self.policy.full_path_str(chain, index),
            public_keys=tuple(k.hex() for k in ordered),
            signatures={key_pair.pub_key.hex(): sig.b64encode()},
            last=last,
        )


def enumerate_records(
    signer: AddressSigner, receive_count: int, change_count: int
) -> Iterator[SignedRecord]:
    "Yield the signed records of all issued addresses, in order."

    total = receive_count + change_count
    count = 0
    for chain, index, last in address_slots(receive_count, change_count):
        if count % PROGRESS_STEP == 0:
            logger.info("signed %d of %d addresses", count, total)
        yield signer.sign_slot(chain, index, last)
        count += 1
    logger.info("signed %d addresses", count)
