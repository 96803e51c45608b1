#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Bitcoin message signing (BMS).

Bitcoin uses a P2PKH address-based scheme for message signature:
the signature does not need the public key, which is recovered
from the signature itself and compared with the expected one.

The message is prefixed with the "Bitcoin Signed Message:" magic
and its var_int length, then double SHA256 hashed;
the hash is signed with the RFC6979 deterministic ECDSA,
using the bitcoin canonical 'low-s' form.

The signature is serialized as
[1-byte recovery flag][32-bytes r][32-bytes s]
and then base64-encoded.
The recovery flag is 27 + key_id for uncompressed public keys
and 27 + 4 + key_id for compressed ones,
key_id in [0, 3] selecting the public key among the recoverable ones.
Only compressed keys are signed here, Copay keys being compressed.

https://github.com/bitcoin/bitcoin/pull/524
"""

import base64
from dataclasses import InitVar, dataclass
from typing import Type, TypeVar, Union

from copayproof import dsa, var_int
from copayproof.alias import BinaryData, Octets, String
from copayproof.curve import mult, secp256k1
from copayproof.exceptions import CopayProofValueError
from copayproof.hashes import hash256
from copayproof.sec_point import bytes_from_point
from copayproof.utils import bytes_from_octets, bytesio_from_binarydata

MAGIC_PREFIX = b"\x18Bitcoin Signed Message:\n"

_RF_UNCOMPRESSED = 27
_RF_COMPRESSED = 31
_SCALAR_SIZE = secp256k1.n_size
_SIG_SIZE = 1 + 2 * _SCALAR_SIZE

_Sig = TypeVar("_Sig", bound="Sig")


@dataclass(frozen=True)
class Sig:
    "Compact signature: recovery flag rf and the ECDSA signature."

    rf: int
    dsa_sig: dsa.Sig
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    @property
    def compressed(self) -> bool:
        return self.rf >= _RF_COMPRESSED

    @property
    def key_id(self) -> int:
        return (self.rf - _RF_UNCOMPRESSED) % 4

    def assert_valid(self) -> None:
        if not _RF_UNCOMPRESSED <= self.rf < _RF_COMPRESSED + 4:
            raise CopayProofValueError(f"invalid recovery flag: {self.rf}")
        self.dsa_sig.assert_valid()

    def serialize(self, check_validity: bool = True) -> bytes:
        "Return the 65 bytes [rf][r][s] compact serialization."

        if check_validity:
            self.assert_valid()
        r = self.dsa_sig.r.to_bytes(_SCALAR_SIZE, byteorder="big", signed=False)
        s = self.dsa_sig.s.to_bytes(_SCALAR_SIZE, byteorder="big", signed=False)
        return bytes([self.rf]) + r + s

    def b64encode(self, check_validity: bool = True) -> str:
        return base64.b64encode(self.serialize(check_validity)).decode("ascii")

    @classmethod
    def parse(cls: Type[_Sig], data: BinaryData, check_validity: bool = True) -> _Sig:

        sig_bin = bytesio_from_binarydata(data).read(_SIG_SIZE)
        if len(sig_bin) != _SIG_SIZE:
            err_msg = f"invalid decoded length: {len(sig_bin)} instead of {_SIG_SIZE}"
            raise CopayProofValueError(err_msg)

        r = int.from_bytes(sig_bin[1 : 1 + _SCALAR_SIZE], byteorder="big")
        s = int.from_bytes(sig_bin[1 + _SCALAR_SIZE :], byteorder="big")
        return cls(sig_bin[0], dsa.Sig(r, s, check_validity=False), check_validity)

    @classmethod
    def b64decode(cls: Type[_Sig], data: String, check_validity: bool = True) -> _Sig:

        if isinstance(data, str):
            data = data.strip()
        return cls.parse(base64.b64decode(data, validate=True), check_validity)


def magic_hash(msg: String) -> bytes:
    "Return the double SHA256 of the magic prefixed message."

    if isinstance(msg, str):
        msg = msg.encode()
    return hash256(MAGIC_PREFIX + var_int.serialize(len(msg)) + msg)


def sign(msg: String, prv_key: int) -> Sig:
    "Return the compact signature of msg, for the compressed public key."

    msg_hash = magic_hash(msg)
    dsa_sig = dsa.sign_(msg_hash, prv_key)
    # the key_id selects our key among the recoverable ones
    key_id = dsa.recover_pub_keys_(msg_hash, dsa_sig).index(mult(prv_key))
    return Sig(_RF_COMPRESSED + key_id, dsa_sig)


def recover_pub_key(msg: String, sig: Union[Sig, String]) -> bytes:
    "Return the SEC 1 public key recovered from the signature of msg."

    if isinstance(sig, Sig):
        sig.assert_valid()
    else:
        sig = Sig.b64decode(sig)

    Q = dsa.recover_pub_key_(sig.key_id, magic_hash(msg), sig.dsa_sig)
    return bytes_from_point(Q, compressed=sig.compressed)


def assert_as_valid(msg: String, pub_key: Octets, sig: Union[Sig, String]) -> None:
    "Raise an error if sig is not a valid signature of msg for pub_key."

    pub_key = bytes_from_octets(pub_key)
    recovered = recover_pub_key(msg, sig)
    if recovered != pub_key:
        err_msg = f"signature key mismatch: {recovered.hex()}"
        err_msg += f" instead of {pub_key.hex()}"
        raise CopayProofValueError(err_msg)


def verify(msg: String, pub_key: Octets, sig: Union[Sig, String]) -> bool:
    "Return True if sig is a valid signature of msg for pub_key."

    # malformed input too is a failed verification
    try:
        assert_as_valid(msg, pub_key, sig)
    except Exception:  # pylint: disable=broad-except
        return False
    return True
