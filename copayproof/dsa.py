#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""ECDSA over secp256k1, with strict DER signatures.

Signing follows SEC 1 v.2 section 4.1.3 with the RFC6979
deterministic nonce and the bitcoin canonical low-s form
(https://github.com/bitcoin/bitcoin/pull/6769);
verification and public key recovery follow sections 4.1.4 and 4.1.6.

Functions take the message hash (trailing underscore):
the caller owns the hashing convention, e.g. the message signing magic hash
or the wallet service request hash.
"""

import contextlib
import hashlib
from dataclasses import InitVar, dataclass
from io import BytesIO
from typing import List, Type, TypeVar, Union

from copayproof import var_int
from copayproof.alias import BinaryData, HashF, JacPoint, Octets, Point
from copayproof.curve import _double_mult, _mult, secp256k1
from copayproof.exceptions import CopayProofRuntimeError, CopayProofValueError
from copayproof.number_theory import mod_inv
from copayproof.rfc6979 import _rfc6979_nonce_, challenge_
from copayproof.sec_point import point_from_octets
from copayproof.utils import bytesio_from_binarydata, short_repr

ec = secp256k1

_SEQUENCE_TAG = 0x30
_INTEGER_TAG = 0x02


def _read_tlv(stream: BytesIO, tag: int, err_msg: str) -> bytes:
    "Read a [tag][var_int size][value] element, returning the value."

    header = stream.read(1)
    if header != bytes([tag]):
        raise CopayProofValueError(f"{err_msg}: {header.hex()} instead of {tag:02x}")
    size = var_int.parse(stream)
    if size == 0:
        raise CopayProofValueError("invalid zero size")
    value = stream.read(size)
    if len(value) != size:
        raise CopayProofValueError(f"not enough bytes: {len(value)} instead of {size}")
    return value


def _tlv(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + var_int.serialize(len(value)) + value


def _der_integer(i: int) -> bytes:
    # one more byte than needed when the highest bit is set,
    # as DER integers are signed
    return _tlv(_INTEGER_TAG, i.to_bytes(i.bit_length() // 8 + 1, "big"))


def _int_from_der(stream: BytesIO) -> int:
    value = _read_tlv(stream, _INTEGER_TAG, "invalid value header")
    if value[0] >= 0x80:
        raise CopayProofValueError("invalid negative scalar")
    if value[0] == 0 and len(value) > 1 and value[1] < 0x80:
        raise CopayProofValueError("invalid 'highest bit set' padding")
    return int.from_bytes(value, "big")


_Sig = TypeVar("_Sig", bound="Sig")


@dataclass(frozen=True)
class Sig:
    """ECDSA signature (r, s), serialized in strict DER as in BIP66.

    [0x30][size][0x02][r-size][r][0x02][s-size][s]
    """

    r: int
    s: int
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        for name, scalar in (("r", self.r), ("s", self.s)):
            if not 0 < scalar < ec.n:
                err_msg = f"scalar {name} not in 1..n-1: {short_repr(scalar)}"
                raise CopayProofValueError(err_msg)

    def serialize(self, check_validity: bool = True) -> bytes:
        if check_validity:
            self.assert_valid()
        return _tlv(_SEQUENCE_TAG, _der_integer(self.r) + _der_integer(self.s))

    @classmethod
    def parse(
        cls: Type[_Sig], data: BinaryData, check_validity: bool = True
    ) -> _Sig:
        stream = bytesio_from_binarydata(data)
        sequence = _read_tlv(stream, _SEQUENCE_TAG, "invalid compound header")

        elements = BytesIO(sequence)
        r = _int_from_der(elements)
        s = _int_from_der(elements)
        # trailing bytes would make the signature malleable
        if elements.read(1):
            raise CopayProofValueError("invalid DER sequence length")

        return cls(r, s, check_validity)


def _prv_key_scalar(q: int) -> int:
    if not 0 < q < ec.n:
        raise CopayProofValueError("private key not in 1..n-1")
    return q


def _sign_(c: int, q: int, nonce: int, lower_s: bool = True) -> Sig:
    # c in [0, n-1], q and nonce in [1, n-1]

    r = ec.x_aff_from_jac(_mult(nonce, ec.GJ, ec)) % ec.n
    if r == 0:
        raise CopayProofRuntimeError("failed to sign: r = 0")
    s = mod_inv(nonce, ec.n) * (c + r * q) % ec.n
    if s == 0:
        raise CopayProofRuntimeError("failed to sign: s = 0")
    if lower_s and s > ec.n // 2:
        s = ec.n - s
    return Sig(r, s)


def sign_(
    msg_hash: Octets, q: int, lower_s: bool = True, hf: HashF = hashlib.sha256
) -> Sig:
    "Return the deterministic ECDSA signature of an hf-sized message hash."

    q = _prv_key_scalar(q)
    c = challenge_(msg_hash, ec, hf)
    nonce = _rfc6979_nonce_(c, q, ec, hf)
    return _sign_(c, q, nonce, lower_s)


def _assert_as_valid_(c: int, QJ: JacPoint, r: int, s: int, lower_s: bool) -> None:

    if lower_s and s > ec.n // 2:
        raise CopayProofValueError("not a low s")

    w = mod_inv(s, ec.n)
    # K = (c*w)*G + (r*w)*Q
    KJ = _double_mult(r * w % ec.n, QJ, c * w % ec.n, ec.GJ, ec)
    if KJ[2] == 0:
        raise CopayProofRuntimeError("invalid (INF) key")  # pragma: no cover
    if ec.x_aff_from_jac(KJ) % ec.n != r:
        raise CopayProofRuntimeError("signature verification failed")


def _sig_from(sig: Union[Sig, Octets]) -> Sig:
    if isinstance(sig, Sig):
        sig.assert_valid()
        return sig
    return Sig.parse(sig)


def assert_as_valid_(
    msg_hash: Octets,
    pub_key: Union[Point, Octets],
    sig: Union[Sig, Octets],
    lower_s: bool = True,
    hf: HashF = hashlib.sha256,
) -> None:
    "Raise an error if sig is not a valid signature of msg_hash for pub_key."

    sig = _sig_from(sig)
    c = challenge_(msg_hash, ec, hf)
    if isinstance(pub_key, tuple):
        ec.require_on_curve(pub_key)
        Q = pub_key
    else:
        Q = point_from_octets(pub_key, ec)
    _assert_as_valid_(c, (Q[0], Q[1], 1), sig.r, sig.s, lower_s)


def verify_(
    msg_hash: Octets,
    pub_key: Union[Point, Octets],
    sig: Union[Sig, Octets],
    lower_s: bool = True,
    hf: HashF = hashlib.sha256,
) -> bool:
    "Return True if sig is a valid signature of msg_hash for pub_key."

    # any failure, including malformed input, is a failed verification
    try:
        assert_as_valid_(msg_hash, pub_key, sig, lower_s, hf)
    except Exception:  # pylint: disable=broad-except
        return False
    return True


def _recover_pub_key_(key_id: int, c: int, r: int, s: int, lower_s: bool) -> JacPoint:
    # key_id bit 1: x_K is r + n instead of r
    # key_id bit 0: odd instead of even y_K
    x_K = r + (key_id >> 1 & 1) * ec.n
    y_K = ec.y_even(x_K)
    if key_id & 1:
        y_K = ec.p - y_K

    r_inv = mod_inv(r, ec.n)
    # Q = (s/r)*K - (c/r)*G
    QJ = _double_mult(r_inv * s % ec.n, (x_K, y_K, 1), -r_inv * c % ec.n, ec.GJ, ec)
    _assert_as_valid_(c, QJ, r, s, lower_s)
    return QJ


def recover_pub_key_(
    key_id: int,
    msg_hash: Octets,
    sig: Union[Sig, Octets],
    lower_s: bool = True,
    hf: HashF = hashlib.sha256,
) -> Point:
    "Return the key_id-th public key for which sig is valid."

    sig = _sig_from(sig)
    c = challenge_(msg_hash, ec, hf)
    return ec.aff_from_jac(_recover_pub_key_(key_id, c, sig.r, sig.s, lower_s))


def recover_pub_keys_(
    msg_hash: Octets,
    sig: Union[Sig, Octets],
    lower_s: bool = True,
    hf: HashF = hashlib.sha256,
) -> List[Point]:
    """Return the public keys for which sig is valid.

    Keys are listed in key_id order, skipping the key_ids
    which do not give a valid key.
    """

    sig = _sig_from(sig)
    c = challenge_(msg_hash, ec, hf)
    pub_keys: List[Point] = []
    for key_id in range(4):
        with contextlib.suppress(CopayProofValueError, CopayProofRuntimeError):
            QJ = _recover_pub_key_(key_id, c, sig.r, sig.s, lower_s)
            pub_keys.append(ec.aff_from_jac(QJ))
    return pub_keys
