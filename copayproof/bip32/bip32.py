#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 hierarchical deterministic keys.

https://github.com/bitcoin/bips/blob/master/bip-0032.mediawiki

Copay derives every copayer key from an extended key:
the operator's private key from the wallet xprv,
the co-signers' public keys from the xpubs of the public key ring.

An extended key serializes to 78 bytes,
then Base58Check encoded as "xprv...", "xpub...", "tprv...", "tpub...":

    version(4) depth(1) parent_fingerprint(4) index(4) chain_code(32) key(33)

where key is either [0x00][prv_key] or a compressed public key.
"""

import hmac
from dataclasses import InitVar, dataclass, field, replace
from typing import Tuple, Type, TypeVar, Union

from copayproof import base58
from copayproof.alias import BinaryData, Octets, String
from copayproof.bip32.der_path import BIP32DerPath, indexes_from_bip32_path, is_hardened
from copayproof.curve import mult, secp256k1
from copayproof.exceptions import BIP32DerivationError, CopayProofValueError
from copayproof.hashes import hash160
from copayproof.network import NETWORKS, XPRV_VERSIONS, XPUB_VERSIONS
from copayproof.sec_point import bytes_from_point, point_from_octets
from copayproof.utils import bytes_from_octets, bytesio_from_binarydata

ec = secp256k1

_SERIALIZED_SIZE = 78
_FIXED_SIZES = (
    ("version", 4),
    ("parent_fingerprint", 4),
    ("chain_code", 32),
    ("key", 33),
)

_BIP32KeyData = TypeVar("_BIP32KeyData", bound="BIP32KeyData")


@dataclass(frozen=True, repr=False)
class BIP32KeyData:
    version: bytes
    depth: int
    parent_fingerprint: bytes
    # an int, not bytes, to avoid any byteorder ambiguity
    index: int
    chain_code: bytes
    key: bytes
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def __repr__(self) -> str:
        # no key material in logs or tracebacks
        kind = "private" if self.is_private else "public"
        return (
            f"BIP32KeyData(version={self.version.hex()}, depth={self.depth}, "
            f"index={self.index}, key=<{kind}>)"
        )

    @property
    def is_private(self) -> bool:
        return self.key[:1] == b"\x00"

    @property
    def prv_key_int(self) -> int:
        if not self.is_private:
            raise CopayProofValueError("not a private key")
        return int.from_bytes(self.key[1:], byteorder="big", signed=False)

    def assert_valid(self) -> None:

        for name, size in _FIXED_SIZES:
            value = getattr(self, name)
            if not isinstance(value, bytes) or len(value) != size:
                err_msg = f"invalid {name} length: "
                err_msg += f"{len(value)} bytes instead of {size}"
                raise CopayProofValueError(err_msg)

        if not 0 <= self.depth <= 0xFF:
            raise CopayProofValueError(f"invalid depth: {self.depth}")
        if not 0 <= self.index <= 0xFFFFFFFF:
            raise CopayProofValueError(f"invalid index: {self.index}")
        if self.depth == 0:
            if self.parent_fingerprint != b"\x00" * 4:
                err_msg = "zero depth with non-zero parent fingerprint: "
                err_msg += f"0x{self.parent_fingerprint.hex()}"
                raise CopayProofValueError(err_msg)
            if self.index != 0:
                err_msg = f"zero depth with non-zero index: {self.index}"
                raise CopayProofValueError(err_msg)

        prefix = self.key[0]
        if self.version in XPRV_VERSIONS:
            if prefix != 0:
                err_msg = f"invalid private key prefix: 0x{prefix:02x}"
                raise CopayProofValueError(err_msg)
            if not 0 < self.prv_key_int < ec.n:
                raise CopayProofValueError("invalid private key not in 1..n-1")
        elif self.version in XPUB_VERSIONS:
            if prefix not in (0x02, 0x03):
                err_msg = "invalid public key prefix not in (0x02, 0x03): "
                err_msg += f"0x{prefix:02x}"
                raise CopayProofValueError(err_msg)
            try:
                point_from_octets(self.key, ec)
            except CopayProofValueError as e:
                err_msg = f"invalid public key: 0x{self.key.hex()}"
                raise CopayProofValueError(err_msg) from e
        else:
            err_msg = f"unknown extended key version: 0x{self.version.hex()}"
            raise CopayProofValueError(err_msg)

    def serialize(self, check_validity: bool = True) -> bytes:

        if check_validity:
            self.assert_valid()
        return (
            self.version
            + bytes([self.depth])
            + self.parent_fingerprint
            + self.index.to_bytes(4, byteorder="big", signed=False)
            + self.chain_code
            + self.key
        )

    def b58encode(self, check_validity: bool = True) -> str:
        return base58.b58encode(self.serialize(check_validity)).decode("ascii")

    @classmethod
    def parse(
        cls: Type[_BIP32KeyData], data: BinaryData, check_validity: bool = True
    ) -> _BIP32KeyData:
        "Return the BIP32KeyData of the 78 bytes read from binary data."

        xkey_bin = bytesio_from_binarydata(data).read(_SERIALIZED_SIZE)
        if len(xkey_bin) != _SERIALIZED_SIZE:
            err_msg = f"invalid decoded length: {len(xkey_bin)}"
            err_msg += f" instead of {_SERIALIZED_SIZE}"
            raise CopayProofValueError(err_msg)

        return cls(
            xkey_bin[:4],
            xkey_bin[4],
            xkey_bin[5:9],
            int.from_bytes(xkey_bin[9:13], byteorder="big", signed=False),
            xkey_bin[13:45],
            xkey_bin[45:],
            check_validity,
        )

    @classmethod
    def b58decode(
        cls: Type[_BIP32KeyData], xkey: String, check_validity: bool = True
    ) -> _BIP32KeyData:

        if isinstance(xkey, str):
            xkey = xkey.strip()
        return cls.parse(base58.b58decode(xkey), check_validity)


BIP32Key = Union[BIP32KeyData, String]


def _key_data(xkey: BIP32Key) -> BIP32KeyData:
    return xkey if isinstance(xkey, BIP32KeyData) else BIP32KeyData.b58decode(xkey)


def _rootxprv_from_seed(seed: Octets, version: Octets) -> BIP32KeyData:

    seed = bytes_from_octets(seed)
    bits = len(seed) * 8
    if bits < 128:
        raise CopayProofValueError(f"too few bits for seed: {bits} in '{seed.hex()}'")
    if bits > 512:
        raise CopayProofValueError(f"too many bits for seed: {bits} in '{seed.hex()}'")

    digest = hmac.new(b"Bitcoin seed", seed, "sha512").digest()
    version = bytes_from_octets(version, 4)
    key = b"\x00" + digest[:32]
    return BIP32KeyData(version, 0, b"\x00" * 4, 0, digest[32:], key)


def rootxprv_from_seed(
    seed: Octets, version: Octets = NETWORKS["mainnet"].bip32_prv
) -> str:
    "Return the master extended private key of a 128 to 512 bits seed."
    return _rootxprv_from_seed(seed, version).b58encode()


def _neutered(xkey: BIP32KeyData) -> BIP32KeyData:

    if not xkey.is_private:
        raise CopayProofValueError("not a private key")
    version = XPUB_VERSIONS[XPRV_VERSIONS.index(xkey.version)]
    return replace(xkey, version=version, key=bytes_from_point(mult(xkey.prv_key_int)))


def xpub_from_xprv(xprv: BIP32Key) -> str:
    """Neutered Derivation (ND).

    Return the extended public key of an extended private key:
    same chain code and path, no signing capability.
    """
    return _neutered(_key_data(xprv)).b58encode()


def _tweak(chain_code: bytes, data: bytes, index: int) -> Tuple[int, bytes]:
    "Return the key tweak and the child chain code."

    msg = data + index.to_bytes(4, byteorder="big", signed=False)
    digest = hmac.new(chain_code, msg, "sha512").digest()
    tweak = int.from_bytes(digest[:32], byteorder="big", signed=False)
    # probability lower than 1 in 2^127
    if tweak >= ec.n:
        raise CopayProofValueError(f"invalid derived key at index {index}")
    return tweak, digest[32:]


def _child(xkey: BIP32KeyData, index: int) -> BIP32KeyData:
    "Child Key Derivation (CKD)."

    if xkey.depth == 0xFF:
        raise CopayProofValueError("depth greater than 255")

    if xkey.is_private:
        q = xkey.prv_key_int
        parent_pub_key = bytes_from_point(mult(q))
        data = xkey.key if is_hardened(index) else parent_pub_key
        tweak, chain_code = _tweak(xkey.chain_code, data, index)
        q = (q + tweak) % ec.n
        if q == 0:
            raise CopayProofValueError(f"invalid derived key at index {index}")
        key = b"\x00" + q.to_bytes(32, byteorder="big", signed=False)
    else:
        if is_hardened(index):
            raise BIP32DerivationError("invalid hardened derivation from public key")
        parent_pub_key = xkey.key
        tweak, chain_code = _tweak(xkey.chain_code, parent_pub_key, index)
        Q = ec.add(point_from_octets(parent_pub_key, ec), mult(tweak))
        if Q[1] == 0:
            raise CopayProofValueError(f"invalid derived key at index {index}")
        key = bytes_from_point(Q)

    # valid by construction
    return BIP32KeyData(
        xkey.version,
        xkey.depth + 1,
        hash160(parent_pub_key)[:4],
        index,
        chain_code,
        key,
        check_validity=False,
    )


def _derive(xkey: BIP32Key, der_path: BIP32DerPath) -> BIP32KeyData:

    result = _key_data(xkey)
    for index in indexes_from_bip32_path(der_path):
        result = _child(result, index)
    return result


def derive(xkey: BIP32Key, der_path: BIP32DerPath) -> str:
    """Return the extended key derived along a multi level path.

    The path is a string like "m/44'/0'/1'/0/10"
    or a sequence of integer indexes (even a single int).
    Public extended keys cannot be derived along hardened indexes.
    """
    return _derive(xkey, der_path).b58encode()


@dataclass(frozen=True)
class KeyPair:
    "Private scalar, excluded from repr, and compressed public key."

    prv_key: int = field(repr=False)
    pub_key: bytes

    def __post_init__(self) -> None:
        if not 0 < self.prv_key < ec.n:
            raise CopayProofValueError("private key not in 1..n-1")
        if len(self.pub_key) != 33:
            raise CopayProofValueError("not a compressed public key")


def derive_private(xprv: BIP32Key, der_path: BIP32DerPath) -> KeyPair:
    "Return the key pair at der_path, hardened indexes allowed."

    q = _derive(xprv, der_path).prv_key_int
    return KeyPair(q, bytes_from_point(mult(q)))


def derive_public(xpub: BIP32Key, der_path: BIP32DerPath) -> bytes:
    """Return the compressed public key at der_path.

    Only public material is used:
    any hardened index raises BIP32DerivationError.
    """

    indexes = indexes_from_bip32_path(der_path)
    for i in indexes:
        if is_hardened(i):
            err_msg = f"hardened index in public derivation: {hex(i)}"
            raise BIP32DerivationError(err_msg)

    xkey = _key_data(xpub)
    if xkey.is_private:
        xkey = _neutered(xkey)
    return _derive(xkey, indexes).key
