#!/usr/bin/env python3

# Copyright (C) 2022 The copayproof developers
#
# This file is part of copayproof. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of copayproof including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve group of prime order and its secp256k1 instance.

The curve is y^2 = x^3 + a*x + b over F_p.
Points are affine (x, y) tuples at the interface,
while scalar multiplication works in Jacobian coordinates
and converts back to affine only once, at the end.
"""

from typing import Optional

from copayproof.alias import INF, INFJ, JacPoint, Point
from copayproof.exceptions import CopayProofValueError
from copayproof.number_theory import mod_inv, mod_sqrt
from copayproof.utils import hex_string, short_repr


def jac_from_aff(Q: Point) -> JacPoint:
    "Return the Jacobian coordinates of an affine point (assumed on curve)."
    return (Q[0], Q[1], 1) if Q[1] else INFJ


class Curve:
    """Cyclic group of prime order n of the points of the curve.

    G is the generator of the group.
    """

    def __init__(
        self, p: int, a: int, b: int, G: Point, n: int, name: str = ""
    ) -> None:

        if (4 * a**3 + 27 * b**2) % p == 0:
            raise CopayProofValueError("zero discriminant")
        self.p = p
        self._a = a % p
        self._b = b % p
        self.p_size = (p.bit_length() + 7) // 8

        self.n = n
        self.nlen = n.bit_length()
        self.n_size = (self.nlen + 7) // 8
        self.name = name

        if not self.is_on_curve(G):
            raise CopayProofValueError("generator is not on the curve")
        self.G = G
        self.GJ = jac_from_aff(G)

    def __repr__(self) -> str:
        return f"Curve('{self.name}')" if self.name else super().__repr__()

    def _y2(self, x: int) -> int:
        return ((x * x + self._a) * x + self._b) % self.p

    def is_on_curve(self, Q: Point) -> bool:
        "Return True if Q is INF or satisfies the curve equation."

        if len(Q) != 2:
            raise CopayProofValueError("point must be a tuple[int, int]")
        x, y = Q
        if y == 0:
            return True
        if not 0 < y < self.p:
            raise CopayProofValueError(f"y-coordinate not in 1..p-1: '{hex_string(y)}'")
        return self._y2(x) == y * y % self.p

    def require_on_curve(self, Q: Point) -> None:
        if not self.is_on_curve(Q):
            raise CopayProofValueError("point not on curve")

    def y(self, x: int) -> int:
        "Return one of the two y-coordinates of the points with abscissa x."

        if not 0 <= x < self.p:
            raise CopayProofValueError(f"x-coordinate not in 0..p-1: {short_repr(x)}")
        try:
            return mod_sqrt(self._y2(x), self.p)
        except CopayProofValueError as e:
            err_msg = f"invalid x-coordinate: {short_repr(x)}"
            raise CopayProofValueError(err_msg) from e

    def y_even(self, x: int) -> int:
        "Return the even y-coordinate of the points with abscissa x."
        y = self.y(x)
        return self.p - y if y & 1 else y

    def negate(self, Q: Point) -> Point:
        # % p keeps INF as INF
        return Q[0], (self.p - Q[1]) % self.p

    def add(self, Q1: Point, Q2: Point) -> Point:
        "Return the sum of two affine points of the curve."

        self.require_on_curve(Q1)
        self.require_on_curve(Q2)
        return self.aff_from_jac(self.add_jac(jac_from_aff(Q1), jac_from_aff(Q2)))

    def aff_from_jac(self, Q: JacPoint) -> Point:
        X, Y, Z = Q
        if Z == 0:
            return INF
        z_inv = mod_inv(Z, self.p)
        z_inv2 = z_inv * z_inv % self.p
        return X * z_inv2 % self.p, Y * z_inv2 * z_inv % self.p

    def x_aff_from_jac(self, Q: JacPoint) -> int:
        X, _, Z = Q
        if Z == 0:
            raise CopayProofValueError("INF has no x-coordinate")
        z_inv = mod_inv(Z, self.p)
        return X * z_inv * z_inv % self.p

    def double_jac(self, Q: JacPoint) -> JacPoint:
        X, Y, Z = Q
        if Z == 0:
            return INFJ

        p = self.p
        YY = Y * Y % p
        S = 4 * X * YY % p
        ZZ = Z * Z % p
        M = (3 * X * X + self._a * ZZ * ZZ) % p
        X3 = (M * M - 2 * S) % p
        Y3 = (M * (S - X3) - 8 * YY * YY) % p
        Z3 = 2 * Y * Z % p
        return X3, Y3, Z3

    def add_jac(self, Q: JacPoint, R: JacPoint) -> JacPoint:
        if Q[2] == 0:
            return R
        if R[2] == 0:
            return Q

        p = self.p
        X1, Y1, Z1 = Q
        X2, Y2, Z2 = R
        Z1Z1 = Z1 * Z1 % p
        Z2Z2 = Z2 * Z2 % p
        U1 = X1 * Z2Z2 % p
        U2 = X2 * Z1Z1 % p
        S1 = Y1 * Z2 * Z2Z2 % p
        S2 = Y2 * Z1 * Z1Z1 % p

        H = (U2 - U1) % p
        F = (S2 - S1) % p
        if H == 0:
            # same x: either the same point or opposite points
            return self.double_jac(Q) if F == 0 else INFJ

        HH = H * H % p
        HHH = H * HH % p
        V = U1 * HH % p
        X3 = (F * F - HHH - 2 * V) % p
        Y3 = (F * (V - X3) - S1 * HHH) % p
        Z3 = H * Z1 * Z2 % p
        return X3, Y3, Z3


def _mult(m: int, QJ: JacPoint, ec: Curve) -> JacPoint:
    """Return m*Q using the Montgomery ladder.

    Q is assumed on curve, m is a non-negative integer.
    """

    if m < 0:
        raise CopayProofValueError(f"negative m: {hex(m)}")

    # R1 = R0 + Q at every step
    R0, R1 = INFJ, QJ
    for bit in bin(m)[2:]:
        if bit == "1":
            R0, R1 = ec.add_jac(R0, R1), ec.double_jac(R1)
        else:
            R0, R1 = ec.double_jac(R0), ec.add_jac(R0, R1)
    return R0


def _double_mult(u: int, HJ: JacPoint, v: int, QJ: JacPoint, ec: Curve) -> JacPoint:
    """Return u*H + v*Q, doubling once for both (Shamir's trick).

    H and Q are assumed on curve, u and v are non-negative integers.
    """

    if u < 0:
        raise CopayProofValueError(f"negative first coefficient: {hex(u)}")
    if v < 0:
        raise CopayProofValueError(f"negative second coefficient: {hex(v)}")

    table = (INFJ, HJ, QJ, ec.add_jac(HJ, QJ))
    R = INFJ
    for i in reversed(range(max(u.bit_length(), v.bit_length()))):
        R = ec.double_jac(R)
        R = ec.add_jac(R, table[(u >> i & 1) | (v >> i & 1) << 1])
    return R


secp256k1 = Curve(
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    a=0,
    b=7,
    G=(
        0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
        0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    ),
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    name="secp256k1",
)


def mult(m: int, Q: Optional[Point] = None, ec: Curve = secp256k1) -> Point:
    "Return the affine point m*Q, Q being the generator if omitted."

    if Q is None:
        QJ = ec.GJ
    else:
        ec.require_on_curve(Q)
        QJ = jac_from_aff(Q)
    return ec.aff_from_jac(_mult(m % ec.n, QJ, ec))
