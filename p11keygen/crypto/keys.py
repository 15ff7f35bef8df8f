#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""Canonical public keys and their standard encoding.

The public key read back from a token is reconstructed into one of exactly two shapes:
an RSA key (modulus and public exponent) or an elliptic curve key (named curve and
the affine point coordinates). Both export into a DER encoded SubjectPublicKeyInfo
structure, optionally wrapped in a PEM block of type ``PUBLIC KEY``.
"""

import abc
from enum import Enum
from typing import Any, Union

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from p11keygen.crypto.curves import CurveSpec
from p11keygen.crypto.exceptions import EncodingError, InvalidECPoint
from p11keygen.utils.misc import Endianness


class KeyEncoding(str, Enum):
    """Supported encodings of the exported public key."""

    PEM = "PEM"
    DER = "DER"

    @staticmethod
    def get_cryptography_encoding(encoding: "KeyEncoding") -> Encoding:
        """Get cryptography library encoding.

        :param encoding: Requested key encoding.
        :return: Corresponding cryptography library encoding.
        """
        return {KeyEncoding.PEM: Encoding.PEM, KeyEncoding.DER: Encoding.DER}[encoding]


class PublicKey(abc.ABC):
    """Canonical public key read back from the token.

    The class has exactly two implementations, :class:`PublicKeyRsa` and
    :class:`PublicKeyEcc`. Instances are immutable values.
    """

    @abc.abstractmethod
    def to_cryptography(self) -> Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]:
        """Build the cryptography library public key object.

        :raises EncodingError: The key values can't form a valid public key.
        :return: Public key object.
        """

    @property
    @abc.abstractmethod
    def key_size(self) -> int:
        """Key size in bits."""

    def export(self, encoding: KeyEncoding = KeyEncoding.PEM) -> bytes:
        """Export the key as SubjectPublicKeyInfo in requested encoding.

        :param encoding: Output encoding, defaults to PEM.
        :raises EncodingError: The key can't be marshaled.
        :return: Encoded public key.
        """
        try:
            return self.to_cryptography().public_bytes(
                KeyEncoding.get_cryptography_encoding(encoding),
                PublicFormat.SubjectPublicKeyInfo,
            )
        except (ValueError, TypeError) as exc:
            raise EncodingError(f"Cannot encode {self!r}: {str(exc)}") from exc

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.__dict__:
            raise AttributeError(f"{self.__class__.__name__} is immutable")
        super().__setattr__(name, value)

    def __eq__(self, obj: Any) -> bool:
        return isinstance(obj, self.__class__) and vars(obj) == vars(self)

    def __hash__(self) -> int:
        return hash(tuple(vars(self).values()))


class PublicKeyRsa(PublicKey):
    """RSA public key given by its modulus and public exponent."""

    def __init__(self, modulus: int, exponent: int) -> None:
        """Create RSA public key.

        :param modulus: Modulus N.
        :param exponent: Public exponent E.
        """
        self.modulus = modulus
        self.exponent = exponent

    @property
    def key_size(self) -> int:
        return self.modulus.bit_length()

    def to_cryptography(self) -> rsa.RSAPublicKey:
        try:
            return rsa.RSAPublicNumbers(e=self.exponent, n=self.modulus).public_key()
        except ValueError as exc:
            raise EncodingError(f"Invalid RSA public key values: {str(exc)}") from exc

    def __repr__(self) -> str:
        return f"RSA{self.key_size} Public Key"

    def __str__(self) -> str:
        return (
            f"RSA{self.key_size} Public key: \ne({hex(self.exponent)}) \nn({hex(self.modulus)})"
        )


class PublicKeyEcc(PublicKey):
    """Elliptic curve public key given by the curve and the point coordinates."""

    def __init__(self, curve: CurveSpec, x: int, y: int) -> None:
        """Create ECC public key.

        :param curve: Named curve of the key.
        :param x: X coordinate of the public point.
        :param y: Y coordinate of the public point.
        """
        self.curve = curve
        self.x = x
        self.y = y

    @property
    def key_size(self) -> int:
        return self.curve.key_size

    @classmethod
    def from_uncompressed_point(cls, curve: CurveSpec, data: bytes) -> "PublicKeyEcc":
        """Decode uncompressed point encoding (0x04 || X || Y).

        Both coordinates are fixed width big endian numbers of the curve coordinate size
        and the point must lie on the curve.

        :param curve: Named curve of the point.
        :param data: Encoded point.
        :raises InvalidECPoint: Data is not a valid uncompressed point on the curve.
        :return: ECC public key.
        """
        size = curve.coordinate_size
        if len(data) != 1 + 2 * size or data[0] != 0x04:
            raise InvalidECPoint(
                f"Not an uncompressed {curve.name.value} point ({len(data)} bytes)"
            )
        key = cls(
            curve=curve,
            x=int.from_bytes(data[1 : 1 + size], Endianness.BIG.value),
            y=int.from_bytes(data[1 + size :], Endianness.BIG.value),
        )
        try:
            key.to_cryptography()
        except EncodingError as exc:
            raise InvalidECPoint(f"The point is not on curve {curve.name.value}") from exc
        return key

    def to_uncompressed_point(self) -> bytes:
        """Encode the point as uncompressed point (0x04 || X || Y).

        :return: Encoded point.
        """
        size = self.curve.coordinate_size
        return (
            b"\x04"
            + self.x.to_bytes(size, Endianness.BIG.value)
            + self.y.to_bytes(size, Endianness.BIG.value)
        )

    def to_cryptography(self) -> ec.EllipticCurvePublicKey:
        try:
            return ec.EllipticCurvePublicNumbers(
                x=self.x, y=self.y, curve=self.curve.curve
            ).public_key()
        except ValueError as exc:
            raise EncodingError(f"Invalid EC public key values: {str(exc)}") from exc

    def __repr__(self) -> str:
        return f"ECC {self.curve.name.value} Public Key"

    def __str__(self) -> str:
        return (
            f"ECC ({self.curve.name.value}) Public key: \nx({hex(self.x)}) \ny({hex(self.y)})"
        )
