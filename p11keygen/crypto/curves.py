#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Registry of the supported elliptic curves.

The registry bridges three identities of a curve: its short name used on the command
line (e.g. ``P256``), the curve parameter object of the ``cryptography`` library and the
SEC1/X9.62 object identifier stored in the ``CKA_EC_PARAMS`` attribute of PKCS#11 keys.
The table is fixed, only the four NIST prime curves are supported.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec
from pyasn1.codec.der.decoder import decode
from pyasn1.codec.der.encoder import encode
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ

from p11keygen.crypto.exceptions import UnknownCurve, UnsupportedCurve


class EccCurve(str, Enum):
    """Enumeration of supported elliptic curves.

    The value is the canonical key of the curve registry.
    """

    P224 = "P224"
    P256 = "P256"
    P384 = "P384"
    P521 = "P521"


@dataclass(frozen=True)
class CurveSpec:
    """Identity of a supported elliptic curve.

    :param name: Short name of the curve.
    :param curve: Curve parameters object of the cryptography library.
    :param oid: Object identifier of the named curve as sequence of arcs.
    """

    name: EccCurve
    curve: ec.EllipticCurve
    oid: tuple[int, ...]

    @property
    def key_size(self) -> int:
        """Size of the curve order in bits."""
        return self.curve.key_size

    @property
    def coordinate_size(self) -> int:
        """Size of one point coordinate in bytes."""
        return math.ceil(self.curve.key_size / 8)

    @property
    def dotted_oid(self) -> str:
        """Object identifier in dotted notation."""
        return ".".join(str(arc) for arc in self.oid)

    @property
    def der_oid(self) -> bytes:
        """DER encoded OBJECT IDENTIFIER, the value of the EC domain parameters attribute."""
        return encode_oid(self.oid)

    def __str__(self) -> str:
        return f"{self.name.value} ({self.curve.name}, {self.dotted_oid})"


_CURVES: dict[EccCurve, CurveSpec] = {
    EccCurve.P224: CurveSpec(EccCurve.P224, ec.SECP224R1(), (1, 3, 132, 0, 33)),
    EccCurve.P256: CurveSpec(EccCurve.P256, ec.SECP256R1(), (1, 2, 840, 10045, 3, 1, 7)),
    EccCurve.P384: CurveSpec(EccCurve.P384, ec.SECP384R1(), (1, 3, 132, 0, 34)),
    EccCurve.P521: CurveSpec(EccCurve.P521, ec.SECP521R1(), (1, 3, 132, 0, 35)),
}


def get_supported_curves() -> list[str]:
    """Get names of all supported curves.

    :return: List of curve names.
    """
    return [curve.value for curve in _CURVES]


def curve_by_name(name: Union[str, EccCurve]) -> CurveSpec:
    """Get the curve specification by its short name.

    :param name: Short curve name, e.g. ``P256``.
    :raises UnsupportedCurve: The curve name is not supported.
    :return: Curve specification.
    """
    try:
        return _CURVES[EccCurve(name)]
    except ValueError as exc:
        raise UnsupportedCurve(
            f"Curve '{name}' is not supported. Use one of: {', '.join(get_supported_curves())}"
        ) from exc


def oid_for(curve: Union[str, EccCurve, ec.EllipticCurve]) -> tuple[int, ...]:
    """Get the object identifier of the curve.

    The lookup is keyed by the curve name, never by the identity of the curve object.

    :param curve: Short curve name or curve parameters object of the cryptography library.
    :raises UnsupportedCurve: The short curve name is not supported.
    :raises UnknownCurve: The curve parameters are not registered.
    :return: Object identifier as sequence of arcs.
    """
    if isinstance(curve, str):
        return curve_by_name(curve).oid
    for spec in _CURVES.values():
        if spec.curve.name == curve.name:
            return spec.oid
    raise UnknownCurve(f"No object identifier registered for curve '{curve.name}'")


def encode_oid(oid: tuple[int, ...]) -> bytes:
    """DER encode the object identifier.

    :param oid: Object identifier as sequence of arcs.
    :return: DER encoded OBJECT IDENTIFIER.
    """
    return encode(univ.ObjectIdentifier(oid))


def decode_oid(data: bytes) -> tuple[int, ...]:
    """Decode DER encoded object identifier.

    :param data: DER encoded OBJECT IDENTIFIER.
    :raises UnknownCurve: The data is not a DER encoded object identifier.
    :return: Object identifier as sequence of arcs.
    """
    try:
        oid, rest = decode(data, asn1Spec=univ.ObjectIdentifier())
    except (PyAsn1Error, OverflowError) as exc:
        raise UnknownCurve(f"Invalid DER encoded curve OID: {data.hex()}") from exc
    if rest:
        raise UnknownCurve(f"Unexpected data after the curve OID: {bytes(rest).hex()}")
    return oid.asTuple()
