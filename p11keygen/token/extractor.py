#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Reconstruction of the generated public key from token attributes.

RSA keys are rebuilt from the modulus and public exponent attributes. EC keys are
rebuilt from the EC point attribute, which comes in one of two encodings:

1. the plain uncompressed point ``0x04 || X || Y`` (PKCS#11 v2.40 and later);
2. the uncompressed point wrapped in a DER encoded OCTET STRING. PKCS#11 v2.20
   specified this form and tokens implementing the older revision still return it.

The plain form is tried first, the wrapped form is the fallback.
"""

import logging
from typing import Any, Optional

from pkcs11 import Attribute, KeyType, ObjectClass
from pyasn1.codec.der.decoder import decode
from pyasn1.error import PyAsn1Error
from pyasn1.type import univ

from p11keygen.crypto.curves import CurveSpec
from p11keygen.crypto.exceptions import InvalidECPoint
from p11keygen.crypto.keys import PublicKey, PublicKeyEcc, PublicKeyRsa
from p11keygen.token.exceptions import AttributeRetrievalError
from p11keygen.token.session import TokenSession
from p11keygen.token.templates import KeyFamily
from p11keygen.utils.misc import value_to_int

logger = logging.getLogger(__name__)

# the public exponent must fit a signed 64 bit integer
MAX_EXPONENT_BITS = 63


def extract_rsa_public_key(session: TokenSession, handle: Any) -> PublicKeyRsa:
    """Read RSA public key from the token.

    :param session: Opened token session.
    :param handle: Handle of the public key object.
    :raises AttributeRetrievalError: Modulus or public exponent is missing or invalid.
    :return: RSA public key.
    """
    attrs = session.get_attribute_value(handle, [Attribute.PUBLIC_EXPONENT, Attribute.MODULUS])
    missing = [a.name for a in (Attribute.MODULUS, Attribute.PUBLIC_EXPONENT) if a not in attrs]
    if missing:
        raise AttributeRetrievalError(
            f"Couldn't retrieve {' and '.join(missing)} of the RSA public key"
        )

    modulus = value_to_int(attrs[Attribute.MODULUS])
    exponent = value_to_int(attrs[Attribute.PUBLIC_EXPONENT])
    if exponent.bit_length() > MAX_EXPONENT_BITS:
        raise AttributeRetrievalError(f"RSA public exponent is out of range: {hex(exponent)}")

    key = PublicKeyRsa(modulus=modulus, exponent=exponent)
    logger.debug(f"Retrieved {key}")
    return key


def decode_ec_point(curve: CurveSpec, data: bytes) -> PublicKeyEcc:
    """Decode EC point attribute value.

    The plain uncompressed point is tried first; when the data isn't a valid point,
    the data is decoded as DER OCTET STRING and its content is decoded as plain point.

    :param curve: Curve the key was generated on.
    :param data: Raw value of the EC point attribute.
    :raises InvalidECPoint: Neither interpretation yields a point on the curve.
    :return: ECC public key.
    """
    if not data:
        raise InvalidECPoint("Empty EC point")

    try:
        return PublicKeyEcc.from_uncompressed_point(curve, data)
    except InvalidECPoint as exc:
        logger.debug(f"EC point is not a plain uncompressed point ({str(exc)}), trying DER")

    try:
        point, rest = decode(data, asn1Spec=univ.OctetString())
    except (PyAsn1Error, OverflowError) as exc:
        raise InvalidECPoint(f"Invalid EC point value: {data.hex()}") from exc
    if rest:
        raise InvalidECPoint(f"Unexpected data after the DER encoded point: {bytes(rest).hex()}")
    inner = point.asOctets()
    if not inner:
        raise InvalidECPoint("Invalid EC point value: empty DER OCTET STRING")
    return PublicKeyEcc.from_uncompressed_point(curve, inner)


def _check_object_kind(attrs: dict[Attribute, Any]) -> None:
    expected = {Attribute.CLASS: ObjectClass.PUBLIC_KEY, Attribute.KEY_TYPE: KeyType.EC}
    for attribute, value in expected.items():
        if attribute in attrs and attrs[attribute] != value:
            logger.warning(f"Unexpected {attribute.name} of the EC key: {attrs[attribute]}")


def extract_ec_public_key(session: TokenSession, handle: Any, curve: CurveSpec) -> PublicKeyEcc:
    """Read EC public key from the token.

    :param session: Opened token session.
    :param handle: Handle of the public key object.
    :param curve: Curve the key was generated on.
    :raises AttributeRetrievalError: The EC point attribute is missing.
    :raises InvalidECPoint: The EC point can't be decoded.
    :return: ECC public key.
    """
    attrs = session.get_attribute_value(
        handle, [Attribute.CLASS, Attribute.KEY_TYPE, Attribute.EC_POINT]
    )
    _check_object_kind(attrs)
    if Attribute.EC_POINT not in attrs:
        raise AttributeRetrievalError("Couldn't retrieve EC point")

    key = decode_ec_point(curve, bytes(attrs[Attribute.EC_POINT]))
    logger.debug(f"Retrieved {key}")
    return key


def extract_public_key(
    session: TokenSession,
    handle: Any,
    key_family: KeyFamily,
    curve: Optional[CurveSpec] = None,
) -> PublicKey:
    """Read public key of requested family from the token.

    :param session: Opened token session.
    :param handle: Handle of the public key object.
    :param key_family: Family of the generated key pair.
    :param curve: Curve of the EC key pair, required for EC.
    :raises AttributeRetrievalError: Curve is missing for EC key.
    :return: Canonical public key.
    """
    if key_family == KeyFamily.RSA:
        return extract_rsa_public_key(session, handle)
    if curve is None:
        raise AttributeRetrievalError("Curve of the EC key pair must be specified")
    return extract_ec_public_key(session, handle, curve)
