#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Key pair generation templates.

A template consists of the generation mechanism and two ordered sets of attributes,
one for the public key object and one for the private key object. Both objects are
stored on the token and carry the caller supplied label. The private key is always
sensitive and never extractable, so it can't leave the token in plaintext.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pkcs11 import Attribute, Mechanism

from p11keygen.crypto.curves import CurveSpec, EccCurve, curve_by_name
from p11keygen.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# 65537 as three bytes big endian number
RSA_PUBLIC_EXPONENT = b"\x01\x00\x01"


class KeyFamily(str, Enum):
    """Family of the generated key pair, the value is the command line spelling."""

    RSA = "RSA"
    EC = "ECDSA"


@dataclass(frozen=True)
class KeyTemplate:
    """Request for key pair generation.

    :param key_family: Family of the key pair.
    :param mechanism: Key pair generation mechanism.
    :param public_attributes: Attributes of the public key object.
    :param private_attributes: Attributes of the private key object.
    :param curve: Curve of the EC key pair, None for RSA.
    """

    key_family: KeyFamily
    mechanism: Mechanism
    public_attributes: dict[Attribute, Any] = field(default_factory=dict)
    private_attributes: dict[Attribute, Any] = field(default_factory=dict)
    curve: Optional[CurveSpec] = None


def _private_attributes(label: str) -> dict[Attribute, Any]:
    return {
        Attribute.LABEL: label,
        Attribute.TOKEN: True,
        Attribute.SENSITIVE: True,
        Attribute.EXTRACTABLE: False,
        Attribute.SIGN: True,
    }


def rsa_template(label: str, modulus_bits: int) -> KeyTemplate:
    """Build the RSA key pair generation template.

    The public key has the fixed public exponent 65537.

    :param label: Label of both key objects.
    :param modulus_bits: Length of the modulus in bits.
    :raises ConfigurationError: The modulus length is not a positive number.
    :return: Key pair generation template.
    """
    if not isinstance(modulus_bits, int) or modulus_bits <= 0:
        raise ConfigurationError(f"Invalid RSA modulus length: {modulus_bits}")
    logger.debug(f"Building RSA{modulus_bits} key pair template for '{label}'")
    return KeyTemplate(
        key_family=KeyFamily.RSA,
        mechanism=Mechanism.RSA_PKCS_KEY_PAIR_GEN,
        public_attributes={
            Attribute.LABEL: label,
            Attribute.TOKEN: True,
            Attribute.VERIFY: True,
            Attribute.MODULUS_BITS: modulus_bits,
            Attribute.PUBLIC_EXPONENT: RSA_PUBLIC_EXPONENT,
        },
        private_attributes=_private_attributes(label),
    )


def ec_template(label: str, curve_name: Union[str, EccCurve]) -> KeyTemplate:
    """Build the EC key pair generation template.

    The domain parameters attribute holds the DER encoded object identifier of the curve.

    :param label: Label of both key objects.
    :param curve_name: Short name of the curve, e.g. ``P256``.
    :raises UnsupportedCurve: The curve is not supported.
    :return: Key pair generation template.
    """
    curve = curve_by_name(curve_name)
    logger.debug(f"Building EC key pair template on curve {curve} for '{label}'")
    return KeyTemplate(
        key_family=KeyFamily.EC,
        mechanism=Mechanism.EC_KEY_PAIR_GEN,
        public_attributes={
            Attribute.LABEL: label,
            Attribute.TOKEN: True,
            Attribute.VERIFY: True,
            Attribute.EC_PARAMS: curve.der_oid,
        },
        private_attributes=_private_attributes(label),
        curve=curve,
    )
