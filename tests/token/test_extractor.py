#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Public key extraction testing module.

Tests reconstruction of RSA and EC public keys from the token attributes, including
both encodings of the EC point attribute.
"""

import logging

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from pkcs11 import Attribute, KeyType, ObjectClass
from pyasn1.codec.der.encoder import encode
from pyasn1.type import univ

from p11keygen.crypto.curves import EccCurve, curve_by_name
from p11keygen.crypto.exceptions import InvalidECPoint
from p11keygen.crypto.keys import PublicKeyEcc, PublicKeyRsa
from p11keygen.token.exceptions import AttributeRetrievalError
from p11keygen.token.extractor import (
    decode_ec_point,
    extract_ec_public_key,
    extract_public_key,
    extract_rsa_public_key,
)
from p11keygen.token.templates import KeyFamily
from tests.conftest import FakeTokenSession, ec_attributes, rsa_attributes


def _point(curve: EccCurve) -> tuple[ec.EllipticCurvePublicKey, bytes]:
    spec = curve_by_name(curve)
    key = ec.generate_private_key(spec.curve).public_key()
    numbers = key.public_numbers()
    size = spec.coordinate_size
    return key, b"\x04" + numbers.x.to_bytes(size, "big") + numbers.y.to_bytes(size, "big")


@pytest.mark.parametrize("curve", list(EccCurve))
def test_decode_plain_point(curve: EccCurve) -> None:
    """Test decoding of the plain uncompressed point.

    :param curve: Curve of the key.
    """
    key, point = _point(curve)
    decoded = decode_ec_point(curve_by_name(curve), point)
    assert decoded.x == key.public_numbers().x
    assert decoded.y == key.public_numbers().y
    assert decoded.to_uncompressed_point() == point


@pytest.mark.parametrize("curve", list(EccCurve))
def test_decode_wrapped_point(curve: EccCurve) -> None:
    """Test that the DER wrapped point decodes to the same key as the plain one.

    :param curve: Curve of the key.
    """
    _, point = _point(curve)
    spec = curve_by_name(curve)
    wrapped = encode(univ.OctetString(point))
    assert wrapped[0] == 0x04 and len(wrapped) > len(point)
    assert decode_ec_point(spec, wrapped) == decode_ec_point(spec, point)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x04\x00",
        b"\x04",
        bytes.fromhex("deadbeef"),
        bytes.fromhex("0441") + b"\x04" + bytes(64),
        bytes.fromhex("0488ffffffffffffffff"),
        bytes.fromhex("0488ffffffffffffffff") + bytes(4),
        bytes.fromhex("2488ffffffffffffffff") + bytes(4),
    ],
    ids=[
        "empty",
        "empty-wrapper",
        "tag-only",
        "garbage",
        "zero-point",
        "huge-length",
        "huge-length-with-content",
        "constructed-huge-length",
    ],
)
def test_decode_invalid_point(data: bytes) -> None:
    """Test rejection of values which are not a point in either encoding.

    :param data: Invalid EC point value.
    """
    with pytest.raises(InvalidECPoint):
        decode_ec_point(curve_by_name("P256"), data)


def test_decode_wrapped_point_trailing_data() -> None:
    _, point = _point(EccCurve.P256)
    with pytest.raises(InvalidECPoint):
        decode_ec_point(curve_by_name("P256"), encode(univ.OctetString(point)) + b"\x00")


def test_decode_point_off_curve() -> None:
    _, point = _point(EccCurve.P256)
    off_curve = point[:-1] + bytes([point[-1] ^ 0x01])
    spec = curve_by_name("P256")
    with pytest.raises(InvalidECPoint):
        decode_ec_point(spec, off_curve)
    with pytest.raises(InvalidECPoint):
        decode_ec_point(spec, encode(univ.OctetString(off_curve)))


def test_decode_point_wrong_curve() -> None:
    _, point = _point(EccCurve.P384)
    with pytest.raises(InvalidECPoint):
        decode_ec_point(curve_by_name("P256"), point)


def test_extract_rsa(rsa_public_key: rsa.RSAPublicKey) -> None:
    """Test RSA2048 public key reconstruction.

    :param rsa_public_key: Public key held by the token.
    """
    session = FakeTokenSession(rsa_attributes(rsa_public_key))
    key = extract_public_key(session, "public-handle", KeyFamily.RSA)
    assert isinstance(key, PublicKeyRsa)
    assert key.key_size == 2048
    assert key.exponent == 65537
    assert key.modulus == rsa_public_key.public_numbers().n
    assert set(session.requested[0]) == {Attribute.MODULUS, Attribute.PUBLIC_EXPONENT}


@pytest.mark.parametrize(
    "missing,message",
    [
        ([Attribute.MODULUS], "MODULUS"),
        ([Attribute.PUBLIC_EXPONENT], "PUBLIC_EXPONENT"),
        ([Attribute.MODULUS, Attribute.PUBLIC_EXPONENT], "MODULUS and PUBLIC_EXPONENT"),
    ],
)
def test_extract_rsa_missing_attribute(
    rsa_public_key: rsa.RSAPublicKey, missing: list, message: str
) -> None:
    """Test that a missing RSA attribute is reported.

    :param rsa_public_key: Public key held by the token.
    :param missing: Attributes not returned by the token.
    :param message: Expected part of the error message.
    """
    attrs = rsa_attributes(rsa_public_key)
    for attribute in missing:
        del attrs[attribute]
    with pytest.raises(AttributeRetrievalError, match=message):
        extract_rsa_public_key(FakeTokenSession(attrs), "public-handle")


def test_extract_rsa_exponent_out_of_range(rsa_public_key: rsa.RSAPublicKey) -> None:
    attrs = rsa_attributes(rsa_public_key)
    attrs[Attribute.PUBLIC_EXPONENT] = b"\x01" + bytes(7) + b"\x01"
    with pytest.raises(AttributeRetrievalError, match="out of range"):
        extract_rsa_public_key(FakeTokenSession(attrs), "public-handle")


@pytest.mark.parametrize("wrapped", [False, True], ids=["plain", "wrapped"])
def test_extract_ec(wrapped: bool) -> None:
    """Test EC public key reconstruction with both point encodings.

    :param wrapped: Token returns the DER wrapped point.
    """
    key, point = _point(EccCurve.P256)
    value = encode(univ.OctetString(point)) if wrapped else point
    session = FakeTokenSession(ec_attributes(key, value))
    result = extract_public_key(session, "public-handle", KeyFamily.EC, curve_by_name("P256"))
    assert isinstance(result, PublicKeyEcc)
    assert result.to_cryptography().public_numbers() == key.public_numbers()
    assert Attribute.EC_POINT in session.requested[0]


def test_extract_ec_missing_point() -> None:
    key, _ = _point(EccCurve.P256)
    attrs = ec_attributes(key)
    del attrs[Attribute.EC_POINT]
    with pytest.raises(AttributeRetrievalError):
        extract_ec_public_key(FakeTokenSession(attrs), "public-handle", curve_by_name("P256"))


def test_extract_ec_without_curve() -> None:
    with pytest.raises(AttributeRetrievalError):
        extract_public_key(FakeTokenSession(), "public-handle", KeyFamily.EC)


def test_extract_ec_unexpected_object(caplog: pytest.LogCaptureFixture) -> None:
    """Test that unexpected object class or key type only logs a warning.

    :param caplog: Log capturing fixture.
    """
    key, _ = _point(EccCurve.P256)
    attrs = ec_attributes(key)
    attrs[Attribute.CLASS] = ObjectClass.PRIVATE_KEY
    attrs[Attribute.KEY_TYPE] = KeyType.RSA
    with caplog.at_level(logging.WARNING):
        result = extract_ec_public_key(
            FakeTokenSession(attrs), "public-handle", curve_by_name("P256")
        )
    assert result.x == key.public_numbers().x
    assert "Unexpected CLASS" in caplog.text
    assert "Unexpected KEY_TYPE" in caplog.text
