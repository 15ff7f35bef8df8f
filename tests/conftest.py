#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""pytest configuration and shared test fixtures.

This module provides the CLI runner fixture and an in-memory token session,
which records every call made to the token.
"""

import os
from typing import Any, Iterable, Optional

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from tests.cli_runner import CliRunner

os.environ["P11KEYGEN_DEBUG_LOGGING_DISABLED"] = "True"

# pylint: disable=wrong-import-position
from pkcs11 import Attribute, KeyType, ObjectClass  # noqa: E402

from p11keygen.token.exceptions import TokenOperationError  # noqa: E402
from p11keygen.token.session import TokenSession  # noqa: E402
from p11keygen.token.templates import KeyTemplate  # noqa: E402


class FakeTokenSession(TokenSession):
    """Token session keeping the public key attributes in memory.

    :param public_attributes: Attributes reported for the generated public key.
    :param fail_generation: Refuse the key pair generation.
    """

    def __init__(
        self, public_attributes: Optional[dict] = None, fail_generation: bool = False
    ) -> None:
        self.public_attributes = public_attributes or {}
        self.fail_generation = fail_generation
        self.calls: list[str] = []
        self.templates: list[KeyTemplate] = []
        self.requested: list[list[Attribute]] = []

    def open(self) -> None:
        self.calls.append("open")

    def close(self) -> None:
        self.calls.append("close")

    def generate_key_pair(self, template: KeyTemplate) -> tuple[Any, Any]:
        self.calls.append("generate_key_pair")
        self.templates.append(template)
        if self.fail_generation:
            raise TokenOperationError("Key pair generation failed: CKR_DEVICE_ERROR")
        return "public-handle", "private-handle"

    def get_attribute_value(self, handle: Any, attributes: Iterable[Attribute]) -> dict:
        attributes = list(attributes)
        self.calls.append("get_attribute_value")
        self.requested.append(attributes)
        assert handle == "public-handle"
        return {a: v for a, v in self.public_attributes.items() if a in attributes}


def rsa_attributes(key: rsa.RSAPublicKey) -> dict:
    """Token attributes of the RSA public key."""
    numbers = key.public_numbers()
    return {
        Attribute.MODULUS: numbers.n.to_bytes(key.key_size // 8, "big"),
        Attribute.PUBLIC_EXPONENT: numbers.e.to_bytes(3, "big"),
    }


def ec_attributes(key: ec.EllipticCurvePublicKey, point: Optional[bytes] = None) -> dict:
    """Token attributes of the EC public key."""
    numbers = key.public_numbers()
    size = (key.curve.key_size + 7) // 8
    if point is None:
        point = b"\x04" + numbers.x.to_bytes(size, "big") + numbers.y.to_bytes(size, "big")
    return {
        Attribute.CLASS: ObjectClass.PUBLIC_KEY,
        Attribute.KEY_TYPE: KeyType.EC,
        Attribute.EC_POINT: point,
    }


@pytest.fixture(scope="session")
def rsa_public_key() -> rsa.RSAPublicKey:
    """RSA2048 public key used as the key generated by the token."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048).public_key()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Get CLI runner instance for testing.

    :return: CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def fake_session() -> FakeTokenSession:
    """Get empty in-memory token session."""
    return FakeTokenSession()
