#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Key pair generation flow.

The flow is a single synchronous pass: the configuration is validated and the
generation template is built before the token is touched, then one session is
opened, one key pair is generated and the public key attributes are read back.
Every failure aborts the flow; the session is released on all paths.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from p11keygen.crypto.curves import get_supported_curves
from p11keygen.crypto.keys import PublicKey
from p11keygen.exceptions import ConfigurationError
from p11keygen.token.extractor import extract_public_key
from p11keygen.token.session import Pkcs11TokenSession, TokenSession
from p11keygen.token.templates import KeyFamily, KeyTemplate, ec_template, rsa_template
from p11keygen.utils.config import Config

logger = logging.getLogger(__name__)

SessionFactory = Callable[["KeyGenConfig"], TokenSession]


@dataclass
class KeyGenConfig:
    """Configuration of one key pair generation.

    :param module: Path to the PKCS#11 module.
    :param key_type: Key family, ``RSA`` or ``ECDSA``.
    :param slot: Slot holding the token.
    :param pin: User PIN.
    :param label: Label of the generated key objects.
    :param modulus_bits: Length of RSA modulus in bits, RSA only.
    :param curve: Curve name, ECDSA only.
    """

    module: Optional[str] = None
    key_type: Optional[str] = None
    slot: Optional[int] = 0
    pin: Optional[str] = None
    label: Optional[str] = None
    modulus_bits: Optional[int] = None
    curve: Optional[str] = None

    @classmethod
    def load(cls, config: Config) -> "KeyGenConfig":
        """Create the configuration from the configuration dictionary.

        :param config: Merged configuration of file and command line options.
        :raises ConfigurationError: A value has invalid type.
        :return: Key generation configuration.
        """
        try:
            return cls(
                module=config.get_str("module"),
                key_type=config.get_str("type"),
                slot=config.get_int("slot", 0),
                pin=config.load_secret("pin"),
                label=config.get_str("label"),
                modulus_bits=config.get_int("modulus_bits"),
                curve=config.get_str("curve"),
            )
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    @property
    def key_family(self) -> KeyFamily:
        """Key family of the configuration.

        :raises ConfigurationError: The key type is missing or invalid.
        :return: Key family.
        """
        if not self.key_type:
            raise ConfigurationError("--type is required")
        try:
            return KeyFamily(self.key_type)
        except ValueError as exc:
            raise ConfigurationError("--type may only be RSA or ECDSA") from exc

    def validate(self) -> None:
        """Validate the configuration.

        :raises ConfigurationError: A required parameter is missing or invalid.
        """
        if not self.module:
            raise ConfigurationError("--module is required")
        family = self.key_family
        if self.slot is None or self.slot < 0:
            raise ConfigurationError(f"Invalid slot: {self.slot}")
        if not self.pin:
            raise ConfigurationError("--pin is required")
        if not self.label:
            raise ConfigurationError("--label is required")
        if family == KeyFamily.RSA and not self.modulus_bits:
            raise ConfigurationError("--modulus-bits is required")
        if family == KeyFamily.EC and not self.curve:
            raise ConfigurationError(
                f"--curve is required, use one of: {', '.join(get_supported_curves())}"
            )

    def build_template(self) -> KeyTemplate:
        """Validate the configuration and build the generation template.

        :raises ConfigurationError: A parameter is missing or invalid.
        :raises UnsupportedCurve: The curve is not supported.
        :return: Key pair generation template.
        """
        self.validate()
        assert self.label
        if self.key_family == KeyFamily.RSA:
            assert self.modulus_bits is not None
            return rsa_template(self.label, self.modulus_bits)
        assert self.curve
        return ec_template(self.label, self.curve)

    def __repr__(self) -> str:
        return (
            f"KeyGenConfig(module={self.module!r}, type={self.key_type!r}, slot={self.slot}, "
            f"label={self.label!r}, modulus_bits={self.modulus_bits}, curve={self.curve!r})"
        )


def pkcs11_session_factory(config: KeyGenConfig) -> TokenSession:
    """Create PKCS#11 session for the configuration.

    :param config: Validated key generation configuration.
    :return: Unopened token session.
    """
    assert config.module and config.pin and config.slot is not None
    return Pkcs11TokenSession(module=config.module, slot=config.slot, pin=config.pin)


def generate_public_key(
    config: KeyGenConfig, session_factory: SessionFactory = pkcs11_session_factory
) -> PublicKey:
    """Generate key pair on the token and return its public key.

    :param config: Key generation configuration.
    :param session_factory: Factory of the token session, defaults to PKCS#11 session.
    :raises P11KGError: Any step of the generation failed.
    :return: Canonical public key of the generated key pair.
    """
    template = config.build_template()
    logger.debug(f"Generating key pair with {config!r}")
    with session_factory(config) as session:
        public_handle, _ = session.generate_key_pair(template)
        public_key = extract_public_key(
            session, public_handle, template.key_family, template.curve
        )
    logger.info(f"Generated {public_key!r} labeled '{config.label}'")
    return public_key
