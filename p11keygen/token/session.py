#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""PKCS#11 token session driver.

The driver owns the session life cycle (module initialization, slot selection,
session opening and user login) and exposes the two token operations used by the
key generation flow: key pair generation and attribute retrieval. None of the
operations is retried, any failure aborts the flow.
"""

import abc
import logging
from types import TracebackType
from typing import Any, Iterable, Optional

import pkcs11
from pkcs11 import Attribute, KeyType, MechanismFlag
from pkcs11.exceptions import AttributeSensitive, AttributeTypeInvalid, PKCS11Error

from p11keygen.token.exceptions import (
    AttributeRetrievalError,
    TokenInitError,
    TokenOperationError,
)
from p11keygen.token.templates import KeyFamily, KeyTemplate

logger = logging.getLogger(__name__)


class TokenSession(abc.ABC):
    """Abstract token session.

    The session is a context manager; it is opened on enter and always released on exit.
    Handles returned by :meth:`generate_key_pair` are opaque and valid only while the
    session is open.
    """

    def __enter__(self) -> "TokenSession":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @abc.abstractmethod
    def open(self) -> None:
        """Initialize the module, open the session and log in.

        :raises TokenInitError: Any step of the session setup failed.
        """

    @abc.abstractmethod
    def close(self) -> None:
        """Release the session."""

    @abc.abstractmethod
    def generate_key_pair(self, template: KeyTemplate) -> tuple[Any, Any]:
        """Generate key pair on the token.

        :param template: Key pair generation template.
        :raises TokenOperationError: The token failed to generate the key pair.
        :return: Tuple of public and private key handles.
        """

    @abc.abstractmethod
    def get_attribute_value(
        self, handle: Any, attributes: Iterable[Attribute]
    ) -> dict[Attribute, Any]:
        """Read attributes of the token object.

        Attributes the object doesn't have are omitted from the result.

        :param handle: Handle of the token object.
        :param attributes: Requested attributes.
        :raises AttributeRetrievalError: The attributes can't be read.
        :return: Dictionary of the retrieved attribute values.
        """


class Pkcs11TokenSession(TokenSession):
    """Token session backed by a PKCS#11 module through python-pkcs11."""

    def __init__(self, module: str, slot: int, pin: str) -> None:
        """Constructor of PKCS#11 token session.

        :param module: Path to the PKCS#11 module (shared library).
        :param slot: Numeric identifier of the slot holding the token.
        :param pin: User PIN of the token.
        """
        self.module = module
        self.slot = slot
        self.pin = pin
        self._session: Optional[pkcs11.Session] = None

    def __repr__(self) -> str:
        return f"PKCS#11 session, module: {self.module}, slot: {self.slot}"

    def open(self) -> None:
        logger.info(f"Loading PKCS#11 module {self.module}")
        try:
            lib = pkcs11.lib(self.module)
        except (PKCS11Error, RuntimeError, OSError) as exc:
            raise TokenInitError(f"Failed to load module {self.module}: {str(exc)}") from exc

        try:
            slots = lib.get_slots()
            slot = next((s for s in slots if s.slot_id == self.slot), None)
            if slot is None:
                raise TokenInitError(
                    f"Slot {self.slot} not found, available slots: "
                    f"{', '.join(str(s.slot_id) for s in slots) or 'none'}"
                )
            token = slot.get_token()
            logger.info(f"Opening read-write session with token '{token.label}'")
            self._session = token.open(rw=True, user_pin=self.pin)
        except PKCS11Error as exc:
            raise TokenInitError(f"Failed to open session on slot {self.slot}: {exc!r}") from exc

    def close(self) -> None:
        if self._session is None:
            return
        logger.debug("Closing PKCS#11 session")
        try:
            self._session.close()
        finally:
            self._session = None

    @property
    def session(self) -> pkcs11.Session:
        """Opened python-pkcs11 session.

        :raises TokenInitError: The session is not opened.
        :return: Session object.
        """
        if self._session is None:
            raise TokenInitError("PKCS#11 session is not opened")
        return self._session

    def generate_key_pair(self, template: KeyTemplate) -> tuple[Any, Any]:
        # only the capabilities requested by the template are granted to the keys
        kwargs: dict[str, Any] = {
            "mechanism": template.mechanism,
            "store": True,
            "capabilities": MechanismFlag(0),
            "public_template": template.public_attributes,
            "private_template": template.private_attributes,
        }
        logger.info(f"Generating {template.key_family.value} key pair")
        try:
            if template.key_family == KeyFamily.RSA:
                return self.session.generate_keypair(
                    KeyType.RSA, template.public_attributes[Attribute.MODULUS_BITS], **kwargs
                )
            parameters = self.session.create_domain_parameters(
                KeyType.EC,
                {Attribute.EC_PARAMS: template.public_attributes[Attribute.EC_PARAMS]},
                local=True,
            )
            return parameters.generate_keypair(**kwargs)
        except PKCS11Error as exc:
            raise TokenOperationError(f"Key pair generation failed: {exc!r}") from exc

    def get_attribute_value(
        self, handle: Any, attributes: Iterable[Attribute]
    ) -> dict[Attribute, Any]:
        values: dict[Attribute, Any] = {}
        for attribute in attributes:
            try:
                values[attribute] = handle[attribute]
            except (AttributeTypeInvalid, AttributeSensitive):
                logger.debug(f"Attribute {attribute.name} is not available")
            except PKCS11Error as exc:
                raise AttributeRetrievalError(
                    f"Cannot read attribute {attribute.name}: {exc!r}"
                ) from exc
        return values
