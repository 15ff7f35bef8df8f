#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""PKCS#11 token related exceptions."""

from p11keygen.exceptions import P11KGError


class TokenInitError(P11KGError):
    """Loading of the module, slot selection, session opening or login failed."""


class TokenOperationError(TokenInitError):
    """The token refused to generate the key pair."""


class AttributeRetrievalError(P11KGError):
    """An expected attribute is missing in the token response or can't be read."""
