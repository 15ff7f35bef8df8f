#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""p11keygen cryptographic exceptions module."""

from p11keygen.exceptions import ConfigurationError, P11KGError, P11KGKeyError, P11KGValueError


class UnsupportedCurve(ConfigurationError):
    """The requested curve name is not one of the supported curves."""


class UnknownCurve(P11KGKeyError):
    """The curve parameters have no registered object identifier."""


class InvalidECPoint(P11KGValueError):
    """The EC point attribute can't be decoded into a point on the curve.

    Neither the direct uncompressed point encoding nor the DER OCTET STRING
    wrapped encoding yields a valid point.
    """


class EncodingError(P11KGError):
    """The public key can't be marshaled into the standard container."""
