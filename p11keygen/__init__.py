#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""p11keygen - asymmetric key generation inside PKCS#11 tokens.

The package generates an RSA or elliptic-curve key pair inside a cryptographic token
reachable through a PKCS#11 module and exports the public half as a DER encoded
SubjectPublicKeyInfo wrapped in a PEM block. The private key never leaves the token.

Behavior of the package can be tuned by the following environment variables:
    - P11KEYGEN_DEBUG_LOGGING_DISABLED: disables the rotating debug log file
    - P11KEYGEN_DEBUG_LOG_FILE: location of the debug log file
"""

import os
from typing import Optional, Union

from platformdirs import PlatformDirs

from .__version__ import __version__


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


__author__ = "NXP"
__license__ = "BSD-3-Clause"

P11KEYGEN_PLATFORM_DIRS = PlatformDirs(appauthor="nxp", appname="p11keygen", version=__version__)

P11KEYGEN_DEBUG_LOGGING_DISABLED = value_to_bool(
    os.environ.get("P11KEYGEN_DEBUG_LOGGING_DISABLED")
)
P11KEYGEN_DEBUG_LOG_FILE = os.environ.get(
    "P11KEYGEN_DEBUG_LOG_FILE",
    os.path.join(P11KEYGEN_PLATFORM_DIRS.user_log_dir, "debug.log"),
)
