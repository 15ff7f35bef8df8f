#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""p11keygen exception classes.

This module defines the base of the exception hierarchy used throughout the package.
Every failure of the key generation flow is fatal, so the exceptions carry only
a human readable description that is reported by the command line tool.
"""

from typing import Optional

#######################################################################
# # p11keygen Exceptions
#######################################################################


class P11KGError(Exception):
    """p11keygen Base Exception.

    All package specific exceptions inherit from this class, providing consistent
    error formatting across the whole package.

    :cvar fmt: Default error message format template.
    """

    fmt = "P11KG: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class P11KGKeyError(P11KGError, KeyError):
    """Lookup of a missing or unknown key in a table or a dictionary."""


class P11KGValueError(P11KGError, ValueError):
    """Invalid value provided to a p11keygen operation."""


class P11KGTypeError(P11KGError, TypeError):
    """Unexpected type provided to a p11keygen operation."""


class P11KGFileNotFoundError(FileNotFoundError, P11KGError):
    """A required file can't be found."""


class ConfigurationError(P11KGValueError):
    """Missing or invalid configuration parameter.

    Raised before any interaction with the token takes place.
    """
