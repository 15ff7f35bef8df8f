#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Application utilities and helper functions.

This module provides error handling and parameter types shared by the command line
applications.
"""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from p11keygen import P11KEYGEN_DEBUG_LOG_FILE, P11KEYGEN_DEBUG_LOGGING_DISABLED
from p11keygen.exceptions import P11KGError

logger = logging.getLogger(__name__)


class INT(click.ParamType):
    """Click parameter type for integers in any base (0x, 0b, 0o prefixes).

    :cvar name: Parameter type name used by Click framework.
    """

    name = "integer"

    # pylint: disable=inconsistent-return-statements
    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter] = None,
        ctx: Optional[click.Context] = None,
    ) -> int:
        """Perform the conversion str -> int.

        :param value: value to convert
        :param param: Click parameter, defaults to None
        :param ctx: Click context, defaults to None
        :return: value as integer
        """
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except TypeError:
            self.fail(
                "expected string for int() conversion, got "
                f"{value!r} of type {type(value).__name__}",
                param,
                ctx,
            )
        except ValueError:
            self.fail(f"{value!r} is not a valid integer", param, ctx)


def catch_p11kg_error(function: Callable) -> Callable:
    """Catch and handle exceptions of the decorated function.

    Package errors and assertion errors print the error class and message and exit with 2.
    Any other exception exits with 3.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except (AssertionError, P11KGError) as p11kg_exc:
            click.echo(f"{p11kg_exc.__class__.__name__}: {p11kg_exc}", err=True)
            logger.debug(str(p11kg_exc), exc_info=True)
            if not P11KEYGEN_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {P11KEYGEN_DEBUG_LOG_FILE} for more info",
                    fg="yellow",
                    err=True,
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            sys.exit(3)

    return wrapper
