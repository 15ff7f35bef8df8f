#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import logging
import os
from typing import Any, Callable, Optional, TypeVar, Union

import click

from p11keygen import __version__ as p11keygen_version

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])
logger = logging.getLogger(__name__)


def p11keygen_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(p11keygen_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options


def p11keygen_config_option(required: bool = False) -> Callable:
    """Click decorator handling the configuration file.

    Provides: `config: str` a full path to the configuration file.

    :param required: Config option is required, defaults to False
    :return: Click decorator
    """
    return click.option(
        "-c",
        "--config",
        type=click.Path(exists=True, dir_okay=False, resolve_path=True),
        required=required,
        help="Path to YAML/JSON configuration file. Command line options take precedence.",
    )


def p11keygen_output_option(required: bool = True, help: Optional[str] = None) -> Callable:
    """Click decorator handling the output file.

    Provides: `output: str` a full path to the output file. The command is aborted
    when the file exists and --force isn't used. The force option is not passed
    to click command.

    :param required: Output option is required, defaults to True
    :param help: Customized help message, defaults to None
    :return: Click decorator
    """

    def callback(
        ctx: click.Context,
        param: click.Parameter,  # pylint: disable=unused-argument  # click's callback signature
        value: Optional[str],
    ) -> Optional[str]:
        if ctx.resilient_parsing:
            return value
        if value and os.path.exists(value) and not ctx.params.get("force"):
            click.echo(
                "Output file already exists. "
                "Please use --force is you want to overwrite existing files.",
                err=True,
            )
            ctx.abort()
        ctx.params.pop("force", None)
        return value

    def decorator(func: FC) -> FC:
        func = click.option(
            "--force",
            default=False,
            is_flag=True,
            help="Force overwriting of existing files.",
            is_eager=True,
        )(func)
        func = click.option(
            "-o",
            "--output",
            type=click.Path(resolve_path=True, dir_okay=False),
            required=required,
            help=help or "Path to a file, where to store the output.",
            callback=callback,
        )(func)
        return func

    return decorator
