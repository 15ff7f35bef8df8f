#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Generate key pair inside a PKCS#11 token and print its public key."""

import logging
import sys
from typing import Optional

import click

from p11keygen.apps.utils import p11keygen_logger
from p11keygen.apps.utils.common_cli_options import (
    p11keygen_apps_common_options,
    p11keygen_config_option,
    p11keygen_output_option,
)
from p11keygen.apps.utils.utils import INT, catch_p11kg_error
from p11keygen.crypto.curves import get_supported_curves
from p11keygen.crypto.keys import KeyEncoding
from p11keygen.keygen import KeyGenConfig, generate_public_key
from p11keygen.token.templates import KeyFamily
from p11keygen.utils.config import Config
from p11keygen.utils.misc import write_file

logger = logging.getLogger(__name__)


@click.command(name="p11keygen", no_args_is_help=True)
@p11keygen_apps_common_options
@p11keygen_config_option()
@click.option("--module", metavar="PATH", help="PKCS#11 module to use.")
@click.option(
    "--type",
    "key_type",
    type=click.Choice([family.value for family in KeyFamily]),
    help="Type of key to generate.",
)
@click.option("--slot", type=INT(), help="Slot to generate key in. Default is 0.")
@click.option(
    "--pin",
    help="PIN for slot. Use '$ENV_VAR' to read it from environment variable "
    "or a path to file holding the PIN on its first line.",
)
@click.option("--label", help="Key label.")
@click.option(
    "--modulus-bits",
    type=INT(),
    help="Size of RSA modulus in bits. Only valid if --type=RSA.",
)
@click.option(
    "--curve",
    metavar="CURVE",
    help=f"Type of ECDSA curve to use ({', '.join(get_supported_curves())}). "
    "Only valid if --type=ECDSA.",
)
@p11keygen_output_option(
    required=False, help="Path to a file, where to store the PEM public key. Default is stdout."
)
def main(
    log_level: int,
    config: Optional[str],
    module: Optional[str],
    key_type: Optional[str],
    slot: Optional[int],
    pin: Optional[str],
    label: Optional[str],
    modulus_bits: Optional[int],
    curve: Optional[str],
    output: Optional[str],
) -> None:
    """PKCS#11 Key Generator Tool.

    Generates RSA or ECDSA key pair inside the token and prints the public key
    as PEM encoded SubjectPublicKeyInfo. The private key never leaves the token.
    """
    p11keygen_logger.install(level=log_level)

    cfg = Config.create_from_file(config) if config else Config()
    options = {
        "module": module,
        "type": key_type,
        "slot": slot,
        "pin": pin,
        "label": label,
        "modulus_bits": modulus_bits,
        "curve": curve,
    }
    cfg.update({key: value for key, value in options.items() if value is not None})

    public_key = generate_public_key(KeyGenConfig.load(cfg))
    pem = public_key.export(KeyEncoding.PEM)
    if output:
        write_file(pem, output, mode="wb")
        click.echo(f"The public key has been stored: {output}", err=True)
    else:
        click.echo(pem.decode("ascii"), nl=False)


@catch_p11kg_error
def safe_main() -> None:
    """Call the main function."""
    sys.exit(main())  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    safe_main()
