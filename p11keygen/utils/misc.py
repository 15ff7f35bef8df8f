#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Miscellaneous utilities and helper functions.

This module provides file loading and writing helpers, configuration file parsing
and secret resolution used by the p11keygen application.
"""

import json
import logging
import os
from enum import Enum
from typing import Optional, Union

import yaml

from p11keygen.exceptions import P11KGError, P11KGFileNotFoundError, P11KGValueError

logger = logging.getLogger(__name__)


class Endianness(str, Enum):
    """Endianness enumeration for byte order specification.

    :cvar BIG: Big-endian byte order representation.
    """

    BIG = "big"


def get_abs_path(file_path: str, base_dir: Optional[str] = None) -> str:
    """Convert relative or absolute file path to normalized absolute path.

    :param file_path: File path to be converted.
    :param base_dir: Base directory for relative paths, defaults to current working directory.
    :return: Absolute path with forward slashes.
    """
    if os.path.isabs(file_path):
        return file_path.replace("\\", "/")
    return os.path.abspath(os.path.join(base_dir or os.getcwd(), file_path)).replace("\\", "/")


def find_file(
    file_path: str,
    use_cwd: bool = True,
    search_paths: Optional[list[str]] = None,
) -> str:
    """Find file in filesystem.

    The method checks the provided path directly when absolute, otherwise the search paths
    are tried first and the current working directory last.

    :param file_path: File name, part of file path or full path to search for.
    :param use_cwd: Try current working directory to find the file, defaults to True.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :raises P11KGFileNotFoundError: File not found in any of the search locations.
    :return: Full absolute path to the found file.
    """
    path = file_path.replace("\\", "/")
    if os.path.isabs(path):
        if not os.path.isfile(path):
            raise P11KGFileNotFoundError(f"File '{path}' not found")
        return path
    for dir_candidate in filter(None, search_paths or []):
        path_candidate = get_abs_path(path, base_dir=dir_candidate)
        if os.path.isfile(path_candidate):
            return path_candidate
    if use_cwd and os.path.isfile(path):
        return get_abs_path(path)
    searched_in = [os.path.abspath(os.curdir)] if use_cwd else []
    searched_in.extend(filter(None, search_paths or []))
    searched_in = [s.replace("\\", "/") for s in searched_in]
    raise P11KGFileNotFoundError(f"File '{path}' not found, Searched in: {', '.join(searched_in)}")


def load_text(path: str, search_paths: Optional[list[str]] = None) -> str:
    """Load text file content into string.

    :param path: Path to the text file to load.
    :param search_paths: List of directories to search for the file, defaults to None.
    :return: Content of the text file as string.
    """
    path = find_file(path, search_paths=search_paths)
    logger.debug(f"Loading text file from {path}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def write_file(
    data: Union[str, bytes], path: str, mode: str = "w", encoding: str = "utf-8"
) -> int:
    """Write data to a file, parent directories are created automatically.

    :param data: Data to write to the file.
    :param path: Path to the target file.
    :param mode: File writing mode ('w' for text, 'wb' for binary), defaults to 'w'.
    :param encoding: Text encoding, defaults to 'utf-8'.
    :return: Number of characters or bytes written to the file.
    """
    path = path.replace("\\", "/")
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)

    logger.debug(f"Storing {'binary' if 'b' in mode else 'text'} file at {path}")
    with open(path, mode, encoding=None if "b" in mode else encoding) as f:
        return f.write(data)


def value_to_int(value: Union[bytes, bytearray, int, str], default: Optional[int] = None) -> int:
    """Convert various value types to integer.

    Strings are parsed with automatic base detection (0x, 0b, 0o prefixes), bytes are
    interpreted as big endian unsigned number.

    :param value: Input value to convert.
    :param default: Default value returned when conversion fails, defaults to None.
    :raises P11KGValueError: Unsupported input type or format and no default provided.
    :return: Converted integer value.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value

    if isinstance(value, (bytes, bytearray)):
        return int.from_bytes(value, Endianness.BIG.value)

    if isinstance(value, str) and value != "":
        match = value.strip().lower().replace("_", "")
        try:
            return int(match, 0)
        except ValueError:
            pass

    if default is not None:
        return default
    raise P11KGValueError(f"Invalid input number type({type(value)}) with value ({value})")


def load_configuration(path: str, search_paths: Optional[list[str]] = None) -> dict:
    """Load configuration from YAML or JSON file.

    The content is parsed as JSON first, YAML parsing is used as a fallback.

    :param path: Path to configuration file (relative or absolute).
    :param search_paths: List of paths where to search for the file, defaults to None.
    :raises P11KGError: When file cannot be loaded, parsed, or contains invalid format.
    :return: Content of configuration as dictionary.
    """
    try:
        config = load_text(path, search_paths=search_paths)
    except (OSError, P11KGError) as exc:
        raise P11KGError(f"Can't load configuration file: {str(exc)}") from exc

    config_data = None
    try:
        config_data = json.loads(config)
    except json.JSONDecodeError:
        try:
            config_data = yaml.safe_load(config)
        except yaml.YAMLError:
            pass

    if not config_data:
        raise P11KGError(f"Can't parse configuration file: {path}")
    if not isinstance(config_data, dict):
        raise P11KGError(f"Invalid configuration file: {path}")

    return config_data


def load_secret(value: str, search_paths: Optional[list[str]] = None) -> str:
    """Load secret text from the configuration value.

    The method supports multiple input formats:
    1. If the value is an existing path, first line of file is read and returned
    2. If the value has format '$ENV_VAR', the value of environment variable ENV_VAR is returned
    3. If the value has format '$ENV_VAR' and the value contains a valid path to a file,
    the first line of a file is returned
    4. If the value does not match any options above, the input value itself is returned

    :param value: Input string to be used for loading the secret.
    :param search_paths: List of paths where to search for the file, defaults to None.
    :return: The actual secret value.
    """
    value = os.path.expanduser(os.path.expandvars(value))
    try:
        file = find_file(file_path=value, search_paths=search_paths)
        with open(file, encoding="utf-8") as f:
            value = f.readline().strip()
    except P11KGFileNotFoundError:
        pass
    return value
