#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Configuration management utilities.

This module provides the configuration dictionary used by the p11keygen application.
Configuration is loaded from YAML or JSON files and merged with command line options.
"""

import logging
import os
from typing import Any, Optional

from typing_extensions import Self

from p11keygen.exceptions import P11KGError, P11KGTypeError
from p11keygen.utils.misc import load_configuration, load_secret, value_to_int

logger = logging.getLogger(__name__)


class Config(dict):
    """Configuration dictionary.

    Keys are normalized on insertion, so ``modulus-bits`` and ``modulus_bits`` address
    the same item. The object keeps the directory of the source file, which is used
    to resolve relative paths of secrets.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize configuration dictionary.

        :param args: Variable length argument list passed to the dictionary constructor.
        :param kwargs: Arbitrary keyword arguments passed to the dictionary constructor.
        """
        super().__init__()
        self.update(dict(*args, **kwargs))
        self.config_dir = os.getcwd()
        self.search_paths: list[str] = []

    @staticmethod
    def normalize_key(key: str) -> str:
        """Normalize the configuration key.

        :param key: Key in snake case or kebab case.
        :return: Key in snake case.
        """
        return key.strip().replace("-", "_").lower()

    @classmethod
    def create_from_file(cls, file_path: str) -> Self:
        """Create configuration object from file.

        :param file_path: Path to the configuration file to load.
        :return: Configuration object with loaded data and set search paths.
        """
        cfg_abs_path = os.path.abspath(file_path).replace("\\", "/")
        cfg = cls(load_configuration(cfg_abs_path))
        cfg.config_dir = os.path.dirname(cfg_abs_path)
        cfg.search_paths = [cfg.config_dir]
        logger.debug(f"Configuration loaded from {cfg_abs_path}")
        return cfg

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def __setitem__(self, key: str, value: Any) -> None:
        super().__setitem__(self.normalize_key(key), value)

    def __getitem__(self, key: str) -> Any:
        return super().__getitem__(self.normalize_key(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and super().__contains__(self.normalize_key(key))

    def get(self, key: str, default: Optional[Any] = None) -> Any:  # type: ignore[override]
        """Get configuration value.

        :param key: Key name in snake or kebab case.
        :param default: Default value in case that item doesn't exist, defaults to None.
        :return: Configuration value or default if key not found.
        """
        return super().get(self.normalize_key(key), default)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get the key value as string.

        Plain integers, such as an unquoted numeric PIN in YAML, are returned as
        their decimal text.

        :param key: Key name of the configuration entry.
        :param default: Default value if configuration doesn't contain the key.
        :raises P11KGTypeError: The value is present, but it is not a string.
        :return: Configuration value as string or None.
        """
        ret = self.get(key, default)
        if isinstance(ret, int) and not isinstance(ret, bool):
            return str(ret)
        if ret is not None and not isinstance(ret, str):
            raise P11KGTypeError(f"The value is not string at key: {key}")
        return ret

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """Get the key value as integer.

        :param key: Key name of the configuration entry.
        :param default: Default value if configuration doesn't contain the key.
        :raises P11KGTypeError: The value is present, but it is not an integer.
        :return: Integer loaded from configuration or None.
        """
        ret = self.get(key, default)
        if ret is None:
            return None
        try:
            return value_to_int(ret)
        except P11KGError as exc:
            raise P11KGTypeError(f"The value is not integer at key: {key}") from exc

    def load_secret(self, key: str) -> Optional[str]:
        """Load secret value from the configuration.

        The value may be the secret itself, a reference to an environment variable
        (``$VARIABLE``) or a path to a file holding the secret on its first line.

        :param key: Key name of the configuration entry.
        :return: Resolved secret or None if the key is missing.
        """
        value = self.get_str(key)
        if value is None:
            return None
        return load_secret(value, search_paths=self.search_paths)
