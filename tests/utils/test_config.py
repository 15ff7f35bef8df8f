#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Configuration dictionary testing module."""

import os

import pytest

from p11keygen.exceptions import P11KGTypeError
from p11keygen.utils.config import Config
from p11keygen.utils.misc import write_file


def test_key_normalization() -> None:
    cfg = Config({"Modulus-Bits": 2048})
    assert cfg["modulus_bits"] == 2048
    assert cfg["modulus-bits"] == 2048
    assert "MODULUS_BITS" in cfg
    assert 2048 not in cfg

    cfg.update({"modulus_bits": 4096, "curve": "P256"})
    assert cfg.get("modulus-bits") == 4096
    assert list(cfg.keys()) == ["modulus_bits", "curve"]


def test_typed_getters() -> None:
    cfg = Config({"slot": "0x2", "label": "key", "pin": 1234, "module": True, "curve": [256]})
    assert cfg.get_int("slot") == 2
    assert cfg.get_int("modulus_bits") is None
    assert cfg.get_int("modulus_bits", 1024) == 1024
    assert cfg.get_str("label") == "key"
    assert cfg.get_str("pin") == "1234"
    assert cfg.get_str("type", "RSA") == "RSA"
    with pytest.raises(P11KGTypeError):
        cfg.get_str("module")
    with pytest.raises(P11KGTypeError):
        cfg.get_str("curve")
    with pytest.raises(P11KGTypeError):
        cfg.get_int("label")


def test_create_from_file(tmp_path: str) -> None:
    """Test that secrets are resolved relative to the configuration file.

    :param tmp_path: Temporary directory.
    """
    write_file("654321\n", os.path.join(tmp_path, "secrets", "pin"))
    path = os.path.join(tmp_path, "config.yaml")
    write_file("pin: secrets/pin\nlabel: key\n", path)

    cfg = Config.create_from_file(path)
    assert cfg.config_dir == str(tmp_path).replace("\\", "/")
    assert cfg.load_secret("pin") == "654321"
    assert cfg.load_secret("label") == "key"
    assert cfg.load_secret("missing") is None
