#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Cryptographic building blocks of p11keygen.

This package contains the elliptic curve registry and the canonical public key
representation together with its standard DER/PEM encoding.
"""
