#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""PKCS#11 token interaction.

Templates submitted to the token for key pair generation, the session driver and
the reconstruction of the generated public key from the token attributes.
"""
