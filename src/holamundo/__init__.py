# Copyright 2023 Canonical Ltd.
# See LICENSE file for licensing details.

"""Hola Mundo greeting service."""
