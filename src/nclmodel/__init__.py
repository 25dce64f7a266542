# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""An authoring object model for Nested Context Language documents."""

from importlib import metadata

try:
    __version__ = metadata.version("nclmodel")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+unknown"
del metadata

from .loader import loads as loads
from .resolver import resolve as resolve
from .validation import validate as validate
