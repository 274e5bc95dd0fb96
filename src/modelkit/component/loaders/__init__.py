# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loaders: name-based resolution of projects, typekits and models."""

from modelkit.component.loaders.aggregate import Aggregate
from modelkit.component.loaders.base import Base
from modelkit.component.loaders.files import PROJECT_SUFFIX, TYPEKIT_SUFFIX, FilesLoader

__all__ = [
    "Aggregate",
    "Base",
    "FilesLoader",
    "PROJECT_SUFFIX",
    "TYPEKIT_SUFFIX",
]
