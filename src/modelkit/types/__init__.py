# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type definitions and registries shared by typekits and loaders."""

from modelkit.types.registry import (
    DuplicateType,
    Type,
    TypeCategory,
    TypeField,
    TypeNotFound,
    TypeRegistry,
    TypeRegistryError,
)

__all__ = [
    "DuplicateType",
    "Type",
    "TypeCategory",
    "TypeField",
    "TypeNotFound",
    "TypeRegistry",
    "TypeRegistryError",
]
