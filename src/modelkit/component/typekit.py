# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typekits: named subsets of a type registry."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from modelkit.component.exceptions import ModelError
from modelkit.types import Type, TypeCategory, TypeNotFound, TypeRegistry

if TYPE_CHECKING:
    from modelkit.component.loaders.base import Base

# ###############
# Public Interface
# ###############


class Typekit:
    """A set of types, split between those defined here and those exported.

    Attributes:
        loader: The loader this typekit is registered on.
        name: The typekit name.
        registry: All the types this typekit knows about, including those it
            imports from other typekits.
        typelist: Names of the types this typekit defines.
        interface_typelist: Names of the defined types that can be used on
            node interfaces. Always a subset of ``typelist``.
    """

    def __init__(
        self,
        loader: Base | None,
        name: str,
        registry: TypeRegistry | None = None,
        typelist: Iterable[Type | str] = (),
        interface_typelist: Iterable[Type | str] = (),
    ) -> None:
        self.loader = loader
        self.name = name
        self.registry = registry if registry is not None else TypeRegistry()
        self.typelist: set[str] = {_type_name(t) for t in typelist}
        self.interface_typelist: set[str] = {_type_name(t) for t in interface_typelist}
        exported_only = self.interface_typelist - self.typelist
        if exported_only:
            raise ModelError(
                f"typekit {name}: interface types {', '.join(sorted(exported_only))} are not part of its typelist"
            )

    def __repr__(self) -> str:
        return f"<Typekit {self.name}>"

    def self_types(self) -> list[Type]:
        """Return the type objects this typekit defines."""
        return [self.registry.get(name) for name in sorted(self.typelist)]

    def register_type(self, type: Type | str) -> None:
        """Declare that *type* is defined by this typekit."""
        self.typelist.add(_type_name(type))

    def register_interface_type(self, type: Type | str) -> None:
        """Declare that *type* is defined by this typekit and usable on interfaces."""
        self.register_type(type)
        self.interface_typelist.add(_type_name(type))

    def create(self, category: TypeCategory, *args: Any, **kwargs: Any) -> Type:
        """Create a type in the registry and add it to the typelist."""
        type = self.registry.factory(category)(*args, **kwargs)
        self.register_type(type)
        return type

    def create_interface(self, category: TypeCategory, *args: Any, **kwargs: Any) -> Type:
        """Create a type in the registry and export it for interface use."""
        type = self.registry.factory(category)(*args, **kwargs)
        self.register_interface_type(type)
        return type

    def resolve_type(self, type: Type | str) -> Type:
        """Return the type object matching *type* in this typekit's registry.

        Raises:
            TypeNotFound: If the registry does not know the type.
        """
        return self.registry.get(_type_name(type))

    def include(self, type: Type | str) -> bool:
        """Return True if this typekit defines *type*."""
        try:
            return self.resolve_type(type).name in self.typelist
        except TypeNotFound:
            return False

    def interface_type(self, type: Type | str) -> bool:
        """Return True if this typekit defines *type* and exports it."""
        try:
            return self.resolve_type(type).name in self.interface_typelist
        except TypeNotFound:
            return False

    def defines_array_of(self, type: Type | str) -> bool:
        """Return True if this typekit defines at least one array of *type*."""
        try:
            element = self.resolve_type(type).name
        except TypeNotFound:
            return False
        for name in self.typelist:
            defined = self.registry.get(name)
            if defined.category is TypeCategory.ARRAY and defined.element == element:
                return True
        return False


# ################
# Implementation
# ################


def _type_name(type: Type | str) -> str:
    return type if isinstance(type, str) else type.name
