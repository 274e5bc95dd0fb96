# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type definitions and the registry that holds them.

The registry is the type-level collaborator of the component model: loaders
merge the registries of all loaded typekits into one, and interface objects
resolve their types through it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class TypeRegistryError(Exception):
    """Base class for all errors raised by the type registry."""


class TypeNotFound(TypeRegistryError, LookupError):
    """Raised when a type name cannot be resolved in a registry."""


class DuplicateType(TypeRegistryError, ValueError):
    """Raised when a type name is defined twice with different definitions."""


class TypeCategory(Enum):
    """The closed set of type categories a registry can create."""

    NULL = "null"
    NUMERIC = "numeric"
    ENUM = "enum"
    COMPOUND = "compound"
    ARRAY = "array"
    CONTAINER = "container"
    OPAQUE = "opaque"


class TypeField(BaseModel):
    """A named field of a compound type."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    type: str


class Type(BaseModel):
    """An immutable type definition.

    Types reference other types by name (``element`` for arrays and
    containers, ``fields`` for compounds) so that two registries holding the
    same definition produce equal objects.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    category: TypeCategory
    size: int = 0
    integer: bool = False
    unsigned: bool = False
    element: str | None = None
    length: int | None = None
    container_kind: str | None = None
    fields: tuple[TypeField, ...] = ()
    values: tuple[tuple[str, int], ...] = _Field(default_factory=tuple)

    @property
    def null(self) -> bool:
        """True for types that carry no data."""
        return self.category is TypeCategory.NULL

    def dependencies(self) -> list[str]:
        """Names of the types this type is built from."""
        names = [f.type for f in self.fields]
        if self.element is not None:
            names.append(self.element)
        return names

    def __str__(self) -> str:
        return self.name


class TypeRegistry:
    """A name-indexed set of type definitions, with aliases."""

    def __init__(self) -> None:
        self._types: dict[str, Type] = {}
        self._aliases: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.include(name)

    def __repr__(self) -> str:
        return f"<TypeRegistry {len(self._types)} types, {len(self._aliases)} aliases>"

    def include(self, name: str) -> bool:
        """Return True if *name* is a type or an alias known to this registry."""
        return name in self._types or name in self._aliases

    def get(self, name: str) -> Type:
        """Return the type called *name*, following aliases.

        Raises:
            TypeNotFound: If neither a type nor an alias has this name.
        """
        target = self._aliases.get(name, name)
        try:
            return self._types[target]
        except KeyError:
            raise TypeNotFound(f"no type named '{name}' in registry") from None

    def each(self, *, with_aliases: bool = False) -> Iterator[tuple[str, Type]]:
        """Enumerate ``(name, type)`` pairs, optionally including aliases."""
        yield from list(self._types.items())
        if with_aliases:
            for alias, target in list(self._aliases.items()):
                yield alias, self._types[target]

    def aliases(self) -> dict[str, str]:
        """Return a copy of the alias → type name mapping."""
        return dict(self._aliases)

    def merge(self, other: TypeRegistry) -> None:
        """Add every type and alias of *other* to this registry.

        Identical redefinitions are accepted. The merge is all or nothing: on
        a conflict this registry is left unchanged.

        Raises:
            DuplicateType: If *other* defines a name differently.
        """
        staged = TypeRegistry()
        staged._types = dict(self._types)
        staged._aliases = dict(self._aliases)
        for _, type_def in other.each():
            staged._add(type_def, allow_identical=True)
        for alias, target in other.aliases().items():
            staged._add_alias(alias, target, allow_identical=True)
        self._types = staged._types
        self._aliases = staged._aliases

    def minimal(self, name: str) -> TypeRegistry:
        """Return a registry with *name* and all the types it depends on."""
        result = TypeRegistry()
        pending = [self.get(name).name]
        while pending:
            type_def = self.get(pending.pop())
            if type_def.name in result._types:
                continue
            result._types[type_def.name] = type_def
            pending.extend(type_def.dependencies())
        for alias, target in self._aliases.items():
            if target in result._types:
                result._aliases[alias] = target
        return result

    def factory(self, category: TypeCategory) -> Callable[..., Type]:
        """Return the factory method creating types of *category*."""
        return getattr(self, _FACTORY_METHODS[category])

    # ---- factories ----

    def create_null(self, name: str) -> Type:
        """Create a type that carries no data."""
        return self._create(Type(name=name, category=TypeCategory.NULL))

    def create_numeric(self, name: str, size: int = 4, *, integer: bool = True, unsigned: bool = False) -> Type:
        """Create a numeric type of *size* bytes."""
        if unsigned and not integer:
            raise TypeRegistryError(f"'{name}': floating-point types cannot be unsigned")
        return self._create(
            Type(name=name, category=TypeCategory.NUMERIC, size=size, integer=integer, unsigned=unsigned)
        )

    def create_enum(self, name: str, values: Mapping[str, int] | Iterable[str]) -> Type:
        """Create an enumeration, numbering the symbols in order if no values are given."""
        if isinstance(values, Mapping):
            pairs = tuple((str(k), int(v)) for k, v in values.items())
        else:
            pairs = tuple((str(k), i) for i, k in enumerate(values))
        return self._create(Type(name=name, category=TypeCategory.ENUM, size=4, values=pairs))

    def create_compound(self, name: str, fields: Mapping[str, str] | Iterable[tuple[str, str]]) -> Type:
        """Create a structure whose fields reference existing types."""
        items = fields.items() if isinstance(fields, Mapping) else fields
        field_defs = tuple(TypeField(name=field_name, type=self.get(type_name).name) for field_name, type_name in items)
        size = sum(self.get(f.type).size for f in field_defs)
        return self._create(Type(name=name, category=TypeCategory.COMPOUND, size=size, fields=field_defs))

    def create_array(self, element: str, length: int) -> Type:
        """Create the fixed-size array type ``element[length]``."""
        element_type = self.get(element)
        if length <= 0:
            raise TypeRegistryError(f"array length must be positive, got {length}")
        return self._create(
            Type(
                name=f"{element_type.name}[{length}]",
                category=TypeCategory.ARRAY,
                size=element_type.size * length,
                element=element_type.name,
                length=length,
            )
        )

    def create_container(self, kind: str, element: str) -> Type:
        """Create the variable-size container type ``kind<element>``."""
        element_type = self.get(element)
        _check_absolute(kind)
        return self._create(
            Type(
                name=f"{kind}<{element_type.name}>",
                category=TypeCategory.CONTAINER,
                element=element_type.name,
                container_kind=kind,
            )
        )

    def create_opaque(self, name: str, size: int = 0) -> Type:
        """Create a type whose layout is not known to the registry."""
        return self._create(Type(name=name, category=TypeCategory.OPAQUE, size=size))

    def create_alias(self, alias: str, target: str) -> Type:
        """Make *alias* resolve to the existing type *target*."""
        target_type = self.get(target)
        self._add_alias(alias, target_type.name, allow_identical=False)
        return target_type

    # ---- plain-data form ----

    def to_dict(self) -> dict[str, Any]:
        """Return the registry as plain data (the inverse of :meth:`from_dict`)."""
        return {
            "types": [t.model_dump(mode="json", exclude_defaults=True) for _, t in self.each()],
            "aliases": dict(self._aliases),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TypeRegistry:
        """Build a registry from plain data.

        Types may be listed in any order; dependencies are checked once all
        of them are added.

        Raises:
            TypeRegistryError: If a definition is malformed or references an
                unknown type.
        """
        registry = cls()
        for index, raw in enumerate(data.get("types") or []):
            try:
                type_def = Type.model_validate(raw)
            except ValidationError as exc:
                raise TypeRegistryError(f"types[{index}]: {exc}") from exc
            registry._add(type_def, allow_identical=False)
        for _, type_def in registry.each():
            for dependency in type_def.dependencies():
                if dependency not in registry._types:
                    raise TypeNotFound(f"type '{type_def.name}' references unknown type '{dependency}'")
        for alias, target in (data.get("aliases") or {}).items():
            registry.create_alias(alias, target)
        return registry

    # ################
    # Implementation
    # ################

    def _create(self, type_def: Type) -> Type:
        return self._add(type_def, allow_identical=False)

    def _add(self, type_def: Type, *, allow_identical: bool) -> Type:
        _check_absolute(type_def.name)
        existing = self._types.get(type_def.name)
        if existing is None and type_def.name in self._aliases:
            raise DuplicateType(f"'{type_def.name}' is already an alias of '{self._aliases[type_def.name]}'")
        if existing is not None:
            if allow_identical and existing == type_def:
                return existing
            raise DuplicateType(f"type '{type_def.name}' is already defined")
        self._types[type_def.name] = type_def
        return type_def

    def _add_alias(self, alias: str, target: str, *, allow_identical: bool) -> None:
        _check_absolute(alias)
        if alias in self._types:
            raise DuplicateType(f"cannot alias '{alias}': a type of that name exists")
        existing = self._aliases.get(alias)
        if existing is not None:
            if allow_identical and existing == target:
                return
            raise DuplicateType(f"alias '{alias}' already points to '{existing}'")
        self._aliases[alias] = target


_FACTORY_METHODS: dict[TypeCategory, str] = {
    TypeCategory.NULL: "create_null",
    TypeCategory.NUMERIC: "create_numeric",
    TypeCategory.ENUM: "create_enum",
    TypeCategory.COMPOUND: "create_compound",
    TypeCategory.ARRAY: "create_array",
    TypeCategory.CONTAINER: "create_container",
    TypeCategory.OPAQUE: "create_opaque",
}


def _check_absolute(name: str) -> None:
    if not name.startswith("/"):
        raise TypeRegistryError(f"type names must be absolute (start with '/'), got '{name}'")
