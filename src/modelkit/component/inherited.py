# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Name-indexed interface maps that see through a node model's supermodel chain."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from modelkit.component.interface import InterfaceObject

if TYPE_CHECKING:
    from modelkit.component.node import NodeModel

# ###############
# Public Interface
# ###############

T = TypeVar("T", bound=InterfaceObject)


class InterfaceCategory(Enum):
    """The categories of objects that make up a node model's interface."""

    ATTRIBUTE = "attribute"
    PROPERTY = "property"
    OPERATION = "operation"
    INPUT_PORT = "input_port"
    OUTPUT_PORT = "output_port"
    DYNAMIC_INPUT_PORT = "dynamic_input_port"
    DYNAMIC_OUTPUT_PORT = "dynamic_output_port"


class InheritedMap(Generic[T]):
    """The objects of one category on one node model, plus those it inherits.

    Objects declared on a supermodel are promoted the first time they are
    requested through this map: a duplicate bound to the owning model is
    created and cached, so the supermodel's object is never modified through
    a submodel.
    """

    def __init__(self, owner: NodeModel, category: InterfaceCategory) -> None:
        self._owner = owner
        self._category = category
        self._local: dict[str, T] = {}
        self._promoted: dict[str, T] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[T]:
        return self.each()

    def __len__(self) -> int:
        return len(self.names())

    def declare(self, obj: T) -> T:
        """Add *obj* to the objects declared locally on the owner."""
        self._local[obj.name] = obj
        self._promoted.pop(obj.name, None)
        return obj

    def local(self) -> list[T]:
        """Return the objects declared on the owner itself, in declaration order."""
        return list(self._local.values())

    def find(self, name: str) -> T | None:
        """Return the object called *name*, promoting it from the supermodel if needed."""
        obj = self._local.get(name) or self._promoted.get(name)
        if obj is not None:
            return obj
        parent = self._parent()
        if parent is None:
            return None
        inherited = parent.find(name)
        if inherited is None:
            return None
        return self.promote(name, inherited)

    def promote(self, name: str, obj: T) -> T:
        """Cache a duplicate of the inherited *obj*, bound to the owner."""
        promoted = obj.dup().rebind(self._owner)
        self._promoted[name] = promoted
        return promoted

    def names(self) -> list[str]:
        """Return all visible names, base models first, each name once."""
        parent = self._parent()
        names = parent.names() if parent is not None else []
        seen = set(names)
        for name in self._local:
            if name not in seen:
                names.append(name)
                seen.add(name)
        return names

    def each(self) -> Iterator[T]:
        """Enumerate the visible objects, supermodel entries first.

        A name redeclared on a submodel appears once, at the position of the
        inherited entry, with the submodel's object.
        """
        for name in self.names():
            obj = self.find(name)
            if obj is not None:
                yield obj

    # ################
    # Implementation
    # ################

    def _parent(self) -> InheritedMap[T] | None:
        supermodel = self._owner.supermodel
        if supermodel is None:
            return None
        return supermodel.interface_map(self._category)
