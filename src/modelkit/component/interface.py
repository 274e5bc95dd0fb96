# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Base classes for the objects that make up a node model's interface."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from modelkit.component.node import NodeModel
    from modelkit.types import Type

# ###############
# Public Interface
# ###############


class InterfaceObject:
    """A named element attached to a node model.

    Attributes:
        node: The node model this object belongs to (back-reference).
        name: The object name, unique across all categories of its node.
        documentation: Free-form description, or None.
    """

    def __init__(self, node: NodeModel, name: str) -> None:
        self.node = node
        self.name = str(name)
        self.documentation: str | None = None

    def __repr__(self) -> str:
        node_name = self.node.name if self.node is not None else None
        return f"<{type(self).__name__} {self.name} of {node_name}>"

    def doc(self, text: str) -> Self:
        """Set the documentation string and return self."""
        self.documentation = str(text)
        return self

    def rebind(self, node: NodeModel, name: str | None = None) -> Self:
        """Attach this object to *node*, optionally renaming it, and return self."""
        self.node = node
        if name is not None:
            self.name = name
        return self

    def dup(self) -> Self:
        """Return an independent copy of this object, still bound to the same node."""
        result = copy.copy(self)
        result._copy_containers()
        return result

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "doc": self.documentation or ""}

    def _copy_containers(self) -> None:
        """Hook for subclasses holding mutable containers that must not be shared."""


class ConfigurationObject(InterfaceObject):
    """Base class for attributes and properties.

    Attributes:
        type: The resolved interface type.
        default_value: The default value, if any.
        dynamic: Whether the value can be changed while the node runs.
    """

    def __init__(self, node: NodeModel, name: str, type: Type | str, default_value: Any = None) -> None:
        super().__init__(node, name)
        self.type = node.loader.resolve_interface_type(type)
        self.default_value = default_value
        self.dynamic = False

    def set_dynamic(self) -> Self:
        """Declare that this object can be set while the node is running."""
        self.dynamic = True
        return self

    def to_dict(self) -> dict[str, Any]:
        result = {
            "name": self.name,
            "type": self.type.name,
            "dynamic": self.dynamic,
            "doc": self.documentation or "",
        }
        if self.default_value is not None:
            result["default"] = self.default_value
        return result


class Attribute(ConfigurationObject):
    """A configuration value that is read once, when the node is configured."""


class Property(ConfigurationObject):
    """A configuration value of a node."""
