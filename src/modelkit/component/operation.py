# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Operations: procedure calls served by a node."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Self

from modelkit.component.exceptions import ModelError
from modelkit.component.interface import InterfaceObject

if TYPE_CHECKING:
    from modelkit.component.node import NodeModel
    from modelkit.types import Type

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class OperationArgument:
    """One argument of an operation."""

    name: str
    type: Type
    doc: str = ""


class Operation(InterfaceObject):
    """A named procedure call exposed on a node's interface.

    Attributes:
        arguments: The arguments, in declaration order.
        return_type: The returned type, or None if the operation returns nothing.
        return_doc: Documentation of the returned value.
        in_caller_thread: Whether the operation runs in the caller's context.
        hidden: Whether the operation is hidden from user-facing listings.
    """

    def __init__(self, node: NodeModel, name: str) -> None:
        name = str(name)
        if not _IDENTIFIER.match(name):
            raise ModelError(
                "operation names must be valid identifiers, i.e. contain only alphanumeric characters and _ "
                f"(got '{name}')"
            )
        super().__init__(node, name)
        self.arguments: list[OperationArgument] = []
        self.return_type: Type | None = None
        self.return_doc = ""
        self.in_caller_thread = False
        self.hidden = False

    def argument(self, name: str, type: Type | str, doc: str = "") -> Self:
        """Append an argument whose type is resolved on the node's loader."""
        resolved = self.node.loader.resolve_interface_type(type)
        self.arguments.append(OperationArgument(name=name, type=resolved, doc=doc))
        return self

    def returns(self, type: Type | str, doc: str = "") -> Self:
        """Set the return type of this operation."""
        self.return_type = self.node.loader.resolve_interface_type(type)
        self.return_doc = doc
        return self

    def returns_nothing(self) -> Self:
        """Declare that this operation does not return anything."""
        self.return_type = None
        self.return_doc = ""
        return self

    @property
    def has_return_value(self) -> bool:
        return self.return_type is not None

    def runs_in_caller_thread(self) -> Self:
        self.in_caller_thread = True
        return self

    def runs_in_callee_thread(self) -> Self:
        self.in_caller_thread = False
        return self

    def hide(self) -> Self:
        self.hidden = True
        return self

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "doc": self.documentation or ""}
        if self.return_type is not None:
            result["returns"] = {"type": self.return_type.name, "doc": self.return_doc}
        result["arguments"] = [{"name": a.name, "type": a.type.name, "doc": a.doc} for a in self.arguments]
        return result

    def _copy_containers(self) -> None:
        self.arguments = list(self.arguments)


# ################
# Implementation
# ################

_IDENTIFIER = re.compile(r"^\w+$")
