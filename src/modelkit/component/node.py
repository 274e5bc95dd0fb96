# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Node models: single-inheritance schemas of a component's interface.

A node model holds one :class:`~modelkit.component.inherited.InheritedMap` per
interface category. Lookups see through the supermodel chain and promote
inherited objects into the submodel on first access, so that configuring an
inherited port on a submodel never changes the supermodel's port.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from functools import partialmethod
from typing import TYPE_CHECKING, Any

from modelkit.component.exceptions import ModelError
from modelkit.component.inherited import InheritedMap, InterfaceCategory
from modelkit.component.interface import Attribute, InterfaceObject, Property
from modelkit.component.operation import Operation
from modelkit.component.ports import (
    DynamicInputPort,
    DynamicOutputPort,
    DynamicPort,
    InputPort,
    OutputPort,
    Port,
)

if TYPE_CHECKING:
    from modelkit.component.loaders.base import Base
    from modelkit.component.project import Project
    from modelkit.types import Type

# ###############
# Public Interface
# ###############


class NodeModel:
    """The interface schema of a component.

    Attributes:
        name: The model name.
        supermodel: The model this one derives from, None for a root model.
        project: The project that defines this model, if any.
        documentation: Free-form description of the model.
        abstract: True if the model only declares an interface and is not
            meant to be deployed.
    """

    def __init__(
        self,
        name: str | None = None,
        supermodel: NodeModel | None = None,
        project: Project | None = None,
    ) -> None:
        self.name = name
        self.supermodel = supermodel
        if project is None and supermodel is not None:
            project = supermodel.project
        self.project = project
        self.documentation: str | None = None
        self.abstract = False
        self._maps: dict[InterfaceCategory, InheritedMap[Any]] = {
            category: InheritedMap(self, category) for category in InterfaceCategory
        }

    def __repr__(self) -> str:
        return f"<NodeModel {self.name}>"

    def new_submodel(self, name: str | None = None, project: Project | None = None) -> NodeModel:
        """Create a model deriving from this one, with no local interface objects."""
        return NodeModel(name=name, supermodel=self, project=project)

    @property
    def loader(self) -> Base:
        """The loader used to resolve types, i.e. the loader of the project."""
        if self.project is None:
            raise ModelError(f"node model {self.name} is not attached to a project, cannot resolve types")
        return self.project.loader

    def doc(self, text: str) -> NodeModel:
        self.documentation = str(text)
        return self

    def set_abstract(self) -> NodeModel:
        """Declare that this model only serves as a base for other models."""
        self.abstract = True
        return self

    def ancestors(self) -> Iterator[NodeModel]:
        """Enumerate this model and its supermodels, most derived first."""
        model: NodeModel | None = self
        while model is not None:
            yield model
            model = model.supermodel

    def is_submodel_of(self, other: NodeModel) -> bool:
        return any(model is other for model in self.ancestors())

    # ---- generic access to interface categories ----

    def interface_map(self, category: InterfaceCategory) -> InheritedMap[Any]:
        return self._maps[category]

    def find(self, category: InterfaceCategory, name: str) -> Any:
        """Return the object of *category* called *name*, or None."""
        return self._maps[category].find(name)

    def each(self, category: InterfaceCategory) -> Iterator[Any]:
        """Enumerate the objects of *category*, inherited ones first."""
        return self._maps[category].each()

    def local(self, category: InterfaceCategory) -> list[Any]:
        """Return the objects of *category* declared on this model itself."""
        return self._maps[category].local()

    def has(self, category: InterfaceCategory, name: str) -> bool:
        return name in self._maps[category]

    def promote(self, category: InterfaceCategory, name: str, obj: InterfaceObject) -> Any:
        """Bind a duplicate of the inherited *obj* to this model."""
        return self._maps[category].promote(name, obj)

    find_attribute = partialmethod(find, InterfaceCategory.ATTRIBUTE)
    find_property = partialmethod(find, InterfaceCategory.PROPERTY)
    find_operation = partialmethod(find, InterfaceCategory.OPERATION)
    find_input_port = partialmethod(find, InterfaceCategory.INPUT_PORT)
    find_output_port = partialmethod(find, InterfaceCategory.OUTPUT_PORT)
    find_dynamic_input_port = partialmethod(find, InterfaceCategory.DYNAMIC_INPUT_PORT)
    find_dynamic_output_port = partialmethod(find, InterfaceCategory.DYNAMIC_OUTPUT_PORT)

    each_attribute = partialmethod(each, InterfaceCategory.ATTRIBUTE)
    each_property = partialmethod(each, InterfaceCategory.PROPERTY)
    each_operation = partialmethod(each, InterfaceCategory.OPERATION)
    each_input_port = partialmethod(each, InterfaceCategory.INPUT_PORT)
    each_output_port = partialmethod(each, InterfaceCategory.OUTPUT_PORT)
    each_dynamic_input_port = partialmethod(each, InterfaceCategory.DYNAMIC_INPUT_PORT)
    each_dynamic_output_port = partialmethod(each, InterfaceCategory.DYNAMIC_OUTPUT_PORT)

    self_attributes = partialmethod(local, InterfaceCategory.ATTRIBUTE)
    self_properties = partialmethod(local, InterfaceCategory.PROPERTY)
    self_operations = partialmethod(local, InterfaceCategory.OPERATION)
    self_input_ports = partialmethod(local, InterfaceCategory.INPUT_PORT)
    self_output_ports = partialmethod(local, InterfaceCategory.OUTPUT_PORT)
    self_dynamic_input_ports = partialmethod(local, InterfaceCategory.DYNAMIC_INPUT_PORT)
    self_dynamic_output_ports = partialmethod(local, InterfaceCategory.DYNAMIC_OUTPUT_PORT)

    has_attribute = partialmethod(has, InterfaceCategory.ATTRIBUTE)
    has_property = partialmethod(has, InterfaceCategory.PROPERTY)
    has_operation = partialmethod(has, InterfaceCategory.OPERATION)
    has_input_port = partialmethod(has, InterfaceCategory.INPUT_PORT)
    has_output_port = partialmethod(has, InterfaceCategory.OUTPUT_PORT)
    has_dynamic_input_port = partialmethod(has, InterfaceCategory.DYNAMIC_INPUT_PORT)
    has_dynamic_output_port = partialmethod(has, InterfaceCategory.DYNAMIC_OUTPUT_PORT)

    # ---- declarations ----

    def check_uniqueness(self, name: str) -> None:
        """Raise if *name* is used by any interface object of this model or its supermodels.

        Raises:
            ModelError: If the name is already in use.
        """
        for category in InterfaceCategory:
            obj = self.find(category, name)
            if obj is not None:
                raise ModelError(
                    f"{name} is already used in the interface of {self.name}, as a {type(obj).__name__}"
                )

    def attribute(self, name: str, type: Type | str, default_value: Any = None) -> Attribute:
        """Declare an attribute, i.e. a value read when the node is configured."""
        self.check_uniqueness(name)
        return self._declare(InterfaceCategory.ATTRIBUTE, Attribute(self, name, type, default_value))

    def property(self, name: str, type: Type | str, default_value: Any = None) -> Property:
        """Declare a property."""
        self.check_uniqueness(name)
        return self._declare(InterfaceCategory.PROPERTY, Property(self, name, type, default_value))

    def operation(self, name: str) -> Operation:
        """Declare an operation; configure it further on the returned object."""
        self.check_uniqueness(name)
        return self._declare(InterfaceCategory.OPERATION, Operation(self, name))

    def input_port(self, name: str, type: Type | str) -> InputPort:
        self.check_uniqueness(name)
        return self._declare(InterfaceCategory.INPUT_PORT, InputPort(self, name, type))

    def output_port(self, name: str, type: Type | str) -> OutputPort:
        self.check_uniqueness(name)
        return self._declare(InterfaceCategory.OUTPUT_PORT, OutputPort(self, name, type))

    def dynamic_input_port(
        self,
        name: str,
        pattern: re.Pattern[str] | str | None = None,
        type: Type | str | None = None,
    ) -> DynamicInputPort:
        """Declare that input ports whose name matches *pattern* may be created at runtime.

        A None *type* accepts any type.
        """
        self.check_uniqueness(name)
        return self._declare(
            InterfaceCategory.DYNAMIC_INPUT_PORT, DynamicInputPort(self, name, pattern=pattern, type=type)
        )

    def dynamic_output_port(
        self,
        name: str,
        pattern: re.Pattern[str] | str | None = None,
        type: Type | str | None = None,
    ) -> DynamicOutputPort:
        """Declare that output ports whose name matches *pattern* may be created at runtime.

        A None *type* accepts any type.
        """
        self.check_uniqueness(name)
        return self._declare(
            InterfaceCategory.DYNAMIC_OUTPUT_PORT, DynamicOutputPort(self, name, pattern=pattern, type=type)
        )

    # ---- port queries ----

    def find_port(self, name: str) -> Port | None:
        return self.find_output_port(name) or self.find_input_port(name)

    def has_port(self, name: str) -> bool:
        return self.find_port(name) is not None

    def each_port(self) -> Iterator[Port]:
        yield from self.each_input_port()
        yield from self.each_output_port()

    def find_dynamic_port(self, name: str) -> DynamicPort | None:
        return self.find_dynamic_input_port(name) or self.find_dynamic_output_port(name)

    def has_dynamic_port(self, name: str) -> bool:
        return self.find_dynamic_port(name) is not None

    def each_dynamic_port(self) -> Iterator[DynamicPort]:
        yield from self.each_dynamic_input_port()
        yield from self.each_dynamic_output_port()

    def find_matching_input_ports(
        self, name: str | re.Pattern[str] | None = None, type: Type | str | None = None
    ) -> list[InputPort]:
        """Return the input ports matching a name (or name pattern) and/or a type."""
        return self._find_matching_ports(InterfaceCategory.INPUT_PORT, name, type)

    def find_matching_output_ports(
        self, name: str | re.Pattern[str] | None = None, type: Type | str | None = None
    ) -> list[OutputPort]:
        """Return the output ports matching a name (or name pattern) and/or a type."""
        return self._find_matching_ports(InterfaceCategory.OUTPUT_PORT, name, type)

    def find_matching_dynamic_input_ports(
        self, name: str | None = None, type: Type | str | None = None
    ) -> list[DynamicInputPort]:
        """Return the dynamic input ports that could create a port of this name and type."""
        return self._filter_matching_dynamic_ports(self.each_dynamic_input_port(), name, type)

    def find_matching_dynamic_output_ports(
        self, name: str | None = None, type: Type | str | None = None
    ) -> list[DynamicOutputPort]:
        """Return the dynamic output ports that could create a port of this name and type."""
        return self._filter_matching_dynamic_ports(self.each_dynamic_output_port(), name, type)

    def has_matching_dynamic_input_port(self, name: str | None = None, type: Type | str | None = None) -> bool:
        return bool(self.find_matching_dynamic_input_ports(name=name, type=type))

    def has_matching_dynamic_output_port(self, name: str | None = None, type: Type | str | None = None) -> bool:
        return bool(self.find_matching_dynamic_output_ports(name=name, type=type))

    def has_matching_dynamic_port(self, name: str | None = None, type: Type | str | None = None) -> bool:
        return self.has_matching_dynamic_input_port(name=name, type=type) or self.has_matching_dynamic_output_port(
            name=name, type=type
        )

    # ---- composition ----

    def merge_ports_from(self, other: NodeModel, name_mappings: Mapping[str, str] | None = None) -> None:
        """Add the static and dynamic ports of *other* that this model does not have.

        Ports are renamed through *name_mappings* first. A port that already
        exists must have the same direction, type and (for dynamic ports)
        pattern, in which case the existing port is kept.

        Raises:
            ModelError: On a port that exists here with an incompatible
                definition, or whose name is used by another kind of object.
        """
        mappings = dict(name_mappings or {})
        for port in list(other.each_port()):
            target = mappings.get(port.name, port.name)
            existing = self.find_port(target)
            if existing is not None:
                _check_mergeable(self, existing, other, port)
                continue
            self.check_uniqueness(target)
            merged = port.dup().rebind(self, name=target)
            if isinstance(merged, OutputPort):
                merged.port_triggers = {mappings.get(n, n) for n in merged.port_triggers}
                self._declare(InterfaceCategory.OUTPUT_PORT, merged)
            else:
                self._declare(InterfaceCategory.INPUT_PORT, merged)

        for port in list(other.each_dynamic_port()):
            target = mappings.get(port.name, port.name)
            existing = self.find_dynamic_port(target)
            if existing is not None:
                _check_mergeable(self, existing, other, port)
                if not existing.same_pattern(port):
                    raise ModelError(
                        f"cannot merge as {target} matches pattern {_pattern_text(existing)} in {self.name} "
                        f"and pattern {_pattern_text(port)} in {other.name}"
                    )
                continue
            self.check_uniqueness(target)
            merged = port.dup().rebind(self, name=target)
            if isinstance(merged, DynamicOutputPort):
                self._declare(InterfaceCategory.DYNAMIC_OUTPUT_PORT, merged)
            else:
                self._declare(InterfaceCategory.DYNAMIC_INPUT_PORT, merged)

    def to_dict(self) -> dict[str, Any]:
        """Return the model's full interface (inherited objects included) as plain data."""
        return {
            "name": self.name,
            "superclass": self.supermodel.name if self.supermodel is not None else None,
            "abstract": self.abstract,
            "doc": self.documentation or "",
            "ports": [p.to_dict() for p in self.each_port()],
            "dynamic_ports": [p.to_dict() for p in self.each_dynamic_port()],
            "properties": [p.to_dict() for p in self.each_property()],
            "attributes": [a.to_dict() for a in self.each_attribute()],
            "operations": [o.to_dict() for o in self.each_operation()],
        }

    # ################
    # Implementation
    # ################

    def _declare(self, category: InterfaceCategory, obj: Any) -> Any:
        return self._maps[category].declare(obj)

    def _find_matching_ports(
        self,
        category: InterfaceCategory,
        name: str | re.Pattern[str] | None,
        type: Type | str | None,
    ) -> list[Any]:
        if isinstance(name, str):
            port = self.find(category, name)
            ports = [port] if port is not None else []
        elif name is not None:
            ports = [p for p in self.each(category) if name.search(p.name)]
        else:
            ports = list(self.each(category))
        if type is not None:
            resolved = self.loader.resolve_interface_type(type)
            ports = [p for p in ports if p.type == resolved]
        return ports

    def _filter_matching_dynamic_ports(
        self, ports: Iterator[Any], name: str | None, type: Type | str | None
    ) -> list[Any]:
        result = list(ports)
        if name is not None:
            result = [p for p in result if p.matches(name)]
        if type is not None:
            resolved = self.loader.resolve_interface_type(type)
            result = [p for p in result if p.type is None or p.type == resolved]
        return result


# The supermodel of node models created without an explicit one.
BASE_NODE_MODEL = NodeModel(name="modelkit::component::Node")


def _check_mergeable(model: NodeModel, existing: Port, other: NodeModel, port: Port) -> None:
    if type(existing) is not type(port):
        raise ModelError(
            f"cannot merge as {existing.name} is a {type(existing).__name__} in {model.name} "
            f"and a {type(port).__name__} in {other.name}"
        )
    if existing.type != port.type:
        raise ModelError(
            f"cannot merge as {existing.name} is of type {existing.type} in {model.name} "
            f"and of type {port.type} in {other.name}"
        )


def _pattern_text(port: DynamicPort) -> str:
    return port.pattern.pattern if port.pattern is not None else "<any>"
