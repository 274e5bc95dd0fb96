# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML text formats for projects and typekits.

A project document describes the node models and deployments of one project.
It is applied through the project's builder methods, so that every model is
registered on the project's loader exactly as if it had been built in code::

    name: demo
    version: "1.0"
    using:
      typekits: [base]
    nodes:
      - name: demo::Task
        input-ports:
          - {name: in, type: /int32_t}
        output-ports:
          - {name: out, type: /int32_t, triggered-on: [in]}

A typekit document holds a plain-data type registry plus the names of the
types the typekit defines and exports.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modelkit.component.exceptions import ModelTextError
from modelkit.component.typekit import Typekit
from modelkit.types import TypeRegistry, TypeRegistryError

if TYPE_CHECKING:
    from modelkit.component.loaders.base import Base
    from modelkit.component.node import NodeModel
    from modelkit.component.project import Project

# ###############
# Public Interface
# ###############


class ConfigurationSchema(BaseModel):
    """An attribute or a property."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type: str
    default: Any = None
    dynamic: bool = False
    doc: str = ""


class ArgumentSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type: str
    doc: str = ""


class ReturnSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: str
    doc: str = ""


class OperationSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    doc: str = ""
    arguments: list[ArgumentSchema] = Field(default_factory=list)
    returns: ReturnSchema | None = None
    caller_thread: bool = Field(alias="caller-thread", default=False)
    hidden: bool = False


class InputPortSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type: str
    doc: str = ""
    static: bool = False
    reliable: bool = False
    multiplexes: bool = False
    clean_on_start: bool = Field(alias="clean-on-start", default=True)


class BurstSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    size: int
    period: int = 1


class OutputPortSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type: str
    doc: str = ""
    static: bool = False
    sample_size: int = Field(alias="sample-size", default=1)
    period: int = 1
    burst: BurstSchema | None = None
    triggered_on: list[str] = Field(alias="triggered-on", default_factory=list)
    triggered_on_update: bool = Field(alias="triggered-on-update", default=False)
    once_per_update: bool = Field(alias="once-per-update", default=False)


class DynamicPortSchema(BaseModel):
    """A dynamic port; a missing type accepts any type."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    pattern: str | None = None
    type: str | None = None
    doc: str = ""


class MergeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    model: str
    mappings: dict[str, str] = Field(default_factory=dict)


class NodeSchema(BaseModel):
    """A node model of a project document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    superclass: str | None = None
    abstract: bool = False
    doc: str = ""
    attributes: list[ConfigurationSchema] = Field(default_factory=list)
    properties: list[ConfigurationSchema] = Field(default_factory=list)
    operations: list[OperationSchema] = Field(default_factory=list)
    input_ports: list[InputPortSchema] = Field(alias="input-ports", default_factory=list)
    output_ports: list[OutputPortSchema] = Field(alias="output-ports", default_factory=list)
    dynamic_input_ports: list[DynamicPortSchema] = Field(alias="dynamic-input-ports", default_factory=list)
    dynamic_output_ports: list[DynamicPortSchema] = Field(alias="dynamic-output-ports", default_factory=list)
    merge_ports_from: list[MergeSchema] = Field(alias="merge-ports-from", default_factory=list)


class DeployedNodeSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    model: str


class DeploymentSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    nodes: list[DeployedNodeSchema] = Field(default_factory=list)


class UsingSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    typekits: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)


class ProjectSchema(BaseModel):
    """Top-level model of a project document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    version: str | None = None
    using: UsingSchema = Field(default_factory=UsingSchema)
    nodes: list[NodeSchema] = Field(default_factory=list)
    deployments: list[DeploymentSchema] = Field(default_factory=list)


class TypekitSchema(BaseModel):
    """Top-level model of a typekit document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    typelist: list[str] = Field(default_factory=list)
    interface_typelist: list[str] = Field(alias="interface-typelist", default_factory=list)
    types: list[dict[str, Any]] = Field(default_factory=list)
    aliases: dict[str, str] = Field(default_factory=dict)


def load_project_schema(text: str, origin: str | None = None) -> ProjectSchema:
    """Parse and validate a project document without applying it.

    Raises:
        ModelTextError: If the text is not valid YAML or does not match the schema.
    """
    return _validate(ProjectSchema, text, origin)


def evaluate_project_text(project: Project, text: str, origin: str | None = None) -> Project:
    """Apply a project document to *project* and return it.

    Dependencies listed under ``using`` are resolved through the project's
    loader before any node model is built.

    Raises:
        ModelTextError: If the text is not valid YAML or does not match the schema.
        ModelKitError: If building the models fails.
    """
    schema = load_project_schema(text, origin)
    project.name = schema.name
    if schema.version is not None:
        project.version = schema.version
    for typekit_name in schema.using.typekits:
        project.use_types_from(typekit_name)
    for project_name in schema.using.projects:
        project.use_nodes_from(project_name)
    for node in schema.nodes:
        supermodel = project.node_model_from_name(node.superclass) if node.superclass else None
        project.node(node.name, supermodel=supermodel, setup=partial(_apply_node, project, schema=node))
    for deployment in schema.deployments:
        project.deployment(deployment.name, setup=partial(_apply_deployment, schema=deployment))
    return project


def parse_typekit_text(loader: Base | None, text: str, origin: str | None = None) -> Typekit:
    """Build a typekit from a typekit document.

    Raises:
        ModelTextError: If the text is malformed, if its registry is invalid or
            if the type lists name unknown types.
    """
    schema = _validate(TypekitSchema, text, origin)
    label = origin or "<string>"
    try:
        registry = TypeRegistry.from_dict({"types": schema.types, "aliases": schema.aliases})
        typelist = [registry.get(name) for name in schema.typelist]
        interface_typelist = [registry.get(name) for name in schema.interface_typelist]
    except TypeRegistryError as exc:
        raise ModelTextError(f"{label}: {exc}") from exc
    return Typekit(
        loader,
        schema.name,
        registry=registry,
        typelist=typelist,
        interface_typelist=interface_typelist,
    )


def dump_typekit_text(typekit: Typekit) -> str:
    """Return the typekit document describing *typekit*."""
    data = typekit.registry.to_dict()
    document = {
        "name": typekit.name,
        "typelist": sorted(typekit.typelist),
        "interface-typelist": sorted(typekit.interface_typelist),
        "types": data["types"],
        "aliases": data["aliases"],
    }
    return yaml.safe_dump(document, default_flow_style=False, sort_keys=False)


# ################
# Implementation
# ################


def _validate(schema: type[BaseModel], text: str, origin: str | None) -> Any:
    label = origin or "<string>"
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ModelTextError(f"Invalid YAML in {label}: {exc}") from exc
    if not isinstance(data, dict):
        raise ModelTextError(f"{label}: document must be a YAML mapping")
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise ModelTextError(f"Invalid model in {label}: {exc}") from exc


def _apply_node(project: Project, model: NodeModel, schema: NodeSchema) -> None:
    if schema.doc:
        model.doc(schema.doc)
    if schema.abstract:
        model.set_abstract()
    for attribute in schema.attributes:
        obj = model.attribute(attribute.name, attribute.type, attribute.default).doc(attribute.doc)
        if attribute.dynamic:
            obj.set_dynamic()
    for prop in schema.properties:
        obj = model.property(prop.name, prop.type, prop.default).doc(prop.doc)
        if prop.dynamic:
            obj.set_dynamic()
    for operation in schema.operations:
        op = model.operation(operation.name).doc(operation.doc)
        for argument in operation.arguments:
            op.argument(argument.name, argument.type, argument.doc)
        if operation.returns is not None:
            op.returns(operation.returns.type, operation.returns.doc)
        if operation.caller_thread:
            op.runs_in_caller_thread()
        if operation.hidden:
            op.hide()
    for input_port in schema.input_ports:
        port = model.input_port(input_port.name, input_port.type).doc(input_port.doc)
        if input_port.static:
            port.static_connections()
        if input_port.reliable:
            port.needs_reliable_connection()
        if input_port.multiplexes:
            port.multiplexes()
        if not input_port.clean_on_start:
            port.do_not_clean_on_node_start()
    for output_port in schema.output_ports:
        port = model.output_port(output_port.name, output_port.type).doc(output_port.doc)
        port.set_sample_size(output_port.sample_size).set_period(output_port.period)
        if output_port.static:
            port.static_connections()
        if output_port.burst is not None:
            port.burst(output_port.burst.size, output_port.burst.period)
        if output_port.triggered_on:
            port.triggered_on(*output_port.triggered_on)
        if output_port.triggered_on_update:
            port.triggered_on_update()
        if output_port.once_per_update:
            port.triggered_once_per_update()
    for dynamic in schema.dynamic_input_ports:
        model.dynamic_input_port(dynamic.name, pattern=dynamic.pattern, type=dynamic.type).doc(dynamic.doc)
    for dynamic in schema.dynamic_output_ports:
        model.dynamic_output_port(dynamic.name, pattern=dynamic.pattern, type=dynamic.type).doc(dynamic.doc)
    for merge in schema.merge_ports_from:
        model.merge_ports_from(project.node_model_from_name(merge.model), merge.mappings)


def _apply_deployment(deployment: Any, schema: DeploymentSchema) -> None:
    for deployed in schema.nodes:
        deployment.node(deployed.name, deployed.model)
