# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Component model: typekits, node models, projects, deployments and their loaders."""

from modelkit.component.deployment import DeployedNode, Deployment
from modelkit.component.exceptions import (
    AlreadyRegistered,
    AmbiguousDeployedNodeName,
    AmbiguousDeploymentName,
    AmbiguousName,
    AmbiguousNodeModelName,
    AmbiguousProjectName,
    DefinitionTypekitNotFound,
    DeployedNodeModelNotFound,
    DeploymentModelNotFound,
    DuplicateLoader,
    Incompatibility,
    InternalError,
    ModelError,
    ModelKitError,
    ModelTextError,
    NodeModelNotFound,
    NotFound,
    NotInterfaceType,
    ProjectNotFound,
    TypekitNotFound,
)
from modelkit.component.inherited import InheritedMap, InterfaceCategory
from modelkit.component.interface import Attribute, ConfigurationObject, InterfaceObject, Property
from modelkit.component.node import BASE_NODE_MODEL, NodeModel
from modelkit.component.operation import Operation, OperationArgument
from modelkit.component.ports import (
    VOID_TYPE_NAME,
    DynamicInputPort,
    DynamicOutputPort,
    DynamicPort,
    InputPort,
    OutputPort,
    Port,
)
from modelkit.component.project import Project
from modelkit.component.text import evaluate_project_text, parse_typekit_text
from modelkit.component.typekit import Typekit

__all__ = [
    "AlreadyRegistered",
    "AmbiguousDeployedNodeName",
    "AmbiguousDeploymentName",
    "AmbiguousName",
    "AmbiguousNodeModelName",
    "AmbiguousProjectName",
    "Attribute",
    "BASE_NODE_MODEL",
    "ConfigurationObject",
    "DefinitionTypekitNotFound",
    "DeployedNode",
    "DeployedNodeModelNotFound",
    "Deployment",
    "DeploymentModelNotFound",
    "DuplicateLoader",
    "DynamicInputPort",
    "DynamicOutputPort",
    "DynamicPort",
    "Incompatibility",
    "InheritedMap",
    "InputPort",
    "InterfaceCategory",
    "InterfaceObject",
    "InternalError",
    "ModelError",
    "ModelKitError",
    "ModelTextError",
    "NodeModel",
    "NodeModelNotFound",
    "NotFound",
    "NotInterfaceType",
    "Operation",
    "OperationArgument",
    "OutputPort",
    "Port",
    "Project",
    "ProjectNotFound",
    "Property",
    "Typekit",
    "TypekitNotFound",
    "VOID_TYPE_NAME",
    "evaluate_project_text",
    "parse_typekit_text",
]
