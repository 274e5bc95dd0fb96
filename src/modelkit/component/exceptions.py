# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised by the component model and its loaders."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelkit.component.typekit import Typekit
    from modelkit.types import Type

# ###############
# Public Interface
# ###############


class ModelKitError(Exception):
    """Base class for all errors of the component model."""


class NotFound(ModelKitError, LookupError):
    """Base class for failures to find something by name."""


class DefinitionTypekitNotFound(NotFound):
    """Raised when no loaded typekit defines a given type."""


class ProjectNotFound(NotFound):
    """Raised when a project cannot be found."""


class TypekitNotFound(NotFound):
    """Raised when a typekit cannot be found."""


class NodeModelNotFound(NotFound):
    """Raised when a node model cannot be found."""


class DeploymentModelNotFound(NotFound):
    """Raised when a deployment model cannot be found."""


class DeployedNodeModelNotFound(NotFound):
    """Raised when a deployed node cannot be found."""


class AmbiguousName(ModelKitError, LookupError):
    """Base class for lookups by name that have more than one match."""


class AmbiguousProjectName(AmbiguousName):
    pass


class AmbiguousNodeModelName(AmbiguousName):
    pass


class AmbiguousDeploymentName(AmbiguousName):
    pass


class AmbiguousDeployedNodeName(AmbiguousName):
    """Raised when several deployments define a deployed node of the requested name."""


class ModelError(ModelKitError, ValueError):
    """Raised on an attempt to build an invalid model.

    Covers duplicate names, incompatible merges and invalid arguments to the
    model-building methods.
    """


class Incompatibility(ModelError):
    """Raised when incompatible settings are combined on one model object."""


class InternalError(ModelKitError):
    """Raised when a collaborator returned data inconsistent with the request."""


class AlreadyRegistered(ModelKitError):
    """Raised when registering a name that another object already uses."""


class DuplicateLoader(ModelKitError, ValueError):
    """Raised when adding a loader to an aggregate that already has it."""


class ModelTextError(ModelKitError):
    """Raised when the textual form of a model cannot be parsed."""


class NotInterfaceType(ModelKitError):
    """Raised when a type is known but not exported for use on interfaces.

    Attributes:
        type: The resolved type.
        definition_typekits: The typekits that have the type without
            exporting it.
    """

    def __init__(self, type: Type, definition_typekits: Iterable[Typekit]) -> None:
        self.type = type
        self.definition_typekits = set(definition_typekits)
        names = ", ".join(sorted(tk.name for tk in self.definition_typekits)) or "no"
        super().__init__(f"{type.name}, defined in the {names} typekit(s), is never exported for interface use")
