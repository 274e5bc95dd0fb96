# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Projects: namespaces of node and deployment models."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from modelkit.component.deployment import Deployment
from modelkit.component.exceptions import DeploymentModelNotFound, ModelError
from modelkit.component.node import BASE_NODE_MODEL, NodeModel

if TYPE_CHECKING:
    from modelkit.component.loaders.base import Base
    from modelkit.component.typekit import Typekit
    from modelkit.types import Type

# ###############
# Public Interface
# ###############


class Project:
    """A named set of node models and deployment models.

    Node and deployment models created through :meth:`node` and
    :meth:`deployment` are registered on :attr:`loader` as they are created.

    Attributes:
        loader: The loader that resolves this project's dependencies.
        typekit: The project's own typekit, if it has one.
        node_models: The node models defined by this project, by name.
        deployment_models: The deployments defined by this project, by name.
        default_node_supermodel: Supermodel used by :meth:`node` when none
            is given.
    """

    def __init__(self, loader: Base, name: str | None = None) -> None:
        self.loader = loader
        self._name: str | None = None
        self._version = "0.0"
        if name is not None:
            self.name = name
        self.typekit: Typekit | None = None
        self.node_models: dict[str, NodeModel] = {}
        self.deployment_models: dict[str, Deployment] = {}
        self.default_node_supermodel: NodeModel = BASE_NODE_MODEL

    @classmethod
    def blank(cls) -> Project:
        """Create an unnamed project on a fresh loader."""
        from modelkit.component.loaders.base import Base

        return cls(Base())

    def __repr__(self) -> str:
        return f"<Project {self._name} loader={self.loader!r}>"

    @property
    def name(self) -> str | None:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if not isinstance(value, str):
            raise ModelError(f"project names must be strings, got {value!r}")
        self._name = value

    @property
    def version(self) -> str:
        return self._version

    @version.setter
    def version(self, value: object) -> None:
        text = str(value)
        if not re.match(r"^\d", text):
            raise ModelError(f"version strings must start with a number (got '{text}')")
        self._version = text

    def node(
        self,
        name: str,
        supermodel: NodeModel | None = None,
        setup: Callable[[NodeModel], object] | None = None,
    ) -> NodeModel:
        """Create a node model, register it on the loader and return it.

        Args:
            name: The new model's name.
            supermodel: The model to derive from, :attr:`default_node_supermodel`
                by default.
            setup: Called with the new model before it is registered.

        Raises:
            ModelError: If this project already has a node model called *name*.
        """
        if self.has_node_model(name):
            raise ModelError(f"there is already a node model named {name} in project {self._name}")
        base = supermodel if supermodel is not None else self.default_node_supermodel
        node_model = base.new_submodel(name=name, project=self)
        if setup is not None:
            setup(node_model)
        self.node_models[name] = node_model
        self.loader.register_node_model(node_model)
        return node_model

    def deployment(
        self,
        name: str,
        setup: Callable[[Deployment], object] | None = None,
        deployment_class: type[Deployment] = Deployment,
    ) -> Deployment:
        """Create a deployment model, register it on the loader and return it.

        Raises:
            ModelError: If this project already has a deployment called *name*.
        """
        if self.has_deployment_model(name):
            raise ModelError(f"there is already a deployment called {name} in project {self._name}")
        deployment_model = deployment_class(self.loader, name)
        if setup is not None:
            setup(deployment_model)
        self.deployment_models[name] = deployment_model
        self.loader.register_deployment_model(deployment_model)
        return deployment_model

    def use_nodes_from(self, project: Project | str) -> Project:
        """Make the node models of another project resolvable through the loader.

        Args:
            project: The project, or its name, in which case it is loaded.
        """
        if isinstance(project, str):
            return self.loader.node_library_model_from_name(project)
        self.loader.register_project_model(project)
        return project

    def use_types_from(self, typekit: Typekit | str) -> Typekit:
        """Make the types of a typekit resolvable through the loader.

        Args:
            typekit: The typekit, or its name, in which case it is loaded.
        """
        if isinstance(typekit, str):
            return self.loader.typekit_model_from_name(typekit)
        self.loader.register_typekit_model(typekit)
        return typekit

    def has_node_model(self, name: str) -> bool:
        return name in self.node_models

    def node_model_from_name(self, name: str) -> NodeModel:
        """Return a node model of this project, or resolve it through the loader."""
        model = self.node_models.get(name)
        if model is not None:
            return model
        return self.loader.node_model_from_name(name)

    def each_node_model(self) -> Iterator[NodeModel]:
        yield from list(self.node_models.values())

    def has_deployment_model(self, name: str) -> bool:
        return name in self.deployment_models

    def deployment_model_from_name(self, name: str) -> Deployment:
        try:
            return self.deployment_models[name]
        except KeyError:
            raise DeploymentModelNotFound(f"project {self._name} has no deployment called {name}") from None

    def each_deployment_model(self) -> Iterator[Deployment]:
        yield from list(self.deployment_models.values())

    def resolve_type(self, type: Type | str) -> Type:
        return self.loader.resolve_type(type)

    def resolve_interface_type(self, type: Type | str) -> Type:
        return self.loader.resolve_interface_type(type)
