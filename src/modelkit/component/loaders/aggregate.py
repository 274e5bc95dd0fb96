# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""A loader that resolves models through an ordered list of child loaders."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, TypeVar

from modelkit.component.exceptions import (
    DeployedNodeModelNotFound,
    DeploymentModelNotFound,
    DuplicateLoader,
    NodeModelNotFound,
    NotFound,
    ProjectNotFound,
    TypekitNotFound,
)
from modelkit.component.loaders.base import Base

if TYPE_CHECKING:
    from modelkit.component.deployment import DeployedNode, Deployment
    from modelkit.component.node import NodeModel
    from modelkit.component.project import Project
    from modelkit.component.typekit import Typekit

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ###############
# Public Interface
# ###############


class Aggregate(Base):
    """Resolve models through child loaders, first match wins.

    Children are expected to use the aggregate as their root loader, so that
    whatever they load is registered, and from then on cached, here.

    Attributes:
        loaders: The child loaders, in query order.
    """

    def __init__(self, root_loader: Base | None = None) -> None:
        self.loaders: list[Base] = []
        super().__init__(root_loader)

    def added_child(self, loader: Base) -> None:
        self.add(loader)

    def clear(self) -> None:
        super().clear()
        for loader in self.loaders:
            loader.clear()

    def add(self, loader: Base) -> None:
        """Append *loader* to the children.

        Raises:
            DuplicateLoader: If *loader* is already a child.
        """
        if any(child is loader for child in self.loaders):
            raise DuplicateLoader(f"{loader!r} is already a child of {self!r}")
        self.loaders.append(loader)

    def remove(self, loader: Base) -> None:
        """Stop querying *loader*; models it already registered stay available."""
        self.loaders = [child for child in self.loaders if child is not loader]

    def project_model_from_name(self, name: str) -> Project:
        project = self.loaded_projects.get(name)
        if project is not None:
            return project
        return self._query_loaders(
            "project", name, lambda loader: loader.project_model_from_name(name), ProjectNotFound
        )

    def typekit_model_from_name(self, name: str) -> Typekit:
        typekit = self.loaded_typekits.get(name)
        if typekit is not None:
            return typekit
        return self._query_loaders(
            "typekit", name, lambda loader: loader.typekit_model_from_name(name), TypekitNotFound
        )

    def node_model_from_name(self, name: str) -> NodeModel:
        model = self.loaded_node_models.get(name)
        if model is not None:
            return model
        return self._query_loaders(
            "node model", name, lambda loader: loader.node_model_from_name(name), NodeModelNotFound
        )

    def deployment_model_from_name(self, name: str) -> Deployment:
        model = self.loaded_deployment_models.get(name)
        if model is not None:
            return model
        return self._query_loaders(
            "deployment model", name, lambda loader: loader.deployment_model_from_name(name), DeploymentModelNotFound
        )

    def deployed_node_model_from_name(self, name: str, deployment_name: str | None = None) -> DeployedNode:
        """Return the deployed node called *name*.

        A given *deployment_name* is resolved through the aggregate, cache
        first and then every child. Otherwise the children are asked in turn.
        """
        if deployment_name is not None:
            return super().deployed_node_model_from_name(name, deployment_name=deployment_name)
        return self._query_loaders(
            "deployed node",
            name,
            lambda loader: loader.deployed_node_model_from_name(name),
            DeployedNodeModelNotFound,
        )

    def project_available(self, name: str) -> bool:
        return super().project_available(name) or any(loader.project_available(name) for loader in self.loaders)

    def typekit_available(self, name: str) -> bool:
        return super().typekit_available(name) or any(loader.typekit_available(name) for loader in self.loaders)

    def each_available_project_name(self) -> Iterator[str]:
        """Enumerate the project names of all children, each name once."""
        seen: set[str] = set()
        for loader in list(self.loaders):
            for name in loader.each_available_project_name():
                if name not in seen:
                    seen.add(name)
                    yield name

    # ################
    # Implementation
    # ################

    def _query_loaders(self, kind: str, name: str, query: Callable[[Base], T], not_found: type[NotFound]) -> T:
        logger.debug("resolving %s %s on %s", kind, name, ", ".join(repr(loader) for loader in self.loaders))
        for loader in list(self.loaders):
            try:
                return query(loader)
            except not_found as exc:
                logger.debug("  %s %s not available on %r: %s", kind, name, loader, exc)
        raise not_found(f"there is no {kind} named {name} on {self!r}")
