# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Deployments: named sets of deployed node instances."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from modelkit.component.exceptions import DeployedNodeModelNotFound, ModelError

if TYPE_CHECKING:
    from modelkit.component.loaders.base import Base
    from modelkit.component.node import NodeModel

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class DeployedNode:
    """A node model instantiated under a given name in a deployment."""

    deployment: Deployment
    name: str
    model: NodeModel


class Deployment:
    """A mapping from deployed node names to node models.

    Attributes:
        loader: The loader used to resolve node models given by name.
        name: The deployment name.
        deployed_nodes: The deployed nodes, by name.
    """

    def __init__(self, loader: Base, name: str) -> None:
        self.loader = loader
        self.name = name
        self.deployed_nodes: dict[str, DeployedNode] = {}

    def __repr__(self) -> str:
        return f"<Deployment {self.name}>"

    def node(self, name: str, model: NodeModel | str) -> DeployedNode:
        """Deploy *model* under *name*.

        Args:
            name: The deployed node name.
            model: The node model, or its name resolved through the loader.

        Raises:
            ModelError: If a node called *name* is already deployed here.
            NodeModelNotFound: If *model* is a name the loader cannot resolve.
        """
        if name in self.deployed_nodes:
            existing = self.deployed_nodes[name]
            raise ModelError(f"{self.name} already has a deployed node called {name}, of model {existing.model.name}")
        if isinstance(model, str):
            model = self.loader.node_model_from_name(model)
        deployed = self.create_deployed_node(name, model)
        self.deployed_nodes[name] = deployed
        return deployed

    def create_deployed_node(self, name: str, model: NodeModel) -> DeployedNode:
        """Build the object representing a deployed node; override to customise it."""
        return DeployedNode(deployment=self, name=name, model=model)

    def has_deployed_node(self, name: str) -> bool:
        return name in self.deployed_nodes

    def deployed_node_from_name(self, name: str) -> DeployedNode:
        try:
            return self.deployed_nodes[name]
        except KeyError:
            raise DeployedNodeModelNotFound(f"deployment {self.name} has no deployed node called {name}") from None

    def each_deployed_node(self) -> Iterator[DeployedNode]:
        yield from list(self.deployed_nodes.values())
