# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""The loader protocol: name-based resolution and registration of models.

A loader resolves projects, typekits, node models and deployments from their
names, loading them from text on first request and caching them afterwards.
Loaders form trees: every loader has a root loader, and models discovered by
any loader of the tree are registered on that root. The root is therefore the
single source of truth used to resolve cross-references between models.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from modelkit.component.exceptions import (
    AlreadyRegistered,
    AmbiguousDeployedNodeName,
    DefinitionTypekitNotFound,
    DeployedNodeModelNotFound,
    DeploymentModelNotFound,
    InternalError,
    ModelError,
    NodeModelNotFound,
    NotInterfaceType,
    ProjectNotFound,
    TypekitNotFound,
)
from modelkit.component.ports import VOID_TYPE_NAME
from modelkit.component.project import Project
from modelkit.component.text import evaluate_project_text
from modelkit.component.text import parse_typekit_text as _parse_typekit_text
from modelkit.types import Type, TypeRegistry

if TYPE_CHECKING:
    from modelkit.component.deployment import DeployedNode, Deployment
    from modelkit.component.node import NodeModel
    from modelkit.component.typekit import Typekit

logger = logging.getLogger(__name__)

ProjectCallback = Callable[[Project], object]
TypekitCallback = Callable[["Typekit"], object]

# ###############
# Public Interface
# ###############


class Base:
    """A loader with no text source of its own.

    Subclasses provide text through :meth:`project_model_text_from_name` and
    :meth:`typekit_model_text_from_name`; as-is, every lookup of a model that
    was not registered explicitly fails with the matching NotFound error.

    Attributes:
        root_loader: The loader on which discovered models are registered.
        loaded_projects: Projects registered on this loader, by name.
        loaded_typekits: Typekits registered on this loader, by name.
        loaded_node_models: Node models registered on this loader, by name.
        loaded_deployment_models: Deployments registered on this loader, by name.
        registry: All the types loaded so far.
        interface_types: Names of the loaded types usable on interfaces.
        typekits_by_type_name: The typekits whose registry knows a type name.
        project_load_callbacks: Called with each newly registered project.
        typekit_load_callbacks: Called with each newly registered typekit.
    """

    def __init__(self, root_loader: Base | None = None) -> None:
        self.root_loader: Base = root_loader if root_loader is not None else self
        self.project_load_callbacks: list[ProjectCallback] = []
        self.typekit_load_callbacks: list[TypekitCallback] = []
        self.clear()
        if self.root_loader is not self:
            self.root_loader.added_child(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    @property
    def is_root(self) -> bool:
        return self.root_loader is self

    def clear(self) -> None:
        """Forget every registered model and type."""
        self.loaded_projects: dict[str, Project] = {}
        self.loaded_typekits: dict[str, Typekit] = {}
        self.loaded_node_models: dict[str, NodeModel] = {}
        self.loaded_deployment_models: dict[str, Deployment] = {}
        self.interface_types: set[str] = set()
        self.typekits_by_type_name: dict[str, set[Typekit]] = {}
        self.registry = TypeRegistry()
        self.registry.create_null(VOID_TYPE_NAME)

    def added_child(self, loader: Base) -> None:
        """Called when *loader* is created with this loader as its root."""

    # ---- text hooks ----

    def project_model_text_from_name(self, name: str) -> tuple[str, str | None]:
        """Return the text of the project called *name* and where it comes from.

        Raises:
            ProjectNotFound: Always, unless overridden.
        """
        raise ProjectNotFound(f"{self!r} has no source for project {name}")

    def typekit_model_text_from_name(self, name: str) -> tuple[str, str | None]:
        """Return the text of the typekit called *name* and where it comes from.

        Raises:
            TypekitNotFound: Always, unless overridden.
        """
        raise TypekitNotFound(f"{self!r} has no source for typekit {name}")

    def parse_project_text(self, text: str, path: str | None = None) -> Project:
        """Build a project bound to the root loader from its text."""
        project = Project(self.root_loader)
        return evaluate_project_text(project, text, origin=path)

    def parse_typekit_text(self, text: str, path: str | None = None) -> Typekit:
        """Build a typekit bound to the root loader from its text."""
        return _parse_typekit_text(self.root_loader, text, origin=path)

    # ---- availability ----

    def project_available(self, name: str) -> bool:
        return self.has_loaded_project(name)

    def typekit_available(self, name: str) -> bool:
        return self.has_loaded_typekit(name)

    def each_available_project_name(self) -> Iterator[str]:
        """Enumerate the names of the projects this loader could load."""
        yield from list(self.loaded_projects)

    def has_loaded_project(self, name: str) -> bool:
        return name in self.loaded_projects

    def has_loaded_typekit(self, name: str) -> bool:
        return name in self.loaded_typekits

    # ---- projects ----

    def project_model_from_name(self, name: str) -> Project:
        """Return the project called *name*, loading it if needed.

        The project's own typekit, if one of the same name is available, is
        loaded and attached to it. On failure, the models the half-built
        project registered are unregistered again, so that a retry fails the
        same way.

        Raises:
            ProjectNotFound: If there is no such project.
            InternalError: If the text source returned another project.
        """
        project = self.loaded_projects.get(name)
        if project is not None:
            logger.debug("project %s already loaded on %r", name, self)
            return project

        text, path = self.project_model_text_from_name(name)
        logger.info("loading project %s", name)
        known_nodes = set(self.loaded_node_models) | set(self.root_loader.loaded_node_models)
        known_deployments = set(self.loaded_deployment_models) | set(self.root_loader.loaded_deployment_models)
        try:
            project = self.parse_project_text(text, path=path)
            if self.typekit_available(name):
                project.typekit = self.typekit_model_from_name(name)
            if project.name != name:
                raise InternalError(f"inconsistency: got project {project.name} while loading {name}")
            self.register_project_model(project)
        except Exception:
            logger.debug("loading project %s failed, forgetting its models", name)
            self._forget_orphan_models(known_nodes, known_deployments)
            raise
        return project

    def node_library_model_from_name(self, name: str) -> Project:
        """Return the project called *name*, requiring it to define node models.

        Raises:
            ProjectNotFound: If there is no such project, or if it defines no
                node model.
        """
        project = self.project_model_from_name(name)
        if not project.node_models:
            raise ProjectNotFound(f"there is a project called {name}, but it defines no node models")
        return project

    def register_project_model(self, project: Project) -> None:
        """Register *project* and its node and deployment models.

        Project-load callbacks are then called, in subscription order.

        Raises:
            AlreadyRegistered: If a project of that name is already registered.
        """
        if project.name in self.loaded_projects:
            raise AlreadyRegistered(f"there is already a project called {project.name} registered on {self!r}")
        self.loaded_projects[project.name] = project
        if not self.is_root:
            try:
                self.root_loader.register_project_model(project)
            except Exception:
                del self.loaded_projects[project.name]
                raise
            return

        for node_model in project.each_node_model():
            self.register_node_model(node_model)
        for deployment_model in project.each_deployment_model():
            self.register_deployment_model(deployment_model)
        for callback in list(self.project_load_callbacks):
            callback(project)

    def on_project_load(self, callback: ProjectCallback, *, initial_events: bool = True) -> ProjectCallback:
        """Call *callback* with every project registered from now on.

        Args:
            callback: Called with the registered project.
            initial_events: Also call it now with the already registered projects.

        Returns:
            The value to pass to :meth:`remove_project_load_callback`.
        """
        self.project_load_callbacks.append(callback)
        if initial_events:
            for project in list(self.loaded_projects.values()):
                callback(project)
        return callback

    def remove_project_load_callback(self, callback: ProjectCallback) -> None:
        """Stop calling *callback*; unknown callbacks are ignored."""
        if callback in self.project_load_callbacks:
            self.project_load_callbacks.remove(callback)

    # ---- typekits ----

    def typekit_model_from_name(self, name: str) -> Typekit:
        """Return the typekit called *name*, loading it if needed.

        Raises:
            TypekitNotFound: If there is no such typekit.
            InternalError: If the text source returned another typekit.
        """
        typekit = self.loaded_typekits.get(name)
        if typekit is not None:
            logger.debug("typekit %s already loaded on %r", name, self)
            return typekit

        text, path = self.typekit_model_text_from_name(name)
        logger.info("loading typekit %s", name)
        typekit = self.parse_typekit_text(text, path=path)
        if typekit.name != name:
            raise InternalError(f"inconsistency: got typekit {typekit.name} while loading {name}")
        self.register_typekit_model(typekit)
        return typekit

    def register_typekit_model(self, typekit: Typekit) -> None:
        """Register *typekit* and merge its types into :attr:`registry`.

        Typekit-load callbacks are then called, in subscription order.

        Raises:
            AlreadyRegistered: If a typekit of that name is already registered.
            DuplicateType: If the typekit defines a known type differently, in
                which case neither the typekit nor any of its types is registered.
        """
        if typekit.name in self.loaded_typekits:
            raise AlreadyRegistered(f"there is already a typekit called {typekit.name} registered on {self!r}")
        if not self.is_root:
            self.loaded_typekits[typekit.name] = typekit
            try:
                self.root_loader.register_typekit_model(typekit)
            except Exception:
                del self.loaded_typekits[typekit.name]
                raise
            return

        self.registry.merge(typekit.registry)
        self.loaded_typekits[typekit.name] = typekit
        self.interface_types.update(self.registry.get(name).name for name in typekit.interface_typelist)
        for type_name, _ in typekit.registry.each(with_aliases=True):
            self.typekits_by_type_name.setdefault(type_name, set()).add(typekit)
        for callback in list(self.typekit_load_callbacks):
            callback(typekit)

    def on_typekit_load(self, callback: TypekitCallback, *, initial_events: bool = True) -> TypekitCallback:
        """Call *callback* with every typekit registered from now on.

        Args:
            callback: Called with the registered typekit.
            initial_events: Also call it now with the already registered typekits.

        Returns:
            The value to pass to :meth:`remove_typekit_load_callback`.
        """
        self.typekit_load_callbacks.append(callback)
        if initial_events:
            for typekit in list(self.loaded_typekits.values()):
                callback(typekit)
        return callback

    def remove_typekit_load_callback(self, callback: TypekitCallback) -> None:
        """Stop calling *callback*; unknown callbacks are ignored."""
        if callback in self.typekit_load_callbacks:
            self.typekit_load_callbacks.remove(callback)

    # ---- node and deployment models ----

    def node_model_from_name(self, name: str) -> NodeModel:
        """Return the node model called *name*, loading its project if needed.

        Raises:
            NodeModelNotFound: If no known project defines this model.
            InternalError: If the project found for the model does not have it.
        """
        model = self._registered(name, "loaded_node_models")
        if model is not None:
            return model

        project_name = self.find_project_name_from_node_model_name(name)
        if project_name is None:
            raise NodeModelNotFound(f"no node model {name} is registered on {self!r}")
        project = self.project_model_from_name(project_name)
        if not project.has_node_model(name):
            raise InternalError(
                f"while looking up model of {name}: found project {project_name}, "
                f"but this node library does not actually have a node model called {name}"
            )
        return project.node_models[name]

    def deployment_model_from_name(self, name: str) -> Deployment:
        """Return the deployment called *name*, loading its project if needed.

        Raises:
            DeploymentModelNotFound: If no known project defines this deployment.
            InternalError: If the project found for the deployment does not have it.
        """
        model = self._registered(name, "loaded_deployment_models")
        if model is not None:
            return model

        project_name = self.find_project_name_from_deployment_model_name(name)
        if project_name is None:
            raise DeploymentModelNotFound(f"there is no deployment called {name} on {self!r}")
        project = self.project_model_from_name(project_name)
        if not project.has_deployment_model(name):
            raise InternalError(
                f"while looking up model of {name}: found project {project_name}, "
                f"but this project does not actually have a deployment model called {name}"
            )
        return project.deployment_models[name]

    def deployed_node_model_from_name(self, name: str, deployment_name: str | None = None) -> DeployedNode:
        """Return the deployed node called *name*.

        Args:
            name: The deployed node name.
            deployment_name: The deployment that defines it. Only needed when
                several deployments define a node of that name.

        Raises:
            DeployedNodeModelNotFound: If no deployment defines the node.
            AmbiguousDeployedNodeName: If several deployments define it and
                *deployment_name* is not given.
            ModelError: If the given deployment does not have the node.
        """
        if deployment_name is not None:
            deployment = self.deployment_model_from_name(deployment_name)
        else:
            deployment_names = self.find_deployment_model_names_from_deployed_node_name(name)
            if not deployment_names:
                raise DeployedNodeModelNotFound(f"cannot find a deployed node called {name}")
            if len(deployment_names) > 1:
                raise AmbiguousDeployedNodeName(
                    f"more than one deployment defines a deployed node called {name}: "
                    f"{', '.join(sorted(deployment_names))}"
                )
            deployment = self.deployment_model_from_name(next(iter(deployment_names)))

        if not deployment.has_deployed_node(name):
            error = ModelError if deployment_name is not None else InternalError
            raise error(
                f"found {deployment!r} as the deployment providing a deployed node called {name}, "
                "but the deployment model does not actually have it"
            )
        return deployment.deployed_node_from_name(name)

    def register_node_model(self, model: NodeModel) -> None:
        """Register *model* on this loader and on the root loader.

        Registering the same object twice is a no-op.

        Raises:
            AlreadyRegistered: If another model of that name is registered.
        """
        _register(self.loaded_node_models, model, "node model", self)
        if not self.is_root:
            self.root_loader.register_node_model(model)

    def register_deployment_model(self, model: Deployment) -> None:
        """Register *model* on this loader and on the root loader.

        Registering the same object twice is a no-op.

        Raises:
            AlreadyRegistered: If another deployment of that name is registered.
        """
        _register(self.loaded_deployment_models, model, "deployment", self)
        if not self.is_root:
            self.root_loader.register_deployment_model(model)

    def find_project_name_from_node_model_name(self, name: str) -> str | None:
        """Return the name of the loaded project that defines node model *name*, if any."""
        for project_name, project in self._all_loaded_projects():
            if project.has_node_model(name):
                return project_name
        return None

    def find_project_name_from_deployment_model_name(self, name: str) -> str | None:
        """Return the name of the loaded project that defines deployment *name*, if any."""
        for project_name, project in self._all_loaded_projects():
            if project.has_deployment_model(name):
                return project_name
        return None

    def find_deployment_model_names_from_deployed_node_name(self, name: str) -> set[str]:
        """Return the names of the registered deployments that deploy a node called *name*."""
        deployments = dict(self.root_loader.loaded_deployment_models)
        deployments.update(self.loaded_deployment_models)
        return {
            deployment_name
            for deployment_name, deployment in deployments.items()
            if deployment.has_deployed_node(name)
        }

    # ---- types ----

    def resolve_type(self, type: Type | str) -> Type:
        """Return the type called *type* in the merged registry.

        Raises:
            TypeNotFound: If no loaded typekit knows the type.
        """
        if not self.is_root:
            return self.root_loader.resolve_type(type)
        return self.registry.get(_type_name(type))

    def interface_type(self, type: Type | str) -> bool:
        """Return True if *type* is exported for interface use by a loaded typekit."""
        if not self.is_root:
            return self.root_loader.interface_type(type)
        return self.resolve_type(type).name in self.interface_types

    def resolve_interface_type(self, type: Type | str) -> Type:
        """Return the type called *type*, checking that it can be used on interfaces.

        The void type is always accepted.

        Raises:
            TypeNotFound: If no loaded typekit knows the type.
            NotInterfaceType: If the type is known but never exported.
        """
        if not self.is_root:
            return self.root_loader.resolve_interface_type(type)
        resolved = self.resolve_type(type)
        if resolved.name == VOID_TYPE_NAME or resolved.name in self.interface_types:
            return resolved
        typekits = self.typekits_by_type_name.get(resolved.name, set())
        raise NotInterfaceType(resolved, typekits)

    def imported_typekits_for(self, type: Type | str, definition_typekits: bool = True) -> set[Typekit]:
        """Return the typekits that know *type*.

        Args:
            type: The type or its name.
            definition_typekits: Only return the typekits whose typelist
                includes the type, not those that merely import it.

        Raises:
            DefinitionTypekitNotFound: If no typekit knows the type, or none
                defines it and *definition_typekits* is True.
        """
        if not self.is_root:
            return self.root_loader.imported_typekits_for(type, definition_typekits=definition_typekits)
        type_name = _type_name(type)
        typekits = self.typekits_by_type_name.get(type_name)
        if not typekits:
            raise DefinitionTypekitNotFound(f"{type_name} is not defined by any typekits loaded so far")
        if not definition_typekits:
            return set(typekits)
        defining = {tk for tk in typekits if tk.include(type_name)}
        if not defining:
            names = ", ".join(sorted(tk.name for tk in typekits))
            raise DefinitionTypekitNotFound(
                f"typekits {names} have {type_name} in their registries, "
                "but it seems that all of them got it from another typekit"
            )
        return defining

    def register_type_model(self, registry: TypeRegistry, name: str) -> None:
        """Merge *name*, and the types it depends on, from *registry* into :attr:`registry`."""
        self.registry.merge(registry.minimal(name))

    # ################
    # Implementation
    # ################

    def _registered(self, name: str, attribute: str) -> object | None:
        model = getattr(self, attribute).get(name)
        if model is None and not self.is_root:
            model = getattr(self.root_loader, attribute).get(name)
        return model

    def _forget_orphan_models(self, known_nodes: set[str], known_deployments: set[str]) -> None:
        """Unregister the models added since the given snapshot that no registered project owns."""
        projects = [project for _, project in self._all_loaded_projects()]
        for loader in dict.fromkeys((self, self.root_loader)):
            for name in set(loader.loaded_node_models) - known_nodes:
                model = loader.loaded_node_models[name]
                if not any(project.node_models.get(name) is model for project in projects):
                    del loader.loaded_node_models[name]
            for name in set(loader.loaded_deployment_models) - known_deployments:
                model = loader.loaded_deployment_models[name]
                if not any(project.deployment_models.get(name) is model for project in projects):
                    del loader.loaded_deployment_models[name]

    def _all_loaded_projects(self) -> list[tuple[str, Project]]:
        projects = dict(self.loaded_projects)
        if not self.is_root:
            for project_name, project in self.root_loader.loaded_projects.items():
                projects.setdefault(project_name, project)
        return list(projects.items())


def _register(models: dict[str, object], model: object, kind: str, loader: Base) -> None:
    existing = models.get(model.name)
    if existing is model:
        return
    if existing is not None:
        raise AlreadyRegistered(f"there is already a {kind} called {model.name} registered on {loader!r}")
    models[model.name] = model


def _type_name(type: Type | str) -> str:
    return type if isinstance(type, str) else type.name
