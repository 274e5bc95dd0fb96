# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""A loader reading project and typekit documents from directories."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from modelkit.component.exceptions import ModelTextError, ProjectNotFound, TypekitNotFound
from modelkit.component.loaders.base import Base
from modelkit.component.text import ProjectSchema, load_project_schema

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

PROJECT_SUFFIX = ".project.yaml"
TYPEKIT_SUFFIX = ".typekit.yaml"


class FilesLoader(Base):
    """Load ``<name>.project.yaml`` and ``<name>.typekit.yaml`` files.

    Directories are searched in order and the first one holding the file wins.

    Attributes:
        search_paths: The directories to search.
    """

    def __init__(self, search_paths: Iterable[Path | str], root_loader: Base | None = None) -> None:
        self.search_paths = [Path(p) for p in search_paths]
        super().__init__(root_loader)

    def __repr__(self) -> str:
        return f"<FilesLoader {', '.join(str(p) for p in self.search_paths)}>"

    def project_model_text_from_name(self, name: str) -> tuple[str, str | None]:
        path = self.find_project_file(name)
        if path is None:
            raise ProjectNotFound(f"cannot find {name}{PROJECT_SUFFIX} in {self._search_label()}")
        return _read(path), str(path)

    def typekit_model_text_from_name(self, name: str) -> tuple[str, str | None]:
        path = self.find_typekit_file(name)
        if path is None:
            raise TypekitNotFound(f"cannot find {name}{TYPEKIT_SUFFIX} in {self._search_label()}")
        return _read(path), str(path)

    def find_project_file(self, name: str) -> Path | None:
        return self._find_file(name + PROJECT_SUFFIX)

    def find_typekit_file(self, name: str) -> Path | None:
        return self._find_file(name + TYPEKIT_SUFFIX)

    def project_available(self, name: str) -> bool:
        return super().project_available(name) or self.find_project_file(name) is not None

    def typekit_available(self, name: str) -> bool:
        return super().typekit_available(name) or self.find_typekit_file(name) is not None

    def each_available_project_name(self) -> Iterator[str]:
        """Enumerate the names of the project files, in search order, each name once."""
        seen: set[str] = set()
        for directory in self.search_paths:
            if not directory.is_dir():
                continue
            for path in sorted(directory.glob("*" + PROJECT_SUFFIX)):
                name = path.name[: -len(PROJECT_SUFFIX)]
                if name not in seen:
                    seen.add(name)
                    yield name

    def find_project_name_from_node_model_name(self, name: str) -> str | None:
        """Return the loaded or available project that declares node model *name*.

        Project files are only validated, not evaluated, to find the model.
        """
        project_name = super().find_project_name_from_node_model_name(name)
        if project_name is not None:
            return project_name
        for candidate in self.each_available_project_name():
            schema = self._available_schema(candidate)
            if schema is not None and any(node.name == name for node in schema.nodes):
                return candidate
        return None

    def find_project_name_from_deployment_model_name(self, name: str) -> str | None:
        """Return the loaded or available project that declares deployment *name*."""
        project_name = super().find_project_name_from_deployment_model_name(name)
        if project_name is not None:
            return project_name
        for candidate in self.each_available_project_name():
            schema = self._available_schema(candidate)
            if schema is not None and any(deployment.name == name for deployment in schema.deployments):
                return candidate
        return None

    def find_deployment_model_names_from_deployed_node_name(self, name: str) -> set[str]:
        """Return the registered or available deployments that deploy a node called *name*."""
        deployment_names = super().find_deployment_model_names_from_deployed_node_name(name)
        for candidate in self.each_available_project_name():
            schema = self._available_schema(candidate)
            if schema is None:
                continue
            for deployment in schema.deployments:
                if any(node.name == name for node in deployment.nodes):
                    deployment_names.add(deployment.name)
        return deployment_names

    # ################
    # Implementation
    # ################

    def _find_file(self, filename: str) -> Path | None:
        for directory in self.search_paths:
            path = directory / filename
            if path.is_file():
                return path
        return None

    def _search_label(self) -> str:
        return ", ".join(str(p) for p in self.search_paths) or "no directories"

    def _available_schema(self, name: str) -> ProjectSchema | None:
        path = self.find_project_file(name)
        if path is None:
            return None
        try:
            return load_project_schema(_read(path), origin=str(path))
        except ModelTextError as exc:
            logger.warning("ignoring %s while searching for models: %s", path, exc)
            return None


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelTextError(f"Cannot read {path}: {exc}") from exc
