# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the ModelKit workspace configuration file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from modelkit.component.loaders import Aggregate, FilesLoader

# ###############
# Public Interface
# ###############

WORKSPACE_FILE_NAME = ".modelkit-workspace.yaml"

DEFAULT_LOG_LEVEL = "WARNING"


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a ModelKit workspace.

    Attributes:
        model_paths: Directories (relative to the workspace root) searched for
            project and typekit files, in order.
        log_level: Name of the logging level used by the command-line tools.
    """

    model_paths: list[str] = field(default_factory=lambda: ["."])
    log_level: str = DEFAULT_LOG_LEVEL


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a ModelKit workspace configuration file.

    Args:
        path: Path to the `.modelkit-workspace.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return _parse_workspace_config(text, source_label=str(path))


def open_workspace(directory: Path, config: WorkspaceConfig | None = None) -> Aggregate:
    """Create the loader resolving the models of the workspace rooted at *directory*.

    Each model path gets its own files loader, queried in configuration order.

    Args:
        directory: The workspace root.
        config: The workspace configuration; read from *directory* if omitted.

    Raises:
        WorkspaceConfigError: If *config* is omitted and the configuration
            file is invalid or missing.
    """
    if config is None:
        config = load_workspace_config(directory / WORKSPACE_FILE_NAME)
    loader = Aggregate()
    for model_path in config.model_paths:
        FilesLoader([(directory / model_path).resolve()], root_loader=loader)
    return loader


# ################
# Implementation
# ################


def _parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A WorkspaceConfig instance.

    Raises:
        WorkspaceConfigError: If the YAML is invalid or fields have the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    # An empty file selects every default.
    if data is None:
        return WorkspaceConfig()
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    unknown = sorted(set(data) - {"model-paths", "log-level"})
    if unknown:
        raise WorkspaceConfigError(f"{source_label}: unknown field(s) {', '.join(map(str, unknown))}")

    config = WorkspaceConfig()
    if "model-paths" in data:
        raw_paths = data["model-paths"]
        if not isinstance(raw_paths, list) or not all(isinstance(p, str) for p in raw_paths):
            raise WorkspaceConfigError(f"{source_label}: 'model-paths' must be a list of strings")
        if not raw_paths:
            raise WorkspaceConfigError(f"{source_label}: 'model-paths' must not be empty")
        config.model_paths = list(raw_paths)
    if "log-level" in data:
        config.log_level = _require_log_level(data, "log-level", source_label)
    return config


def _require_log_level(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a logging level name from a mapping, raising WorkspaceConfigError if invalid."""
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    level = value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise WorkspaceConfigError(f"{source_label}: '{key}' is not a logging level: {value}")
    return level
