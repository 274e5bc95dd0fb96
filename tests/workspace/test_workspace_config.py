# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the workspace configuration module."""

from pathlib import Path

import pytest

from modelkit.component.loaders import FilesLoader
from modelkit.workspace import (
    WORKSPACE_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    open_workspace,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a workspace config file and return its path."""
    config_file = tmp_path / WORKSPACE_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    """An empty file selects the default configuration."""
    config = load_workspace_config(_write_config(tmp_path, ""))
    assert config == WorkspaceConfig(model_paths=["."], log_level="WARNING")


def test_full_config(tmp_path: Path) -> None:
    """Every field is read, and the log level is normalised to upper case."""
    content = """\
model-paths:
  - models
  - vendor/models
log-level: debug
"""
    config = load_workspace_config(_write_config(tmp_path, content))
    assert config.model_paths == ["models", "vendor/models"]
    assert config.log_level == "DEBUG"


def test_open_workspace_creates_one_loader_per_path(tmp_path: Path) -> None:
    """open_workspace builds one files loader per model path."""
    _write_config(tmp_path, "model-paths: [a, b]\n")
    loader = open_workspace(tmp_path)
    assert all(isinstance(child, FilesLoader) for child in loader.loaders)
    assert [child.search_paths for child in loader.loaders] == [
        [(tmp_path / "a").resolve()],
        [(tmp_path / "b").resolve()],
    ]
    assert all(child.root_loader is loader for child in loader.loaders)


def test_open_workspace_with_explicit_config(tmp_path: Path) -> None:
    """open_workspace uses a given configuration instead of reading the file."""
    loader = open_workspace(tmp_path, WorkspaceConfig())
    assert len(loader.loaders) == 1


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    """A missing configuration file raises WorkspaceConfigError."""
    with pytest.raises(WorkspaceConfigError, match="not found"):
        load_workspace_config(tmp_path / WORKSPACE_FILE_NAME)


def test_invalid_yaml(tmp_path: Path) -> None:
    """Invalid YAML raises WorkspaceConfigError."""
    with pytest.raises(WorkspaceConfigError, match="Invalid YAML"):
        load_workspace_config(_write_config(tmp_path, "model-paths: [\n"))


def test_not_a_mapping(tmp_path: Path) -> None:
    """A configuration that is not a mapping is rejected."""
    with pytest.raises(WorkspaceConfigError, match="mapping"):
        load_workspace_config(_write_config(tmp_path, "- a\n"))


def test_model_paths_must_be_strings(tmp_path: Path) -> None:
    """model-paths entries must be strings."""
    with pytest.raises(WorkspaceConfigError, match="model-paths"):
        load_workspace_config(_write_config(tmp_path, "model-paths: [1, 2]\n"))


def test_model_paths_must_not_be_empty(tmp_path: Path) -> None:
    """model-paths must not be empty."""
    with pytest.raises(WorkspaceConfigError, match="empty"):
        load_workspace_config(_write_config(tmp_path, "model-paths: []\n"))


def test_unknown_log_level(tmp_path: Path) -> None:
    """Unknown logging levels are rejected."""
    with pytest.raises(WorkspaceConfigError, match="logging level"):
        load_workspace_config(_write_config(tmp_path, "log-level: chatty\n"))


def test_unknown_fields(tmp_path: Path) -> None:
    """Unknown fields are rejected and named in the error."""
    with pytest.raises(WorkspaceConfigError, match="build-directory"):
        load_workspace_config(_write_config(tmp_path, "build-directory: build\n"))


def test_open_workspace_without_config(tmp_path: Path) -> None:
    """open_workspace fails when the directory has no configuration file."""
    with pytest.raises(WorkspaceConfigError):
        open_workspace(tmp_path)
