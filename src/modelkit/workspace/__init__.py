# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for ModelKit."""

from modelkit.workspace.config import (
    DEFAULT_LOG_LEVEL,
    WORKSPACE_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    open_workspace,
)

__all__ = [
    "DEFAULT_LOG_LEVEL",
    "WORKSPACE_FILE_NAME",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "load_workspace_config",
    "open_workspace",
]
