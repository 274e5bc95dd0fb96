# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the ModelKit command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from modelkit.component.exceptions import ModelKitError
from modelkit.types import TypeRegistryError
from modelkit.workspace.config import (
    DEFAULT_LOG_LEVEL,
    WORKSPACE_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    open_workspace,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the ModelKit CLI."""
    parser = argparse.ArgumentParser(
        prog="modelkit",
        description="ModelKit: component interface models and their resolution",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debugging information about model resolution",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new ModelKit workspace",
        description="Create a default workspace configuration file.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the workspace in (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Load every project of the workspace",
        description="Load all available projects and report the models that fail to load.",
    )
    check_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the ModelKit workspace (default: current directory)",
    )

    # show subcommand
    show_parser = subparsers.add_parser(
        "show",
        help="Print the interface of a node model",
        description="Resolve a node model by name and print its full interface.",
    )
    show_parser.add_argument("node_model", metavar="NODE_MODEL", help="Name of the node model")
    show_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the ModelKit workspace (default: current directory)",
    )
    show_parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml)",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "show":
        return _cmd_show(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    workspace_file = directory / WORKSPACE_FILE_NAME

    if workspace_file.exists():
        print(
            f"Error: workspace already exists at '{workspace_file}'.",
            file=sys.stderr,
        )
        return 1

    workspace_content = (
        "# ModelKit Workspace Configuration\n"
        "# Directories searched for <name>.project.yaml and <name>.typekit.yaml files.\n"
        "model-paths:\n"
        "  - .\n"
        f"log-level: {DEFAULT_LOG_LEVEL}\n"
    )
    workspace_file.write_text(workspace_content, encoding="utf-8")
    print(f"Initialized ModelKit workspace at '{workspace_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    _configure_logging(args, config)

    loader = open_workspace(directory, config)
    project_names = list(loader.each_available_project_name())
    if not project_names:
        print("No project files found in the workspace.")
        return 0

    print(f"Checking {len(project_names)} project(s)...")
    has_errors = False
    for name in project_names:
        try:
            project = loader.project_model_from_name(name)
        except (ModelKitError, TypeRegistryError) as exc:
            print(f"Error: {name}: {exc}", file=sys.stderr)
            has_errors = True
            continue
        print(
            f"  {name}: {len(project.node_models)} node model(s), "
            f"{len(project.deployment_models)} deployment(s)"
        )

    if has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    """Handle the show subcommand."""
    directory = Path(args.directory).resolve()
    config = _load_config(directory)
    if config is None:
        return 1
    _configure_logging(args, config)

    loader = open_workspace(directory, config)
    try:
        model = loader.node_model_from_name(args.node_model)
        data = model.to_dict()
    except (ModelKitError, TypeRegistryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    return 0


def _load_config(directory: Path) -> WorkspaceConfig | None:
    """Load the workspace configuration, reporting errors on stderr."""
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    workspace_file = directory / WORKSPACE_FILE_NAME
    if not workspace_file.exists():
        print(
            f"Error: no ModelKit workspace found at '{directory}'. Run 'modelkit init' to initialize a workspace.",
            file=sys.stderr,
        )
        return None

    try:
        return load_workspace_config(workspace_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _configure_logging(args: argparse.Namespace, config: WorkspaceConfig) -> None:
    level = logging.DEBUG if args.verbose else logging.getLevelName(config.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
