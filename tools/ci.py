#!/usr/bin/env python3
# Copyright 2026 ModelKit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, and build."""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=modelkit", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Run the CI steps named in *argv* (all of them by default) and report results."""
    selected = _select_steps(argv if argv is not None else sys.argv[1:])
    if selected is None:
        return 2

    results = [_run_step(name, cmd) for name, cmd in selected]

    _print_banner("Summary")
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))

    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _select_steps(names: list[str]) -> list[tuple[str, list[str]]] | None:
    if not names:
        return list(STEPS)
    known = {name.lower(): (name, cmd) for name, cmd in STEPS}
    unknown = [name for name in names if name.lower() not in known]
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(unknown)}"), file=sys.stderr)
        print(f"Available steps: {', '.join(name for name, _ in STEPS)}", file=sys.stderr)
        return None
    return [known[name.lower()] for name in names]


def _run_step(name: str, cmd: list[str]) -> tuple[str, bool, float]:
    _print_banner(name)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=_repo_root())
    return name, proc.returncode == 0, time.monotonic() - start


def _print_banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
