"""
Runner - launch ``nx test`` in watch mode for one test file.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import posixpath
import subprocess
from pathlib import Path
from typing import List

from rich.console import Console
from rich.markup import escape

from .formatters import display_command
from .matching import strip_test_suffix
from .models import ProjectInfo

console = Console()


def jest_pattern(file_path: str, project: ProjectInfo) -> str:
    """Jest path pattern for a file: relative to the project's source root, suffix stripped.

    Example: ("libs/auth/src/login.test.ts", sourceRoot "libs/auth/src") -> "login"
    """
    relative = posixpath.relpath(Path(file_path).as_posix(), Path(project.source_root).as_posix())
    return strip_test_suffix(relative)


def build_nx_args(project: ProjectInfo, pattern: str) -> List[str]:
    """Arguments after the nx binary."""
    return [
        "test",
        project.name,
        "--watch",
        "--skip-nx-cache",
        f"--testPathPatterns={pattern}",
    ]


def run_test(file_path: str, project: ProjectInfo, repo_root: Path, nx_bin: Path) -> int:
    """Run the test in the foreground and return the child's exit code.

    stdin/stdout/stderr are inherited so watch mode stays interactive; the call
    blocks until the user ends the child.
    """
    args = build_nx_args(project, jest_pattern(file_path, project))
    console.print(f"\nProject:  [bold]{escape(project.name)}[/bold]", highlight=False)
    console.print(f"Running:  {display_command(args)}\n", highlight=False, markup=False)

    completed = subprocess.run([str(nx_bin), *args], cwd=str(repo_root))
    return completed.returncode
