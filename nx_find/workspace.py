"""
Workspace discovery - repository root, nx binary and test file listing.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from .exceptions import WorkspaceNotFoundError

#: File whose presence marks the Nx workspace root.
WORKSPACE_MARKER = "nx.json"

#: Path fragments that exclude a test file (end-to-end suites nx-find cannot watch).
DEFAULT_EXCLUDED_PATHS: List[str] = ["cypress", "acceptance-tests"]

#: Git pathspecs for Jest test files.
TEST_FILE_GLOBS: List[str] = [
    "**/*.test.ts",
    "**/*.test.tsx",
    "**/*.test.js",
    "**/*.test.jsx",
]


def find_repo_root(start: Optional[Path] = None) -> Path:
    """Return the closest directory at or above ``start`` containing nx.json.

    Args:
        start: Directory to begin at (default: current working directory).

    Raises:
        WorkspaceNotFoundError: If no ancestor, including the filesystem root, has the marker.
    """
    start = Path(start) if start is not None else Path.cwd()
    current = start.resolve()
    for directory in (current, *current.parents):
        if (directory / WORKSPACE_MARKER).exists():
            return directory
    raise WorkspaceNotFoundError(start)


def get_nx_bin(repo_root: Path, override: Optional[str] = None) -> Path:
    """Path to the workspace-local nx executable.

    ``override`` (from config) may be absolute or relative to the workspace root.
    """
    if override:
        return Path(repo_root) / Path(override).expanduser()
    return Path(repo_root) / "node_modules" / ".bin" / "nx"


def list_test_files(repo_root: Path, exclude_paths: Optional[Iterable[str]] = None) -> List[str]:
    """List test files known to git, tracked or untracked-but-not-ignored.

    Paths are relative to ``repo_root`` in git's listing order. A failing git call
    raises ``subprocess.CalledProcessError``.
    """
    excluded = list(DEFAULT_EXCLUDED_PATHS if exclude_paths is None else exclude_paths)
    result = subprocess.run(
        ["git", "ls-files", "--cached", "--others", "--exclude-standard", *TEST_FILE_GLOBS],
        cwd=str(repo_root),
        capture_output=True,
        text=True,
        check=True,
    )
    return [
        line
        for line in result.stdout.strip().splitlines()
        if line and not any(fragment in line for fragment in excluded)
    ]
