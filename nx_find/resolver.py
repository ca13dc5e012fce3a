"""
Project resolution - map a test file to the Nx project that owns it.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
from pathlib import Path
from typing import Dict

from .exceptions import ProjectNotFoundError
from .models import ProjectInfo

#: Per-project descriptor file name.
PROJECT_DESCRIPTOR = "project.json"


class ProjectResolver:
    """Find and memoize the owning project of workspace files.

    One instance per invocation. Two caches, both append-only:

    - ``_file_cache``: requested file path -> ProjectInfo (skips the walk entirely)
    - ``_descriptor_cache``: project.json path -> ProjectInfo (skips re-parsing for siblings)

    The descriptor files are assumed not to change while the process runs.
    """

    def __init__(self, repo_root: Path):
        """Initialize resolver for a workspace root."""
        self.repo_root = Path(repo_root).resolve()
        self._file_cache: Dict[str, ProjectInfo] = {}
        self._descriptor_cache: Dict[Path, ProjectInfo] = {}

    def resolve(self, file_path: str) -> ProjectInfo:
        """Return the project for ``file_path``, using the per-file cache."""
        cached = self._file_cache.get(file_path)
        if cached is not None:
            return cached
        project = self.find(file_path)
        self._file_cache[file_path] = project
        return project

    def find(self, file_path: str) -> ProjectInfo:
        """Walk up from the file's directory to the nearest project.json.

        Consults the descriptor cache at each step before touching the file system.

        Raises:
            ProjectNotFoundError: If the walk passes above the workspace root.
        """
        root_len = len(str(self.repo_root))
        current = (self.repo_root / file_path).parent.resolve()
        while len(str(current)) >= root_len:
            descriptor = current / PROJECT_DESCRIPTOR
            cached = self._descriptor_cache.get(descriptor)
            if cached is not None:
                return cached
            if descriptor.exists():
                project = self._load(descriptor)
                self._descriptor_cache[descriptor] = project
                return project
            if current.parent == current:
                break
            current = current.parent
        raise ProjectNotFoundError(file_path)

    def _load(self, descriptor: Path) -> ProjectInfo:
        """Parse a project.json; malformed JSON propagates."""
        data = json.loads(descriptor.read_text(encoding="utf-8"))
        default_root = descriptor.parent.relative_to(self.repo_root).as_posix()
        return ProjectInfo.from_dict(data, default_source_root=default_root)
