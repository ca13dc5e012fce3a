"""
Exception types raised by nx-find.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from pathlib import Path


class NxFindError(Exception):
    """Base exception for nx-find errors."""


class WorkspaceNotFoundError(NxFindError):
    """No nx.json marker in the working directory or any ancestor."""

    def __init__(self, start: Path):
        super().__init__(f"Not an Nx workspace - no nx.json found above {start}")
        self.start = start


class ProjectNotFoundError(NxFindError, LookupError):
    """No project.json between a file and the workspace root."""

    def __init__(self, file_path: str):
        super().__init__(f"No project.json found for {file_path}")
        self.file_path = file_path


class NoMatchesError(NxFindError):
    """A search term matched zero test files."""

    def __init__(self, term: str):
        super().__init__(f"No test files found matching: {term}")
        self.term = term


class PickerCancelled(NxFindError):
    """The user interrupted the interactive picker."""
