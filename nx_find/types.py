"""
Type protocols for the seams between lookup components.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from typing import Callable, List, Protocol, runtime_checkable

from .models import ProjectInfo


@runtime_checkable
class ProjectLookup(Protocol):
    """Anything that maps a workspace file path to its project."""

    def resolve(self, file_path: str) -> ProjectInfo:
        """Return the owning project, raising ProjectNotFoundError if there is none."""
        ...


#: Deferred producer of the workspace test file list.
FileSource = Callable[[], List[str]]
