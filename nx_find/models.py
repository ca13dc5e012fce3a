"""
Data models for test lookup - projects, matches and picker rows.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class OutcomeKind(str, Enum):
    """How the match engine arrived at its candidates."""

    DIRECT = "direct"
    FILTERED = "filtered"
    BROWSE = "browse"


@dataclass(frozen=True)
class ProjectInfo:
    """Immutable identity of an Nx project.

    Attributes:
        name: Project name from project.json (e.g., "auth")
        source_root: Source root relative to the workspace root (e.g., "libs/auth/src")
    """

    name: str
    source_root: str

    @classmethod
    def from_dict(cls, data: dict, default_source_root: str = "") -> "ProjectInfo":
        """Build from parsed project.json content.

        ``name`` is required; ``sourceRoot`` falls back to ``default_source_root``.
        """
        return cls(name=data["name"], source_root=data.get("sourceRoot") or default_source_root)


@dataclass(frozen=True)
class Match:
    """A candidate test file paired with its owning project."""

    file_path: str
    project: ProjectInfo


@dataclass
class MatchOutcome:
    """Result of matching a user term against the workspace test files.

    ``matches`` is empty for BROWSE (the picker gets the full list) and holds
    exactly one entry for DIRECT.
    """

    kind: OutcomeKind
    term: Optional[str] = None
    matches: List[Match] = field(default_factory=list)

    @property
    def is_single(self) -> bool:
        """True when exactly one file should be run without asking."""
        return self.kind != OutcomeKind.BROWSE and len(self.matches) == 1

    @property
    def count(self) -> int:
        """Number of candidate files."""
        return len(self.matches)


#: A run of styled text: (prompt_toolkit style string, text)
Fragment = Tuple[str, str]


@dataclass
class Choice:
    """One selectable row in the picker."""

    value: str
    label: List[Fragment]
    description: str = ""

    @property
    def plain_label(self) -> str:
        """Label text without styling."""
        return "".join(text for _style, text in self.label)
