"""
nx-find - find Jest test files in an Nx workspace and run one in watch mode.

A small library with a thin CLI layer: locate the workspace root, list test
files known to git, narrow them down by name, and hand the chosen file to
``nx test --watch``.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0

Example usage as library:
    from nx_find import MatchEngine, ProjectResolver, find_repo_root, list_test_files

    root = find_repo_root()
    resolver = ProjectResolver(root)
    engine = MatchEngine(root, resolver, lambda: list_test_files(root))
    outcome = engine.match("login")
"""

try:
    from importlib.metadata import version
    __version__ = version("nx-find")
except Exception:
    __version__ = "1.0.0"

__author__ = "Andrew Hundt"

from .exceptions import (
    NoMatchesError,
    NxFindError,
    PickerCancelled,
    ProjectNotFoundError,
    WorkspaceNotFoundError,
)
from .matching import MatchEngine, base_name, build_filter_regex, is_relative_path, strip_test_suffix
from .models import Choice, Match, MatchOutcome, OutcomeKind, ProjectInfo
from .picker import FilePicker, PickerPhase, PickerState, pick_test_file
from .resolver import ProjectResolver
from .runner import build_nx_args, jest_pattern, run_test
from .types import FileSource, ProjectLookup
from .workspace import find_repo_root, get_nx_bin, list_test_files

__all__ = [
    "Choice",
    "FilePicker",
    "FileSource",
    "Match",
    "MatchEngine",
    "MatchOutcome",
    "NoMatchesError",
    "NxFindError",
    "OutcomeKind",
    "PickerCancelled",
    "PickerPhase",
    "PickerState",
    "ProjectInfo",
    "ProjectLookup",
    "ProjectNotFoundError",
    "ProjectResolver",
    "WorkspaceNotFoundError",
    "base_name",
    "build_filter_regex",
    "build_nx_args",
    "find_repo_root",
    "get_nx_bin",
    "is_relative_path",
    "jest_pattern",
    "list_test_files",
    "pick_test_file",
    "run_test",
    "strip_test_suffix",
]
