"""
Match engine - turn a user term into candidate test files.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import os
import re
from pathlib import Path
from typing import List, Optional

from .exceptions import NoMatchesError
from .models import Match, MatchOutcome, OutcomeKind
from .types import FileSource, ProjectLookup

#: Trailing ".test.ts", ".ts", ".test.jsx", ... on a file name.
TEST_SUFFIX_RE = re.compile(r"\.(test\.)?[jt]sx?$", re.IGNORECASE)

#: Input that already names a full test file (e.g. "login.test.ts").
_HAS_TEST_EXT_RE = re.compile(r"\.test\.[jt]sx?$", re.IGNORECASE)


def strip_test_suffix(name: str) -> str:
    """Drop a trailing test/extension suffix: "login.test.ts" -> "login"."""
    return TEST_SUFFIX_RE.sub("", name)


def base_name(term: str) -> str:
    """Base component name of a term: path, ".test" and extension removed."""
    return strip_test_suffix(os.path.basename(term))


def build_filter_regex(term: str) -> re.Pattern:
    """Case-insensitive regex selecting test files for ``term``.

    The base name is escaped and anchored at the start of a path component.
    If ``term`` carries a test extension the file name must match exactly,
    otherwise any file name starting with the base name matches.

    Examples:
        build_filter_regex("foo")          # foo.test.ts, fooBar.test.tsx; not barfoo.test.ts
        build_filter_regex("foo.test.ts")  # foo.test.ts, foo.test.jsx; not fooBar.test.ts
    """
    safe = re.escape(base_name(term))
    if _HAS_TEST_EXT_RE.search(term):
        pattern = rf"(?:^|/){safe}\.test\.[jt]sx?$"
    else:
        pattern = rf"(?:^|/){safe}[^/]*\.test\.[jt]sx?$"
    return re.compile(pattern, re.IGNORECASE)


def is_relative_path(term: Optional[str], repo_root: Path) -> bool:
    """True if ``term`` contains a path separator and exists under ``repo_root``."""
    if not term:
        return False
    if "/" not in term and os.sep not in term:
        return False
    return (Path(repo_root) / term).exists()


class MatchEngine:
    """Compute the candidate test files for a search term."""

    def __init__(self, repo_root: Path, resolver: ProjectLookup, files: FileSource):
        """Initialize engine.

        Args:
            repo_root: Workspace root directory.
            resolver: Project lookup shared with the picker and runner.
            files: Callable returning the workspace test file list; called at most once.
        """
        self.repo_root = Path(repo_root)
        self.resolver = resolver
        self._files = files
        self._all_files: Optional[List[str]] = None

    @property
    def all_files(self) -> List[str]:
        """Enumerated test files, listed once per engine."""
        if self._all_files is None:
            self._all_files = self._files()
        return self._all_files

    def match(self, term: Optional[str]) -> MatchOutcome:
        """Match ``term`` against the workspace.

        Returns:
            DIRECT outcome for an existing relative path, BROWSE for an empty term,
            FILTERED with one or more matches otherwise.

        Raises:
            NoMatchesError: If filtering leaves no files.
        """
        if not term:
            return MatchOutcome(kind=OutcomeKind.BROWSE)

        if is_relative_path(term, self.repo_root):
            match = Match(file_path=term, project=self.resolver.resolve(term))
            return MatchOutcome(kind=OutcomeKind.DIRECT, term=term, matches=[match])

        found = self.filter(term)
        if not found:
            raise NoMatchesError(term)
        matches = [Match(file_path=f, project=self.resolver.resolve(f)) for f in found]
        return MatchOutcome(kind=OutcomeKind.FILTERED, term=term, matches=matches)

    def filter(self, term: str) -> List[str]:
        """Files whose name matches ``build_filter_regex(term)``, in listing order."""
        regex = build_filter_regex(term)
        return [f for f in self.all_files if regex.search(f)]
