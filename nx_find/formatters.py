"""
Text formatting for the picker and the run summary.

Picker text is built as prompt_toolkit style fragments so the active row can be
restyled without re-parsing escape codes.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import re
import shlex
from typing import List, Sequence

from prompt_toolkit.styles import Style

from .models import Fragment

HEADER_PATTERN_MODE = "Pattern Mode Usage"
BROWSE_HINT = "Start typing to filter by a filename regex pattern."
FAREWELL = "Exited nx-find"

PICKER_STYLE = Style.from_dict(
    {
        "header": "ansiyellow bold",
        "usage": "",
        "key": "bold",
        "prompt": "bold ansigreen",
        "query": "",
        "pointer": "ansicyan bold",
        "path": "ansibrightblack",
        "path.active": "ansicyan",
        "match": "ansiwhite bold",
        "description": "ansibrightblack italic",
        "empty": "ansired",
    }
)


def banner_text(term: str, count: int) -> str:
    """Header shown when a term matched several files."""
    return f'Found {count} matches for "{term}" - please pick one'


def usage_fragments() -> List[Fragment]:
    """Key help shown under the header."""
    return [
        ("class:usage", "  › Press "),
        ("class:key", "Enter"),
        ("class:usage", " to run the selected test.\n"),
        ("class:usage", "  › Press "),
        ("class:key", "Ctrl+C"),
        ("class:usage", " to quit."),
    ]


def highlight_match(text: str, term: str) -> List[Fragment]:
    """Split ``text`` around the first case-insensitive occurrence of ``term``.

    The matched segment gets ``class:match``, the rest ``class:path``. Without a
    term or an occurrence the whole text is a single ``class:path`` fragment.
    """
    if not term:
        return [("class:path", text)]
    found = re.search(re.escape(term), text, re.IGNORECASE)
    if found is None:
        return [("class:path", text)]
    index, end = found.span()
    fragments = [
        ("class:path", text[:index]),
        ("class:match", text[index:end]),
        ("class:path", text[end:]),
    ]
    return [(style, part) for style, part in fragments if part]


def activate(fragments: Sequence[Fragment]) -> List[Fragment]:
    """Restyle a row for the cursor position: grey path segments turn cyan."""
    return [("class:path.active" if style == "class:path" else style, text) for style, text in fragments]


def display_command(args: Sequence[str]) -> str:
    """Shell-quoted command line with the nx binary shown as plain ``nx``."""
    return shlex.join(["nx", *args])
