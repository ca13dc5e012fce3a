"""
Interactive picker - incrementally filtered, single-selection list of test files.

``PickerState`` holds the query-driven state machine and produces the rows;
``FilePicker`` wraps it in a prompt_toolkit application that owns the terminal.

States::

    awaiting-seed --(query == seed)--> filtering --(Enter)--> selected
                                           \\--(Ctrl+C)--> cancelled

awaiting-seed only exists when the picker opens with a seed term. The seed is
the query buffer's initial text, so it is in place before any key is read.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

from enum import Enum
from typing import Any, List, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl

from .exceptions import PickerCancelled
from .formatters import (
    BROWSE_HINT,
    HEADER_PATTERN_MODE,
    PICKER_STYLE,
    activate,
    banner_text,
    highlight_match,
    usage_fragments,
)
from .models import Choice, Fragment
from .types import ProjectLookup

DEFAULT_BROWSE_LIMIT = 20
DEFAULT_RESULT_LIMIT = 50
DEFAULT_PAGE_SIZE = 10


class PickerPhase(str, Enum):
    """Lifecycle of one picker session."""

    AWAITING_SEED = "awaiting-seed"
    FILTERING = "filtering"
    SELECTED = "selected"
    CANCELLED = "cancelled"


class PickerState:
    """Query-driven picker state, independent of the terminal."""

    def __init__(
        self,
        files: List[str],
        resolver: ProjectLookup,
        initial_term: Optional[str] = None,
        match_count: Optional[int] = None,
        browse_limit: int = DEFAULT_BROWSE_LIMIT,
        result_limit: int = DEFAULT_RESULT_LIMIT,
    ):
        """Initialize state.

        Args:
            files: Full test file list in enumeration order.
            resolver: Project lookup used to describe filtered rows.
            initial_term: Seed query, pre-filled in the input box.
            match_count: Number of matches ``initial_term`` produced; with a term
                it shows the "Found N matches" banner.
            browse_limit: Rows shown for an empty query.
            result_limit: Maximum rows shown for a non-empty query.
        """
        self.files = files
        self.resolver = resolver
        self.initial_term = initial_term or ""
        self.match_count = match_count
        self.browse_limit = browse_limit
        self.result_limit = result_limit
        self.banner_visible = bool(match_count and initial_term)
        self.phase = PickerPhase.AWAITING_SEED if self.initial_term else PickerPhase.FILTERING
        self.selected: Optional[str] = None

    @property
    def header(self) -> str:
        """Title line: the match banner until the seed is edited, then the default header."""
        if self.banner_visible:
            return banner_text(self.initial_term, self.match_count)
        return HEADER_PATTERN_MODE

    def on_query(self, term: str) -> List[Choice]:
        """Advance the state machine for a new query and return the rows to show."""
        if self.phase == PickerPhase.AWAITING_SEED:
            if term == self.initial_term:
                self.phase = PickerPhase.FILTERING
        elif self.banner_visible and term != self.initial_term:
            self.banner_visible = False
        return self.source(term)

    def source(self, term: str) -> List[Choice]:
        """Rows for ``term``.

        Empty term: the first ``browse_limit`` files with a typing hint.
        Otherwise: case-insensitive substring matches, capped at ``result_limit``,
        highlighted and described with their project name.
        """
        if not term:
            return [
                Choice(value=f, label=[("class:path", f)], description=BROWSE_HINT)
                for f in self.files[: self.browse_limit]
            ]

        lower_term = term.lower()
        filtered = [f for f in self.files if lower_term in f.lower()]
        return [
            Choice(
                value=f,
                label=highlight_match(f, term),
                description=self.resolver.resolve(f).name,
            )
            for f in filtered[: self.result_limit]
        ]

    def select(self, value: str) -> None:
        self.phase = PickerPhase.SELECTED
        self.selected = value

    def cancel(self) -> None:
        self.phase = PickerPhase.CANCELLED


class FilePicker:
    """prompt_toolkit front end for a ``PickerState``."""

    def __init__(
        self,
        state: PickerState,
        page_size: int = DEFAULT_PAGE_SIZE,
        input: Any = None,
        output: Any = None,
    ):
        """Build the layout and key bindings.

        ``input``/``output`` default to the terminal; tests pass a pipe input
        and ``DummyOutput``.
        """
        self.state = state
        self.page_size = max(1, page_size)
        self.cursor = 0
        self.offset = 0

        seed = state.initial_term
        self.buffer = Buffer(
            document=Document(seed, cursor_position=len(seed)),
            multiline=False,
            on_text_changed=self._on_text_changed,
        )
        self.choices: List[Choice] = state.on_query(self.buffer.text)

        query_window = Window(BufferControl(buffer=self.buffer), height=1)
        container = HSplit(
            [
                Window(FormattedTextControl(self._header_fragments), height=1),
                Window(FormattedTextControl(usage_fragments()), height=2),
                Window(height=1),
                VSplit(
                    [
                        Window(
                            FormattedTextControl([("class:prompt", "? "), ("bold", "pattern ")]),
                            dont_extend_width=True,
                        ),
                        query_window,
                    ]
                ),
                Window(FormattedTextControl(self._list_fragments), dont_extend_height=True),
                Window(FormattedTextControl(self._description_fragments), height=1),
            ]
        )

        self.app: Application = Application(
            layout=Layout(container, focused_element=query_window),
            key_bindings=self._key_bindings(),
            style=PICKER_STYLE,
            full_screen=False,
            input=input,
            output=output,
        )

    @property
    def current(self) -> Optional[Choice]:
        """Row under the cursor, None when the list is empty."""
        if not self.choices:
            return None
        return self.choices[self.cursor]

    def run(self) -> str:
        """Block until the user picks a file.

        Raises:
            PickerCancelled: On Ctrl+C.
        """
        try:
            return self.app.run()
        except KeyboardInterrupt:
            self.state.cancel()
            raise PickerCancelled() from None

    def move(self, step: int) -> None:
        """Move the cursor, wrapping at both ends and scrolling the page."""
        if not self.choices:
            return
        self.cursor = (self.cursor + step) % len(self.choices)
        if self.cursor < self.offset:
            self.offset = self.cursor
        elif self.cursor >= self.offset + self.page_size:
            self.offset = self.cursor - self.page_size + 1

    def _on_text_changed(self, buffer: Buffer) -> None:
        try:
            self.choices = self.state.on_query(buffer.text)
        except Exception as exc:
            # the event loop swallows callback errors; re-raise them from app.run()
            if not self.app.is_running:
                raise
            if not self.app.is_done:
                self.app.exit(exception=exc)
            return
        self.cursor = 0
        self.offset = 0

    def _key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        @kb.add("c-p")
        def _up(event) -> None:
            self.move(-1)

        @kb.add("down")
        @kb.add("c-n")
        def _down(event) -> None:
            self.move(1)

        @kb.add("enter")
        def _accept(event) -> None:
            choice = self.current
            if choice is None or event.app.is_done:
                return
            self.state.select(choice.value)
            event.app.exit(result=choice.value)

        @kb.add("c-c")
        def _cancel(event) -> None:
            event.app.exit(exception=KeyboardInterrupt())

        return kb

    def _header_fragments(self) -> List[Fragment]:
        return [("class:header", self.state.header)]

    def _list_fragments(self) -> List[Fragment]:
        if not self.choices:
            return [("class:empty", "  No results")]
        fragments: List[Fragment] = []
        visible = self.choices[self.offset : self.offset + self.page_size]
        for index, choice in enumerate(visible, start=self.offset):
            if fragments:
                fragments.append(("", "\n"))
            if index == self.cursor:
                fragments.append(("class:pointer", "❯ "))
                fragments.extend(activate(choice.label))
            else:
                fragments.append(("", "  "))
                fragments.extend(choice.label)
        return fragments

    def _description_fragments(self) -> List[Fragment]:
        choice = self.current
        if choice is None or not choice.description:
            return []
        return [("class:description", choice.description)]


def pick_test_file(
    files: List[str],
    resolver: ProjectLookup,
    initial_term: Optional[str] = None,
    match_count: Optional[int] = None,
    browse_limit: int = DEFAULT_BROWSE_LIMIT,
    result_limit: int = DEFAULT_RESULT_LIMIT,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> str:
    """Show the picker on the terminal and return the chosen file path.

    Raises:
        PickerCancelled: If the user quits with Ctrl+C.
    """
    state = PickerState(
        files,
        resolver,
        initial_term=initial_term,
        match_count=match_count,
        browse_limit=browse_limit,
        result_limit=result_limit,
    )
    return FilePicker(state, page_size=page_size).run()
