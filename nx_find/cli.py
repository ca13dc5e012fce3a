"""
Thin CLI layer - orchestrates workspace lookup, matching, picking and running.

Copyright (c) 2026 Andrew Hundt
Licensed under the Apache License, Version 2.0
"""

import json
import os
from pathlib import Path
from typing import List, Optional

import click
import typer
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from .exceptions import NoMatchesError, PickerCancelled, WorkspaceNotFoundError
from .formatters import FAREWELL
from .matching import MatchEngine
from .models import MatchOutcome, OutcomeKind, ProjectInfo
from .picker import DEFAULT_BROWSE_LIMIT, DEFAULT_PAGE_SIZE, DEFAULT_RESULT_LIMIT, pick_test_file
from .resolver import ProjectResolver
from .runner import run_test
from .workspace import find_repo_root, get_nx_bin, list_test_files


class _RootGroup(TyperGroup):
    """Root command group: an unknown command prints usage and exits 1."""

    def resolve_command(self, ctx: click.Context, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            typer.echo(ctx.get_help())
            raise typer.Exit(1)


app = typer.Typer(
    cls=_RootGroup,
    help=(
        "Find Jest test files in an Nx workspace and run one in watch mode.\n\n"
        "The workspace root is the nearest directory above the current one that "
        "contains nx.json. Test files are *.test.ts, *.test.tsx, *.test.js and "
        "*.test.jsx files known to git.\n\n"
        "Override the config file location with environment variables:\n\n"
        "  NX_FIND_CONFIG  Path to the nx-find config JSON file"
    ),
)

console = Console()
err_console = Console(stderr=True)


# Module-level overrides set by global options
_g_config_path: Optional[str] = None
_config_cache: Optional[dict] = None  # lazily loaded, reset per process


def _get_config_file_path() -> Path:
    # Priority: --config flag > NX_FIND_CONFIG env > typer.get_app_dir default
    if _g_config_path:
        return Path(_g_config_path).expanduser()
    env_val = os.getenv("NX_FIND_CONFIG")
    if env_val:
        return Path(env_val).expanduser()
    return Path(typer.get_app_dir("nx_find")) / "config.json"


def load_config() -> dict:
    """Load app config from JSON file. Returns empty dict if not found or unreadable.

    Config file location priority:
      1. ``--config`` CLI flag (set on the root app callback)
      2. ``NX_FIND_CONFIG`` environment variable
      3. OS-appropriate default via ``typer.get_app_dir("nx_find")``:
           - macOS: ``~/Library/Application Support/nx_find/config.json``
           - Linux: ``~/.config/nx_find/config.json``
           - Windows: ``%APPDATA%/nx_find/config.json``

    Supported keys (all optional):

    - ``exclude_paths`` (list of strings): path fragments that hide a test file;
      replaces the built-in ``["cypress", "acceptance-tests"]`` when present.
    - ``nx_bin`` (string): nx executable, absolute or relative to the workspace root.
      Default: ``node_modules/.bin/nx``.
    - ``browse_limit`` (int): rows listed before anything is typed. Default: 20.
    - ``result_limit`` (int): maximum rows for a typed query. Default: 50.
    - ``page_size`` (int): rows visible at once in the picker. Default: 10.

    Example ``config.json``::

        {
            "exclude_paths": ["cypress", "acceptance-tests", "e2e"],
            "result_limit": 100
        }
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    config_file = _get_config_file_path()
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                _config_cache = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            err_console.print(f"[yellow]Warning: could not load config {config_file}: {exc}[/yellow]")
            _config_cache = {}
    else:
        _config_cache = {}

    return _config_cache


def _config_int(cfg: dict, key: str, default: int) -> int:
    """Positive int config value, falling back to ``default`` with a warning."""
    value = cfg.get(key, default)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    err_console.print(f"[yellow]Warning: config key '{key}' must be a positive integer, using {default}[/yellow]")
    return default


def _config_str(cfg: dict, key: str) -> Optional[str]:
    """String config value, or None (with a warning) when set to anything else."""
    value = cfg.get(key)
    if value is None or isinstance(value, str):
        return value
    err_console.print(f"[yellow]Warning: config key '{key}' must be a string, ignoring it[/yellow]")
    return None


def _config_str_list(cfg: dict, key: str) -> Optional[List[str]]:
    """List-of-strings config value, or None (with a warning) when malformed."""
    value = cfg.get(key)
    if value is None:
        return None
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    err_console.print(f"[yellow]Warning: config key '{key}' must be a list of strings, using defaults[/yellow]")
    return None


# ── Root app callback (global options) ────────────────────────────────────────

@app.callback(invoke_without_command=True)
def app_callback(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None, "--config",
        help=(
            "Path to the nx-find config JSON file. "
            "Default: OS config dir / nx_find / config.json "
            "(macOS: ~/Library/Application Support/nx_find/config.json, "
            "Linux: ~/.config/nx_find/config.json). "
            "Also overridable via NX_FIND_CONFIG env var."
        ),
        envvar="NX_FIND_CONFIG",
    ),
) -> None:
    global _g_config_path, _config_cache
    if config != _g_config_path:
        _g_config_path = config
        _config_cache = None  # invalidate cache when path changes
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# ── Shared helper functions ───────────────────────────────────────────────────

def _workspace_root() -> Path:
    """Workspace root for the current directory, or exit 1 with a diagnostic."""
    try:
        return find_repo_root()
    except WorkspaceNotFoundError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)


def _do_run(file_path: str, project: ProjectInfo, repo_root: Path, nx_bin: Path) -> None:
    """Run one test file; a failing child turns into exit code 1."""
    if run_test(file_path, project, repo_root, nx_bin) != 0:
        raise typer.Exit(code=1)


def _do_pick(engine: MatchEngine, outcome: MatchOutcome, cfg: dict) -> str:
    """Open the picker, seeded with the term and its match count when filtering."""
    filtered = outcome.kind == OutcomeKind.FILTERED
    return pick_test_file(
        engine.all_files,
        engine.resolver,
        initial_term=outcome.term if filtered else None,
        match_count=outcome.count if filtered else None,
        browse_limit=_config_int(cfg, "browse_limit", DEFAULT_BROWSE_LIMIT),
        result_limit=_config_int(cfg, "result_limit", DEFAULT_RESULT_LIMIT),
        page_size=_config_int(cfg, "page_size", DEFAULT_PAGE_SIZE),
    )


def _do_test(engine: MatchEngine, pattern: Optional[str], nx_bin: Path, cfg: dict) -> None:
    try:
        outcome = engine.match(pattern)
    except NoMatchesError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    if outcome.is_single:
        match = outcome.matches[0]
        _do_run(match.file_path, match.project, engine.repo_root, nx_bin)
        return

    selected = _do_pick(engine, outcome, cfg)
    _do_run(selected, engine.resolver.resolve(selected), engine.repo_root, nx_bin)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("test")
def test_cmd(
    pattern: Optional[str] = typer.Argument(
        None,
        help=(
            "File name fragment or relative path. "
            "Example: 'login' matches login.test.ts and loginForm.test.tsx; "
            "'login.test.ts' matches that file name only; "
            "'libs/auth/src/login.test.ts' runs that file. "
            "Omit to browse all test files."
        ),
    ),
) -> None:
    """Find Jest tests and run one in watch mode.

    One match runs immediately. Several matches, or no pattern, open an
    interactive picker that filters as you type.

    Examples:
        nx-find test                    # browse all test files
        nx-find test login              # run login*.test.* or pick among them
        nx-find test libs/auth/src/login.test.ts
    """
    cfg = load_config()
    repo_root = _workspace_root()
    nx_bin = get_nx_bin(repo_root, _config_str(cfg, "nx_bin"))
    exclude_paths = _config_str_list(cfg, "exclude_paths")

    console.clear()

    resolver = ProjectResolver(repo_root)
    engine = MatchEngine(repo_root, resolver, lambda: list_test_files(repo_root, exclude_paths))
    try:
        _do_test(engine, pattern, nx_bin, cfg)
    except PickerCancelled:
        console.print(f"\n[bright_black]{FAREWELL}[/bright_black]\n")
        raise typer.Exit(0)


# ── Entry point ───────────────────────────────────────────────────────────────

def cli_main():
    """CLI entry point."""
    app()
