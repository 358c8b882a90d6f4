"""Console state shared by the texbib commands.

The Typer callback stores a `CLIState` on the click context; commands and the
diagnostic emitter read it back through `get_cli_state` to decide how much to
print. Messages go to stderr so that `show -f json` output stays parseable.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
import sys
from typing import TYPE_CHECKING

import click
import typer


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_info",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

_STYLES = {"info": "dim", "warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Verbosity and console handles for one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Return a stdout console, rebuilt when stdout has been swapped."""
        from rich.console import Console

        current = getattr(self._console, "file", None)
        if self._console is None or current is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Return a stderr console, rebuilt when stderr has been swapped."""
        from rich.console import Console

        current = getattr(self._err_console, "file", None)
        if self._err_console is None or current is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("texbib_cli_state", default=None)


def get_cli_state() -> CLIState:
    """Return the state of the running invocation, creating a default one."""
    ctx = click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is not None:
            return state
    state = _STATE_VAR.get()
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(ctx: typer.Context, *, verbosity: int = 0, debug: bool = False) -> CLIState:
    """Install a fresh state for the invocation driven by ``ctx``."""
    state = CLIState(verbosity=max(0, verbosity), show_tracebacks=debug)
    ctx.obj = state
    _STATE_VAR.set(state)
    return state


def render_message(
    level: str,
    message: str,
    *,
    source: Path | None = None,
    exception: BaseException | None = None,
) -> None:
    """Print ``message`` on stderr, prefixed with the file it concerns.

    Info messages only appear with ``-v``. At that level warnings and errors
    also name the exception type and its direct cause.
    """
    state = get_cli_state()
    if level == "info" and state.verbosity < 1:
        return

    from rich.text import Text

    style = _STYLES.get(level, "")
    text = Text()
    if level != "info":
        text.append(f"{level}: ", style=f"bold {style}")
    if source is not None:
        text.append(f"{source}: ", style="bold")
    text.append(message, style=style)

    if exception is not None and state.verbosity >= 1:
        details = [f"type: {type(exception).__name__}"]
        cause = exception.__cause__
        if cause is not None:
            details.append(f"caused by: {type(cause).__name__}: {cause}")
        text.append("\n" + "\n".join(details), style=style)

    state.err_console.print(text, soft_wrap=True)


def emit_info(message: str, *, source: Path | None = None) -> None:
    render_message("info", message, source=source)


def emit_warning(
    message: str, *, source: Path | None = None, exception: BaseException | None = None
) -> None:
    render_message("warning", message, source=source, exception=exception)


def emit_error(
    message: str, *, source: Path | None = None, exception: BaseException | None = None
) -> None:
    render_message("error", message, source=source, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    return get_cli_state().show_tracebacks
