"""Shared utility functions for devhelper.

Provides async command execution with inherited standard streams and the
Rich-based console helpers used to report progress and outcomes.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.rule import Rule

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


class CommandResult(BaseModel):
    """Result of a single external command invocation."""

    command: str = Field(..., description="The command line as displayed to the user")
    returncode: Optional[int] = Field(default=None, description="Exit status, None if never spawned")
    spawn_error: str = Field(default="", description="Why the process could not be started")

    @property
    def ok(self) -> bool:
        """True when the process was spawned and exited with status 0."""
        return not self.spawn_error and self.returncode == 0

    @property
    def exit_info(self) -> str:
        """Human-readable exit status or spawn error."""
        if self.spawn_error:
            return self.spawn_error
        return f"exit code {self.returncode}"


def format_command(program: str, args: list[str]) -> str:
    """Join a program and its arguments the way a user would type them."""
    return " ".join([program, *args])


async def run_command(
    program: str,
    args: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external program with inherited stdin/stdout/stderr.

    The child writes straight to the user's terminal, so nothing is captured.
    No shell is involved: the program is resolved on ``PATH`` first, which
    also picks up ``.cmd`` wrappers such as ``npx.cmd`` on Windows.

    Args:
        program: Executable name or path.
        args: Arguments passed to the executable.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds, or ``None`` to wait indefinitely.

    Returns:
        A ``CommandResult``.  Spawn failures are reported through
        ``spawn_error`` instead of being raised.
    """
    cmd_str = format_command(program, args)

    executable = shutil.which(program)
    if executable is None:
        return CommandResult(
            command=cmd_str,
            spawn_error=f"command not found: {program}",
        )

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            cwd=str(cwd) if cwd else None,
        )
    except (OSError, ValueError) as exc:
        # ValueError: an argument the OS cannot pass, e.g. an embedded NUL.
        return CommandResult(command=cmd_str, spawn_error=f"failed to start {program}: {exc}")

    try:
        returncode = await asyncio.wait_for(process.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandResult(
            command=cmd_str,
            returncode=-1,
            spawn_error=f"timed out after {timeout}s",
        )

    return CommandResult(command=cmd_str, returncode=returncode)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    """Print the full-width title rule shown at the top of a run."""
    console.print(Rule(f"[bold bright_cyan] {title} [/bold bright_cyan]", style="bright_cyan"))
    console.print()


def print_step(message: str) -> None:
    """Announce a provisioning step before it starts."""
    console.print(f"[cyan]>[/cyan] {message}")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
