"""Shared pytest fixtures for the devhelper test suite.

Provides reusable fixtures for:
- A temporary working directory for generated projects
- A ``Config`` rooted in that directory
- A scripted replacement for ``run_command`` so no toolchain is invoked
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional
from unittest.mock import patch

import pytest

from devhelper.config import Config
from devhelper.utils import CommandResult, format_command


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Empty directory that plays the role of the user's current directory."""
    cwd = tmp_path / "workspace"
    cwd.mkdir()
    return cwd


@pytest.fixture
def config(working_dir: Path) -> Config:
    return Config(working_directory=working_dir)


# ---------------------------------------------------------------------------
# Scripted external commands
# ---------------------------------------------------------------------------

class FakeCommands:
    """Stands in for ``run_command`` and records every invocation.

    ``results`` maps a program name to a list of outcomes consumed in order.
    An outcome is an exit code, a spawn-error string, or a callable run for
    its side effects (e.g. creating the files a clone would leave) that
    returns an exit code.
    """

    def __init__(self) -> None:
        self.results: dict[str, list] = {}
        self.calls: list[dict] = []

    def script(self, program: str, *outcomes) -> None:
        self.results.setdefault(program, []).extend(outcomes)

    @property
    def programs(self) -> list[str]:
        return [call["program"] for call in self.calls]

    async def __call__(
        self,
        program: str,
        args: list[str],
        cwd=None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        self.calls.append({"program": program, "args": list(args), "cwd": cwd, "timeout": timeout})
        command = format_command(program, args)
        queue = self.results.get(program) or [0]
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, str):
            return CommandResult(command=command, spawn_error=outcome)
        if callable(outcome):
            outcome = outcome(program, args, cwd)
        return CommandResult(command=command, returncode=outcome)


@pytest.fixture
def fake_commands() -> FakeCommands:
    """Patch ``run_command`` inside the strategies module."""
    fake = FakeCommands()
    with patch("devhelper.initializer.strategies.run_command", fake):
        yield fake


@pytest.fixture
def clone_creates() -> Callable[..., Callable]:
    """Build a side effect that mimics ``git clone <url> <dest>`` writing *files*."""

    def factory(*files: str) -> Callable:
        def _clone(program: str, args: list[str], cwd) -> int:
            dest = Path(args[-1])
            dest.mkdir(parents=True)
            for name in files:
                (dest / name).write_text("{}\n", encoding="utf-8")
            return 0
        return _clone

    return factory
