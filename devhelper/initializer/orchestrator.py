"""Initializer orchestrator.

Runs one ``ProjectRequest`` end to end:

    resolve path -> collision check -> registry lookup
    -> (git-clone only) ask for the source URL and re-check the path
    -> strategy.provision -> Outcome

``report`` renders the outcome and ``exit_code_for`` maps it to the process
exit status.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from devhelper.initializer.paths import resolve_target, target_exists
from devhelper.initializer.registry import TemplateRegistry
from devhelper.models import (
    Failure,
    FailureKind,
    Outcome,
    ProjectRequest,
    ProvisionError,
    Success,
)
from devhelper.prompts import Prompter
from devhelper.utils import console as default_console


def _target_exists_failure(request: ProjectRequest, target: Path) -> Failure:
    return Failure(
        failure_kind=FailureKind.TARGET_EXISTS,
        reason=f"The folder '{request.project_name}' already exists.",
        detail=str(target),
        path=target,
    )


class Initializer:
    """Creates a single project per ``run`` call."""

    def __init__(self, registry: TemplateRegistry, prompter: Prompter) -> None:
        self.registry = registry
        self.prompter = prompter

    async def run(self, request: ProjectRequest) -> Outcome:
        """Provision *request*.

        Taxonomy failures (collisions, unknown templates, filesystem and
        command errors, a blank repository URL) are returned as ``Failure``
        outcomes.  Only errors of the prompter itself (``PromptError``)
        propagate.

        ``UNKNOWN_TEMPLATE`` is reported for a ``TemplateId`` missing from
        the registry.  A raw string that is not a ``TemplateId`` never gets
        this far: ``ProjectRequest`` rejects it with a ``ValidationError``;
        use ``TemplateRegistry.lookup`` directly to resolve raw strings.
        """
        target = resolve_target(request.working_directory, request.project_name)
        if target_exists(target):
            return _target_exists_failure(request, target)

        try:
            strategy = self.registry.lookup(request.template_id)
        except ProvisionError as exc:
            return exc.to_failure()

        source_url = None
        if strategy.needs_source_url:
            source_url = self.prompter.ask_source_url()
            # The prompt may have taken a while; check the path again.
            target = resolve_target(request.working_directory, request.project_name)
            if target_exists(target):
                return _target_exists_failure(request, target)

        try:
            return await strategy.provision(target, source_url=source_url)
        except ProvisionError as exc:
            return exc.to_failure()


def report(outcome: Outcome, console: Console | None = None) -> None:
    """Print the success or failure banner for *outcome*."""
    console = console or default_console

    if isinstance(outcome, Success):
        lines = [f"[bold green]{outcome.message}[/bold green]", "", f"Location: {outcome.path}"]
        if outcome.next_steps:
            lines += ["", "[yellow]Next steps:[/yellow]"]
            lines += [f"  {i}. {step}" for i, step in enumerate(outcome.next_steps, start=1)]
        for warning in outcome.warnings:
            lines += ["", f"[bold yellow]Warning:[/bold yellow] {warning.reason}"]
            if warning.command:
                lines.append(f"  {warning.command} ({warning.exit_info})")
        console.print(Panel("\n".join(lines), title="Project Ready", border_style="green"))
        return

    lines = [f"[bold red]{outcome.reason}[/bold red]"]
    if outcome.command:
        lines.append(f"Command: {outcome.command}")
    if outcome.detail:
        lines.append(f"Details: {outcome.detail}")
    console.print(
        Panel(
            "\n".join(lines),
            title=f"Failed: {outcome.failure_kind.value}",
            border_style="red",
        )
    )


def exit_code_for(outcome: Outcome) -> int:
    """0 for a success (warnings included), 1 for a failure."""
    return 0 if isinstance(outcome, Success) else 1
