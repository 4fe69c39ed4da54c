"""Answer providers for ``devhelper init``.

The initializer only depends on the ``Prompter`` shape.  ``RichPrompter``
asks on the terminal; ``StaticPrompter`` replays fixed answers for tests and
unattended runs.
"""

from __future__ import annotations

import os
from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from devhelper.models import TemplateId
from devhelper.utils import console as default_console


DEFAULT_PROJECT_NAME = "my-project"


class PromptError(Exception):
    """Raised when a prompter cannot supply a required answer."""


class Prompter(Protocol):
    def ask_template(self, choices: Sequence[TemplateId]) -> TemplateId:
        ...

    def ask_project_name(self, default: str = DEFAULT_PROJECT_NAME) -> str:
        ...

    def ask_source_url(self) -> str:
        ...


class RichPrompter:
    """Interactive prompts on the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def ask_template(self, choices: Sequence[TemplateId]) -> TemplateId:
        self.console.print("[bold]Which project do you want to create?[/bold]")
        for index, template_id in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]. {template_id.label}")
        picked = IntPrompt.ask(
            "Template",
            console=self.console,
            choices=[str(i) for i in range(1, len(choices) + 1)],
            show_choices=False,
        )
        return choices[picked - 1]

    def ask_project_name(self, default: str = DEFAULT_PROJECT_NAME) -> str:
        return self._ask_non_empty("Project name", default=default)

    def ask_source_url(self) -> str:
        return self._ask_non_empty("URL of the Git repository to clone")

    def _ask_non_empty(self, question: str, default: Optional[str] = None) -> str:
        while True:
            if default is None:
                answer = Prompt.ask(question, console=self.console)
            else:
                answer = Prompt.ask(question, console=self.console, default=default)
            if answer and answer.strip():
                return answer.strip()
            self.console.print("[prompt.invalid]A value is required")


class StaticPrompter:
    """Returns preset answers; raises ``PromptError`` for a missing one."""

    def __init__(
        self,
        template: TemplateId | str | None = None,
        project_name: Optional[str] = None,
        source_url: Optional[str] = None,
    ) -> None:
        self.template = template
        self.project_name = project_name
        self.source_url = source_url
        self.asked: list[str] = []

    @classmethod
    def from_env(cls) -> "StaticPrompter":
        """Answers from DEVHELPER_TEMPLATE, DEVHELPER_PROJECT_NAME, DEVHELPER_SOURCE_URL."""
        return cls(
            template=os.environ.get("DEVHELPER_TEMPLATE") or None,
            project_name=os.environ.get("DEVHELPER_PROJECT_NAME") or None,
            source_url=os.environ.get("DEVHELPER_SOURCE_URL") or None,
        )

    def ask_template(self, choices: Sequence[TemplateId]) -> TemplateId:
        self.asked.append("template")
        if self.template is None:
            raise PromptError("No template given (set DEVHELPER_TEMPLATE)")
        try:
            return TemplateId(self.template)
        except ValueError:
            raise PromptError(
                f"Unknown template {self.template!r}; expected one of "
                + ", ".join(t.value for t in choices)
            ) from None

    def ask_project_name(self, default: str = DEFAULT_PROJECT_NAME) -> str:
        self.asked.append("project_name")
        return self.project_name or default

    def ask_source_url(self) -> str:
        self.asked.append("source_url")
        if not self.source_url:
            raise PromptError("No repository URL given (set DEVHELPER_SOURCE_URL)")
        return self.source_url
