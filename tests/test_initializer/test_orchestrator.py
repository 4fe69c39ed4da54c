"""Unit tests for the initializer orchestrator.

Covers the end-to-end scenarios for each template family, the pre-flight
collision check, unknown templates, the second collision check of the
git-clone flow, outcome reporting, and exit-code mapping.
"""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

from devhelper.config import Config, ToolchainConfig
from devhelper.initializer import Initializer, default_registry, exit_code_for, report
from devhelper.initializer.registry import TemplateRegistry
from devhelper.models import (
    Failure,
    FailureKind,
    ProjectRequest,
    StepWarning,
    Success,
    TemplateId,
)
from devhelper.prompts import PromptError, StaticPrompter


pytestmark = pytest.mark.unit

URL = "https://example.com/repo.git"


def _request(working_dir: Path, template: TemplateId, name: str) -> ProjectRequest:
    return ProjectRequest(template_id=template, project_name=name, working_directory=working_dir)


def _initializer(config: Config, prompter: StaticPrompter | None = None) -> Initializer:
    return Initializer(default_registry(config), prompter or StaticPrompter())


def _snapshot(directory: Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(directory)): (p.read_bytes() if p.is_file() else b"")
        for p in sorted(directory.rglob("*"))
    }


# ---------------------------------------------------------------------------
# Static templates
# ---------------------------------------------------------------------------


class TestStaticTemplates:
    @pytest.mark.asyncio
    async def test_static_web_on_empty_directory(self, config: Config, working_dir: Path):
        outcome = await _initializer(config).run(_request(working_dir, TemplateId.STATIC_WEB, "demo"))

        assert isinstance(outcome, Success)
        assert outcome.path == working_dir / "demo"
        assert outcome.next_steps == ["cd demo", "open index.html in a browser"]
        assert sorted(p.name for p in (working_dir / "demo").iterdir()) == [
            "index.html",
            "script.js",
            "style.css",
        ]

    @pytest.mark.asyncio
    async def test_static_web_contents_identical_across_runs(self, config: Config, tmp_path: Path):
        first_dir = tmp_path / "first"
        second_dir = tmp_path / "second"
        first_dir.mkdir()
        second_dir.mkdir()

        await _initializer(config).run(_request(first_dir, TemplateId.STATIC_WEB, "demo"))
        await _initializer(config).run(_request(second_dir, TemplateId.STATIC_WEB, "demo"))

        assert _snapshot(first_dir / "demo") == _snapshot(second_dir / "demo")

    @pytest.mark.asyncio
    async def test_node_minimal(self, config: Config, working_dir: Path):
        outcome = await _initializer(config).run(_request(working_dir, TemplateId.NODE_MINIMAL, "api"))

        assert isinstance(outcome, Success)
        assert outcome.next_steps == ["cd api", "node index.js"]
        assert (working_dir / "api" / "index.js").read_text(encoding="utf-8") == 'console.log("Hello, Node!");\n'


# ---------------------------------------------------------------------------
# Collisions and unknown templates
# ---------------------------------------------------------------------------


class TestPreflight:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("template", list(TemplateId))
    async def test_existing_target_touches_nothing(
        self, config: Config, working_dir: Path, fake_commands, template: TemplateId
    ):
        existing = working_dir / "demo"
        existing.mkdir()
        (existing / "keep.txt").write_text("mine", encoding="utf-8")
        before = _snapshot(working_dir)
        prompter = StaticPrompter(source_url=URL)

        outcome = await _initializer(config, prompter).run(_request(working_dir, template, "demo"))

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.TARGET_EXISTS
        assert outcome.path == existing
        assert _snapshot(working_dir) == before
        assert fake_commands.calls == []
        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_unknown_template_is_a_failure(self, config: Config, working_dir: Path):
        registry = default_registry(config)
        partial = TemplateRegistry({TemplateId.STATIC_WEB: registry.lookup(TemplateId.STATIC_WEB)})

        outcome = await Initializer(partial, StaticPrompter()).run(
            _request(working_dir, TemplateId.RUST_CRATE, "tool")
        )

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.UNKNOWN_TEMPLATE
        assert list(working_dir.iterdir()) == []


# ---------------------------------------------------------------------------
# Delegated templates
# ---------------------------------------------------------------------------


class TestDelegatedTemplates:
    @pytest.mark.asyncio
    async def test_git_clone_with_manifest(self, config: Config, working_dir: Path, fake_commands, clone_creates):
        fake_commands.script("git", clone_creates("package.json"))
        prompter = StaticPrompter(source_url=URL)

        outcome = await _initializer(config, prompter).run(_request(working_dir, TemplateId.GIT_CLONE, "lib"))

        assert isinstance(outcome, Success)
        assert str(working_dir / "lib") in outcome.message
        assert fake_commands.programs == ["git", "npm"]
        assert prompter.asked == ["source_url"]

    @pytest.mark.asyncio
    async def test_git_clone_failure(self, config: Config, working_dir: Path, fake_commands):
        fake_commands.script("git", 128)

        outcome = await _initializer(config, StaticPrompter(source_url=URL)).run(
            _request(working_dir, TemplateId.GIT_CLONE, "lib")
        )

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.EXTERNAL_COMMAND_FAILED
        assert outcome.command.startswith("git clone")
        assert outcome.exit_info == "exit code 128"
        assert fake_commands.programs == ["git"]

    @pytest.mark.asyncio
    async def test_git_clone_rechecks_target_after_prompt(self, config: Config, working_dir: Path, fake_commands):
        class SlowPrompter(StaticPrompter):
            def ask_source_url(self) -> str:
                # Someone else creates the folder while the user is typing.
                (working_dir / "lib").mkdir()
                return super().ask_source_url()

        outcome = await _initializer(config, SlowPrompter(source_url=URL)).run(
            _request(working_dir, TemplateId.GIT_CLONE, "lib")
        )

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.TARGET_EXISTS
        assert fake_commands.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["", "   "])
    async def test_git_clone_blank_url_from_custom_prompter(
        self, config: Config, working_dir: Path, fake_commands, answer: str
    ):
        class BlankUrlPrompter(StaticPrompter):
            def ask_source_url(self) -> str:
                return answer

        outcome = await _initializer(config, BlankUrlPrompter()).run(
            _request(working_dir, TemplateId.GIT_CLONE, "lib")
        )

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.EXTERNAL_COMMAND_FAILED
        assert "URL" in outcome.reason
        assert fake_commands.calls == []
        assert list(working_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_git_clone_prompt_error_propagates(self, config: Config, working_dir: Path, fake_commands):
        with pytest.raises(PromptError):
            await _initializer(config, StaticPrompter()).run(_request(working_dir, TemplateId.GIT_CLONE, "lib"))
        assert fake_commands.calls == []

    @pytest.mark.asyncio
    async def test_rust_generator_unavailable(self, config: Config, working_dir: Path, fake_commands):
        fake_commands.script("cargo", "command not found: cargo")

        outcome = await _initializer(config).run(_request(working_dir, TemplateId.RUST_CRATE, "tool"))

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.EXTERNAL_COMMAND_FAILED
        assert "command not found" in outcome.detail

    @pytest.mark.asyncio
    async def test_react_vite(self, config: Config, working_dir: Path, fake_commands):
        outcome = await _initializer(config).run(_request(working_dir, TemplateId.REACT_VITE, "app"))

        assert isinstance(outcome, Success)
        assert fake_commands.calls[0]["program"] == "npx"
        assert fake_commands.calls[0]["cwd"] == working_dir
        assert outcome.next_steps == ["cd app", "npm install", "npm run dev"]


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _render(outcome) -> str:
    buffer = io.StringIO()
    report(outcome, Console(file=buffer, width=120))
    return buffer.getvalue()


class TestReport:
    def test_success_banner(self, tmp_path: Path):
        text = _render(
            Success(message="Created!", path=tmp_path / "demo", next_steps=["cd demo", "npm run dev"])
        )
        assert "Created!" in text
        assert str(tmp_path / "demo") in text
        assert "1. cd demo" in text
        assert "2. npm run dev" in text

    def test_success_with_warning(self, tmp_path: Path):
        text = _render(
            Success(
                message="Cloned",
                path=tmp_path / "lib",
                warnings=[StepWarning(reason="Dependencies were not installed", command="npm install", exit_info="exit code 1")],
            )
        )
        assert "Warning:" in text
        assert "npm install (exit code 1)" in text

    def test_failure_banner(self):
        text = _render(
            Failure(
                failure_kind=FailureKind.EXTERNAL_COMMAND_FAILED,
                reason="Failed to create Rust project 'tool'",
                detail="command not found: cargo",
                command="cargo new tool",
            )
        )
        assert "external_command_failed" in text
        assert "Command: cargo new tool" in text
        assert "Details: command not found: cargo" in text


class TestExitCode:
    def test_success(self, tmp_path: Path):
        assert exit_code_for(Success(message="ok", path=tmp_path)) == 0

    def test_success_with_warnings(self, tmp_path: Path):
        outcome = Success(message="ok", path=tmp_path, warnings=[StepWarning(reason="install failed")])
        assert exit_code_for(outcome) == 0

    def test_failure(self):
        outcome = Failure(failure_kind=FailureKind.TARGET_EXISTS, reason="exists")
        assert exit_code_for(outcome) == 1


class TestUnrepresentableNames:
    """Requests built without validation still end in a ``Failure``."""

    @staticmethod
    def _unchecked(working_dir: Path, template: TemplateId) -> ProjectRequest:
        return ProjectRequest.model_construct(
            template_id=template, project_name="a\x00b", working_directory=working_dir
        )

    @pytest.mark.asyncio
    async def test_static_web(self, config: Config, working_dir: Path):
        outcome = await _initializer(config).run(self._unchecked(working_dir, TemplateId.STATIC_WEB))

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.DIRECTORY_CREATE_FAILED

    @pytest.mark.asyncio
    async def test_rust_crate(self, working_dir: Path):
        config = Config(
            working_directory=working_dir,
            toolchain=ToolchainConfig(cargo=sys.executable),
        )
        outcome = await _initializer(config).run(self._unchecked(working_dir, TemplateId.RUST_CRATE))

        assert isinstance(outcome, Failure)
        assert outcome.failure_kind is FailureKind.EXTERNAL_COMMAND_FAILED
        assert "null" in outcome.detail
