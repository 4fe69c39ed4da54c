"""Provisioning strategies for every template.

Two families share the ``TemplateStrategy`` capability:

* ``StaticFilesStrategy`` creates the target directory and writes a fixed,
  ordered file set into it.
* ``DelegatedProcessStrategy`` and ``GitCloneStrategy`` hand the work to
  external toolchains, streaming their output to the user's terminal.

Strategies never change the process working directory: every write uses an
absolute path under the target and every command gets an explicit ``cwd``.
Filesystem and process errors are converted to ``Failure`` outcomes here;
a missing repository URL is raised as ``ProvisionError`` for the
initializer to convert.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Protocol

from devhelper.models import (
    CommandSpec,
    Failure,
    FailureKind,
    FileEntry,
    Outcome,
    ProvisionError,
    ProvisionState,
    StepWarning,
    Success,
)
from devhelper.utils import CommandResult, print_step, print_warning, run_command


NextSteps = Callable[[str], list[str]]


class TemplateStrategy(Protocol):
    """Populates a resolved, not yet existing project directory."""

    needs_source_url: bool

    async def provision(self, target: Path, *, source_url: Optional[str] = None) -> Outcome:
        ...


# ---------------------------------------------------------------------------
# StaticFiles variant
# ---------------------------------------------------------------------------


class StaticFilesStrategy:
    """Writes a fixed file set into a freshly created directory."""

    needs_source_url = False

    def __init__(self, label: str, fileset: tuple[FileEntry, ...], next_steps: NextSteps) -> None:
        self.label = label
        self.fileset = fileset
        self.next_steps = next_steps

    async def provision(self, target: Path, *, source_url: Optional[str] = None) -> Outcome:
        states = [ProvisionState.NOT_STARTED, ProvisionState.RUNNING]
        print_step(f"Creating {self.label} project '{target.name}'...")

        # ValueError covers names the OS cannot represent (embedded NUL).
        try:
            target.mkdir(parents=True, exist_ok=False)
        except (OSError, ValueError) as exc:
            states.append(ProvisionState.FAILED)
            return Failure(
                failure_kind=FailureKind.DIRECTORY_CREATE_FAILED,
                reason=f"Could not create directory {target}",
                detail=str(exc),
                path=target,
                states=states,
            )

        # No rollback: files written before a failure stay on disk.
        for entry in self.fileset:
            file_path = target / entry.relative_path
            try:
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_path.write_text(entry.content, encoding="utf-8")
            except (OSError, ValueError) as exc:
                states.append(ProvisionState.FAILED)
                return Failure(
                    failure_kind=FailureKind.FILE_WRITE_FAILED,
                    reason=f"Could not write {file_path}",
                    detail=str(exc),
                    path=file_path,
                    states=states,
                )

        states.append(ProvisionState.SUCCEEDED)
        return Success(
            message=f"{self.label} project '{target.name}' created successfully!",
            path=target,
            next_steps=self.next_steps(target.name),
            states=states,
        )


# ---------------------------------------------------------------------------
# DelegatedProcess variant
# ---------------------------------------------------------------------------


def _command_failure(result: CommandResult, target: Path, reason: str) -> Failure:
    return Failure(
        failure_kind=FailureKind.EXTERNAL_COMMAND_FAILED,
        reason=reason,
        detail=result.exit_info,
        path=target,
        command=result.command,
        exit_info=result.exit_info,
    )


class DelegatedProcessStrategy:
    """Runs a single generator command that creates the target itself.

    ``build_command`` receives the target path and returns the command to
    run; generators such as ``cargo new`` take the project name and are run
    from the target's parent directory.
    """

    needs_source_url = False

    def __init__(
        self,
        label: str,
        build_command: Callable[[Path], CommandSpec],
        next_steps: NextSteps,
        timeout: float | None = None,
    ) -> None:
        self.label = label
        self.build_command = build_command
        self.next_steps = next_steps
        self.timeout = timeout

    async def provision(self, target: Path, *, source_url: Optional[str] = None) -> Outcome:
        states = [ProvisionState.NOT_STARTED, ProvisionState.RUNNING]
        spec = self.build_command(target)
        print_step(f"Creating {self.label} project '{target.name}'...")

        result = await run_command(spec.program, spec.args, cwd=spec.cwd, timeout=self.timeout)
        if not result.ok:
            states.append(ProvisionState.FAILED)
            failure = _command_failure(
                result, target, f"Failed to create {self.label} project '{target.name}'"
            )
            failure.states = states
            return failure

        states.append(ProvisionState.SUCCEEDED)
        return Success(
            message=f"{self.label} project '{target.name}' created successfully!",
            path=target,
            next_steps=self.next_steps(target.name),
            states=states,
        )


class GitCloneStrategy:
    """Clones a repository, then installs its dependencies when it has a manifest.

    The clone is the required step.  The install is optional: when it fails
    the outcome is still a ``Success`` carrying a ``StepWarning``.
    """

    needs_source_url = True

    def __init__(
        self,
        git: str = "git",
        installer: str = "npm",
        install_args: tuple[str, ...] = ("install",),
        manifest_file: str = "package.json",
        timeout: float | None = None,
    ) -> None:
        self.git = git
        self.installer = installer
        self.install_args = install_args
        self.manifest_file = manifest_file
        self.timeout = timeout

    async def provision(self, target: Path, *, source_url: Optional[str] = None) -> Outcome:
        if not source_url or not source_url.strip():
            raise ProvisionError(
                FailureKind.EXTERNAL_COMMAND_FAILED,
                "No repository URL given; nothing to clone",
                path=target,
                detail="git clone needs a repository URL",
            )
        source_url = source_url.strip()

        states = [ProvisionState.NOT_STARTED, ProvisionState.CLONE_RUNNING]
        print_step(f"Cloning {source_url} into {target}...")

        clone = await run_command(
            self.git,
            ["clone", source_url, str(target)],
            cwd=target.parent,
            timeout=self.timeout,
        )
        if not clone.ok:
            states.append(ProvisionState.FAILED)
            failure = _command_failure(clone, target, f"Failed to clone {source_url}")
            failure.states = states
            return failure

        states += [ProvisionState.CLONE_SUCCEEDED, ProvisionState.INSTALL_CHECK]
        warnings: list[StepWarning] = []
        next_steps = [f"cd {target.name}"]

        if not (target / self.manifest_file).is_file():
            states.append(ProvisionState.INSTALL_SKIPPED)
        else:
            states.append(ProvisionState.INSTALL_RUNNING)
            print_step("Installing dependencies...")
            install = await run_command(
                self.installer,
                list(self.install_args),
                cwd=target,
                timeout=self.timeout,
            )
            if install.ok:
                states.append(ProvisionState.INSTALL_SUCCEEDED)
            else:
                states.append(ProvisionState.INSTALL_FAILED)
                print_warning(f"Dependency install failed ({install.exit_info})")
                warnings.append(
                    StepWarning(
                        reason="Dependencies were not installed",
                        command=install.command,
                        exit_info=install.exit_info,
                    )
                )
                next_steps.append(install.command)

        return Success(
            message=f"Repository cloned successfully into {target}",
            path=target,
            next_steps=next_steps,
            warnings=warnings,
            states=states,
        )
