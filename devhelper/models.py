"""Pydantic v2 models for project requests and provisioning outcomes.

Every model here lives for a single ``devhelper init`` run: it is created from
user input or by a strategy, reported, and discarded.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class TemplateId(str, Enum):
    """Closed set of project templates."""
    REACT_VITE = "react-vite"
    NODE_MINIMAL = "node-minimal"
    STATIC_WEB = "static-web"
    RUST_CRATE = "rust-crate"
    GIT_CLONE = "git-clone"

    @property
    def label(self) -> str:
        """Menu label shown by the interactive prompt."""
        return _TEMPLATE_LABELS[self]


_TEMPLATE_LABELS: dict[TemplateId, str] = {
    TemplateId.REACT_VITE: "React",
    TemplateId.NODE_MINIMAL: "Node",
    TemplateId.STATIC_WEB: "HTML + CSS + JS",
    TemplateId.RUST_CRATE: "Rust",
    TemplateId.GIT_CLONE: "Clone Git repository",
}


class FailureKind(str, Enum):
    """Why a run (or an optional step of it) did not succeed."""
    TARGET_EXISTS = "target_exists"
    UNKNOWN_TEMPLATE = "unknown_template"
    DIRECTORY_CREATE_FAILED = "directory_create_failed"
    FILE_WRITE_FAILED = "file_write_failed"
    EXTERNAL_COMMAND_FAILED = "external_command_failed"
    SECONDARY_STEP_FAILED = "secondary_step_failed"


class ProvisionState(str, Enum):
    """States a strategy passes through while provisioning."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CLONE_RUNNING = "clone_running"
    CLONE_SUCCEEDED = "clone_succeeded"
    INSTALL_CHECK = "install_check"
    INSTALL_RUNNING = "install_running"
    INSTALL_SUCCEEDED = "install_succeeded"
    INSTALL_FAILED = "install_failed"
    INSTALL_SKIPPED = "install_skipped"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class ProjectRequest(BaseModel):
    """What the user asked for: a template, a name, and where to put it."""

    model_config = ConfigDict(frozen=True)

    template_id: TemplateId
    project_name: str = Field(..., description="Directory name of the new project")
    working_directory: Path = Field(..., description="Directory the project is created in")

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("project name must not be empty")
        if name in (".", ".."):
            raise ValueError(f"'{name}' is not a valid project name")
        if "/" in name or "\\" in name:
            raise ValueError("project name must not contain path separators")
        if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
            raise ValueError("project name must not contain control characters")
        return name


# ---------------------------------------------------------------------------
# File sets and commands
# ---------------------------------------------------------------------------

class FileEntry(BaseModel):
    """One file of a static template, relative to the project root."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    content: str


class CommandSpec(BaseModel):
    """A single external command; its standard streams are always inherited."""

    model_config = ConfigDict(frozen=True)

    program: str
    args: list[str] = Field(default_factory=list)
    cwd: Path


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class StepWarning(BaseModel):
    """A non-fatal problem in an optional step of an otherwise successful run."""

    kind: FailureKind = FailureKind.SECONDARY_STEP_FAILED
    reason: str
    command: str = ""
    exit_info: str = ""


class Success(BaseModel):
    """The project directory was created and every required step passed."""

    kind: Literal["success"] = "success"
    message: str
    path: Path
    next_steps: list[str] = Field(default_factory=list)
    warnings: list[StepWarning] = Field(default_factory=list)
    states: list[ProvisionState] = Field(default_factory=list)


class Failure(BaseModel):
    """The run stopped at ``kind``; ``detail`` holds the underlying error text."""

    kind: Literal["failure"] = "failure"
    failure_kind: FailureKind
    reason: str
    detail: str = ""
    path: Optional[Path] = None
    command: str = ""
    exit_info: str = ""
    states: list[ProvisionState] = Field(default_factory=list)


Outcome = Union[Success, Failure]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ProvisionError(Exception):
    """Raised inside the initializer; always converted to a ``Failure``."""

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        *,
        path: Path | None = None,
        detail: str = "",
    ):
        self.kind = kind
        self.path = path
        self.detail = detail
        super().__init__(message)

    def to_failure(self) -> Failure:
        return Failure(
            failure_kind=self.kind,
            reason=str(self),
            detail=self.detail,
            path=self.path,
        )


class UnknownTemplateError(ProvisionError):
    """Raised by the registry for identifiers outside the closed set."""

    def __init__(self, template_id: object):
        self.template_id = template_id
        super().__init__(
            FailureKind.UNKNOWN_TEMPLATE,
            f"Unknown template: {template_id!r}",
        )
