"""devhelper configuration.

Typed settings for the initializer.  Values are read once per invocation and
never written back to disk.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolchainConfig(BaseModel):
    """Names of the external programs the delegated templates invoke."""

    npx: str = Field(default="npx")
    cargo: str = Field(default="cargo")
    git: str = Field(default="git")
    npm: str = Field(default="npm")
    react_template: str = Field(default="react", description="Template flag passed to create-vite")
    manifest_file: str = Field(
        default="package.json",
        description="File whose presence in a cloned repository triggers a dependency install",
    )


class Config(BaseModel):
    """Global devhelper configuration.

    Created by the CLI entry point and passed to the registry and the
    initializer.
    """

    working_directory: Path = Field(default_factory=Path.cwd)
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    command_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-command timeout in seconds; None waits until the command exits",
    )

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            DEVHELPER_NPX, DEVHELPER_CARGO, DEVHELPER_GIT, DEVHELPER_NPM,
            DEVHELPER_REACT_TEMPLATE, DEVHELPER_COMMAND_TIMEOUT.
        """
        toolchain_kwargs: dict[str, Any] = {}
        for field_name, var in (
            ("npx", "DEVHELPER_NPX"),
            ("cargo", "DEVHELPER_CARGO"),
            ("git", "DEVHELPER_GIT"),
            ("npm", "DEVHELPER_NPM"),
            ("react_template", "DEVHELPER_REACT_TEMPLATE"),
        ):
            if os.environ.get(var):
                toolchain_kwargs[field_name] = os.environ[var]

        timeout: Optional[float] = None
        if os.environ.get("DEVHELPER_COMMAND_TIMEOUT"):
            timeout = float(os.environ["DEVHELPER_COMMAND_TIMEOUT"])

        return cls(
            toolchain=ToolchainConfig(**toolchain_kwargs),
            command_timeout=timeout,
        )
