"""Maps each ``TemplateId`` to the strategy that provisions it."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from devhelper.config import Config
from devhelper.initializer.strategies import (
    DelegatedProcessStrategy,
    GitCloneStrategy,
    StaticFilesStrategy,
    TemplateStrategy,
)
from devhelper.initializer.templates import TemplateRenderer
from devhelper.models import CommandSpec, TemplateId, UnknownTemplateError


STATIC_WEB_FILES: tuple[str, ...] = ("index.html", "style.css", "script.js")
NODE_MINIMAL_FILES: tuple[str, ...] = ("index.js",)


class TemplateRegistry:
    """Fixed lookup table from template identifiers to strategies."""

    def __init__(self, strategies: Mapping[TemplateId, TemplateStrategy]) -> None:
        self._strategies = dict(strategies)

    def lookup(self, template_id: TemplateId | str) -> TemplateStrategy:
        """Return the strategy for *template_id*.

        Raw strings are accepted for programmatic callers and must match a
        ``TemplateId`` value.

        Raises:
            UnknownTemplateError: If the identifier is not registered.
        """
        try:
            key = TemplateId(template_id)
        except ValueError:
            raise UnknownTemplateError(template_id) from None
        try:
            return self._strategies[key]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    def template_ids(self) -> list[TemplateId]:
        """Registered identifiers in ``TemplateId`` declaration order."""
        return [tid for tid in TemplateId if tid in self._strategies]


def default_registry(config: Config, renderer: TemplateRenderer | None = None) -> TemplateRegistry:
    """Build the registry with every built-in template."""
    renderer = renderer or TemplateRenderer()
    tools = config.toolchain
    timeout = config.command_timeout

    def create_vite(target: Path) -> CommandSpec:
        return CommandSpec(
            program=tools.npx,
            args=["create-vite@latest", target.name, "--template", tools.react_template],
            cwd=target.parent,
        )

    def cargo_new(target: Path) -> CommandSpec:
        return CommandSpec(program=tools.cargo, args=["new", target.name], cwd=target.parent)

    return TemplateRegistry({
        TemplateId.REACT_VITE: DelegatedProcessStrategy(
            "React",
            create_vite,
            lambda name: [f"cd {name}", "npm install", "npm run dev"],
            timeout=timeout,
        ),
        TemplateId.NODE_MINIMAL: StaticFilesStrategy(
            "Node",
            renderer.load_fileset(TemplateId.NODE_MINIMAL.value, NODE_MINIMAL_FILES),
            lambda name: [f"cd {name}", "node index.js"],
        ),
        TemplateId.STATIC_WEB: StaticFilesStrategy(
            "HTML + CSS + JS",
            renderer.load_fileset(TemplateId.STATIC_WEB.value, STATIC_WEB_FILES),
            lambda name: [f"cd {name}", "open index.html in a browser"],
        ),
        TemplateId.RUST_CRATE: DelegatedProcessStrategy(
            "Rust",
            cargo_new,
            lambda name: [f"cd {name}", "cargo run"],
            timeout=timeout,
        ),
        TemplateId.GIT_CLONE: GitCloneStrategy(
            git=tools.git,
            installer=tools.npm,
            manifest_file=tools.manifest_file,
            timeout=timeout,
        ),
    })
