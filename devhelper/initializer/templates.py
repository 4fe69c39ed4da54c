"""Jinja2 loading of the fixed file sets shipped with devhelper.

Each static template is a directory under ``devhelper/initializer/templates/``
holding one ``.j2`` file per generated file.  The files contain no template
variables, so rendering the same template always yields the same bytes.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from devhelper.models import FileEntry


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders the ``.j2`` files of a static template into ``FileEntry`` objects."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
        )

    def render(self, template_path: str) -> str:
        """Render a single template, e.g. ``"static-web/index.html.j2"``."""
        template = self.env.get_template(template_path)
        return template.render()

    def load_fileset(self, prefix: str, filenames: tuple[str, ...]) -> tuple[FileEntry, ...]:
        """Render ``<prefix>/<name>.j2`` for every name, preserving order.

        Raises:
            jinja2.TemplateNotFound: If one of the files is not shipped.
        """
        return tuple(
            FileEntry(relative_path=name, content=self.render(f"{prefix}/{name}.j2"))
            for name in filenames
        )
