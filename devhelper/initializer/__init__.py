"""devhelper initializer -- creates starter projects from templates.

Quick usage::

    from devhelper.config import Config
    from devhelper.initializer import Initializer, default_registry
    from devhelper.models import ProjectRequest, TemplateId
    from devhelper.prompts import StaticPrompter

    config = Config()
    initializer = Initializer(default_registry(config), StaticPrompter())
    outcome = await initializer.run(
        ProjectRequest(
            template_id=TemplateId.STATIC_WEB,
            project_name="demo",
            working_directory=config.working_directory,
        )
    )
"""

from devhelper.initializer.orchestrator import Initializer, exit_code_for, report
from devhelper.initializer.registry import TemplateRegistry, default_registry
from devhelper.initializer.templates import TemplateRenderer

__all__ = [
    "Initializer",
    "TemplateRegistry",
    "TemplateRenderer",
    "default_registry",
    "exit_code_for",
    "report",
]
