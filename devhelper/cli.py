"""Command-line entry point: ``devhelper init``."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from pydantic import ValidationError

from devhelper.config import Config
from devhelper.initializer import Initializer, default_registry, exit_code_for, report
from devhelper.initializer.registry import TemplateRegistry
from devhelper.models import Outcome, ProjectRequest
from devhelper.prompts import Prompter, PromptError, RichPrompter, StaticPrompter
from devhelper.utils import console, print_error, print_header

EXIT_INTERRUPTED = 130


def build_prompter() -> Prompter:
    """Interactive prompts unless DEVHELPER_NONINTERACTIVE=1."""
    if os.environ.get("DEVHELPER_NONINTERACTIVE") == "1":
        return StaticPrompter.from_env()
    return RichPrompter(console)


async def init_command(config: Config, registry: TemplateRegistry, prompter: Prompter) -> Outcome:
    """Gather the answers and create the project."""
    template_id = prompter.ask_template(registry.template_ids())
    project_name = prompter.ask_project_name()
    request = ProjectRequest(
        template_id=template_id,
        project_name=project_name,
        working_directory=config.working_directory,
    )
    return await Initializer(registry, prompter).run(request)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devhelper",
        description="CLI to speed up your project setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  devhelper init\n"
            "  DEVHELPER_NONINTERACTIVE=1 DEVHELPER_TEMPLATE=static-web \\\n"
            "    DEVHELPER_PROJECT_NAME=demo devhelper init\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("init", help="Create a new project from a template")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``devhelper`` and ``python -m devhelper``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "init":
        parser.print_help()
        sys.exit(2)

    print_header("DevHelper CLI - Project Assistant")

    try:
        config = Config.from_env()
    except (ValidationError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    registry = default_registry(config)
    prompter = build_prompter()

    try:
        outcome = asyncio.run(init_command(config, registry, prompter))
    except KeyboardInterrupt:
        # The target directory may be left partially populated.
        print_error("Interrupted.")
        sys.exit(EXIT_INTERRUPTED)
    except PromptError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        print_error(f"Invalid project request: {messages}")
        sys.exit(1)

    report(outcome, console)
    sys.exit(exit_code_for(outcome))


if __name__ == "__main__":
    main()
