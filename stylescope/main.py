"""Command line interface for stylescope.

This module provides commands for resolving stylesheets into their CSS Modules
token maps and for inspecting the available syntaxes and plugins.
"""

import json
import os
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar, cast

import typer
from loguru import logger

from stylescope.config import (
    ProjectConfig,
    ResolverOptions,
    find_project_config,
    load_project_config,
)
from stylescope.errors import StyleScopeError
from stylescope.registry import list_plugins, list_syntaxes
from stylescope.resolver import require_css_module

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="stylescope",
    help=(
        "Resolve CSS Modules stylesheets into scoped class names. "
        "Commands: tokens, plugins."
    ),
    add_completion=False,
)


def _load_options(config: str, pattern: str, context: str) -> ResolverOptions:
    """Merge the project config with command line overrides.

    Args:
        config: Explicit config file path, or "" to look in the context directory
        pattern: Scoped name pattern override, or ""
        context: Project directory override, or ""

    Returns:
        Resolver options
    """
    project_root = os.path.abspath(context or os.getcwd())

    project_config: ProjectConfig | None
    if config:
        project_config = load_project_config(config)
    else:
        project_config = find_project_config(project_root)

    options = project_config.options if project_config else ResolverOptions()
    if project_config and project_config.path and options.context:
        # Relative contexts in the config file are relative to the file itself
        config_dir = os.path.dirname(os.path.abspath(project_config.path))
        options = replace(options, context=os.path.join(config_dir, options.context))
    if context or not options.context:
        options = replace(options, context=project_root)
    if pattern:
        options = replace(options, generate_scoped_name=pattern)

    logger.debug(f"Resolver context: {options.context}")
    return options


@typed_command(app.command("tokens"))
def show_tokens(
    stylesheet: str = typer.Argument(..., help="Stylesheet to resolve"),
    config: str = typer.Option(
        "", "--config", "-c", help="Project config file (default: stylescope.config.yaml)"
    ),
    pattern: str = typer.Option(
        "", "--pattern", "-p", help="Scoped name pattern, e.g. [name]__[local]"
    ),
    context: str = typer.Option(
        "", "--context", help="Project directory (default: current directory)"
    ),
    output: str = typer.Option("", "--output", "-o", help="Write JSON to this file"),
) -> None:
    """Print the token map of a stylesheet as JSON.

    Example: stylescope tokens src/button.css --pattern "[name]__[local]"
    """
    try:
        options = _load_options(config, pattern, context)
        tokens = require_css_module(stylesheet, options)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e.filename}")
        raise typer.Exit(1) from e
    except StyleScopeError as e:
        logger.error(f"Failed to resolve {stylesheet}: {e}")
        raise typer.Exit(1) from e

    text = json.dumps(tokens, indent=2)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Tokens written to {output}")
    else:
        typer.echo(text)


@typed_command(app.command("plugins"))
def show_plugins() -> None:
    """List the registered syntaxes and plugins."""
    typer.echo("Syntaxes:")
    for name in list_syntaxes():
        typer.echo(f"  {name}")
    typer.echo("Plugins:")
    for name in list_plugins():
        typer.echo(f"  {name}")


if __name__ == "__main__":
    app()
