"""
Configuration for stylescope.

Holds the per-extension filetype options, the resolver options accepted by
``require_css_module`` and the optional project configuration file.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml
from loguru import logger

from stylescope.errors import StyleScopeError
from stylescope.naming import ScopedNameGenerator

PROJECT_CONFIG_FILENAME = "stylescope.config.yaml"

# A plugin reference, or a (reference, configuration) pair
PluginEntry = Union[str, tuple[str, Any]]


@dataclass(frozen=True)
class FiletypeOptions:
    """Options applied to stylesheets with a given extension.

    Attributes:
        syntax: Name of the syntax used to parse the file
        plugins: Extra plugins run before the CSS Modules chain
    """

    syntax: str | None = None
    plugins: tuple[PluginEntry, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FiletypeOptions":
        """Build filetype options from a plain mapping.

        Args:
            data: Mapping with optional ``syntax`` and ``plugins`` keys

        Returns:
            Filetype options

        Raises:
            StyleScopeError: If a plugin entry is malformed
        """
        data = data or {}
        plugins: list[PluginEntry] = []
        for entry in data.get("plugins") or ():
            if isinstance(entry, str):
                plugins.append(entry)
            elif isinstance(entry, (list, tuple)) and len(entry) == 2 \
                    and isinstance(entry[0], str):
                plugins.append((entry[0], entry[1]))
            else:
                raise StyleScopeError(
                    f"Invalid plugin entry: {entry!r}. "
                    "Expected a name or a [name, configuration] pair"
                )
        return cls(syntax=data.get("syntax"), plugins=tuple(plugins))


@dataclass
class ResolverOptions:
    """Options for resolving a stylesheet into its token map.

    Attributes:
        filetypes: Filetype options keyed by extension, dot included
        generate_scoped_name: Scoped name generator, or a naming pattern
        context: Project directory; defaults to the current working directory
    """

    filetypes: dict[str, FiletypeOptions] = field(default_factory=dict)
    generate_scoped_name: ScopedNameGenerator | str | None = None
    context: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ResolverOptions":
        data = data or {}
        filetypes = {
            extension: value if isinstance(value, FiletypeOptions)
            else FiletypeOptions.from_mapping(value)
            for extension, value in (data.get("filetypes") or {}).items()
        }
        return cls(
            filetypes=filetypes,
            generate_scoped_name=data.get("generate_scoped_name"),
            context=data.get("context"),
        )

    @classmethod
    def coerce(cls, options: "ResolverOptions | Mapping[str, Any] | None") -> "ResolverOptions":
        """Accept options as an instance, a plain mapping or None."""
        if isinstance(options, ResolverOptions):
            return options
        return cls.from_mapping(options)

    @property
    def project_root(self) -> str:
        return os.path.abspath(self.context or os.getcwd())


@dataclass
class ProjectConfig:
    """Contents of the project configuration file.

    Attributes:
        ui: Theme values exposed to indented-dialect stylesheets as ``$UI``
        options: Resolver defaults declared in the file
        path: File the configuration was read from
    """

    ui: dict[str, Any] | None = None
    options: ResolverOptions = field(default_factory=ResolverOptions)
    path: str | None = None


def load_project_config(path: str | os.PathLike[str]) -> ProjectConfig:
    """Load a project configuration file.

    Args:
        path: Path to a YAML file

    Returns:
        Parsed configuration

    Raises:
        StyleScopeError: If the file is not valid YAML or not a mapping
    """
    logger.debug(f"Loading project config: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise StyleScopeError(f"Invalid project config: {e}", source_path=str(path)) from e

    if not isinstance(data, Mapping):
        raise StyleScopeError("Project config must be a mapping", source_path=str(path))

    ui = data.get("ui")
    if ui is not None and not isinstance(ui, Mapping):
        raise StyleScopeError("'ui' must be a mapping", source_path=str(path))

    return ProjectConfig(
        ui=dict(ui) if ui else None,
        options=ResolverOptions.from_mapping(data),
        path=str(path),
    )


def find_project_config(project_root: str | os.PathLike[str]) -> ProjectConfig | None:
    """Load the conventional project config from a project root, if present."""
    config_path = Path(project_root) / PROJECT_CONFIG_FILENAME
    if not config_path.is_file():
        return None
    return load_project_config(config_path)
