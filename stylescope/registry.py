"""Registry of syntaxes and plugins.

Filetype options refer to syntaxes and plugins by name. Names are looked up in
the registration tables first; anything else is treated as an import reference
such as ``"package.module:attr"`` or ``"package.module.attr"``.
"""

import importlib
from collections.abc import Callable
from typing import Any

from loguru import logger

from stylescope.config import PluginEntry
from stylescope.engine.plugins import (
    DiscardComments,
    ExtractImports,
    LocalByDefault,
    ModulesParser,
    Scope,
    Values,
)
from stylescope.engine.processor import PluginLike
from stylescope.engine.syntax import CssSyntax, ScssSyntax, Syntax
from stylescope.errors import PluginLoadError

# Registry of plugin names to plugin factories
_PLUGIN_REGISTRY: dict[str, Callable[..., PluginLike]] = {
    DiscardComments.name: DiscardComments,
    Values.name: Values,
    LocalByDefault.name: LocalByDefault,
    ExtractImports.name: ExtractImports,
    Scope.name: Scope,
    ModulesParser.name: ModulesParser,
}

# Registry of syntax names to syntax classes or instances
_SYNTAX_REGISTRY: dict[str, type[Syntax] | Syntax] = {
    CssSyntax.name: CssSyntax,
    ScssSyntax.name: ScssSyntax,
}


def register_plugin(name: str, factory: Callable[..., PluginLike]) -> None:
    """Register a plugin factory under a name.

    Args:
        name: Name used in filetype options
        factory: Plugin class or function returning a plugin
    """
    _PLUGIN_REGISTRY[name] = factory


def register_syntax(name: str, syntax: type[Syntax] | Syntax) -> None:
    """Register a syntax class or instance under a name.

    Args:
        name: Name used in filetype options
        syntax: Syntax class or instance
    """
    _SYNTAX_REGISTRY[name] = syntax


def list_plugins() -> list[str]:
    return sorted(_PLUGIN_REGISTRY)


def list_syntaxes() -> list[str]:
    return sorted(_SYNTAX_REGISTRY)


def _import_reference(reference: str) -> Any:
    """Import an object from ``module:attr`` or ``module.attr``."""
    if ":" in reference:
        module_name, _, attr_path = reference.partition(":")
    else:
        module_name, _, attr_path = reference.rpartition(".")

    if not module_name or not attr_path:
        raise PluginLoadError(f"Cannot resolve '{reference}': not a registered name", reference)

    try:
        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as e:
        raise PluginLoadError(f"Cannot import '{reference}': {e}", reference) from e

    logger.debug(f"Imported {reference}")
    return obj


def load_plugin(entry: PluginEntry) -> PluginLike:
    """Instantiate a plugin from a filetype option entry.

    Args:
        entry: Plugin name, or a (name, configuration) pair

    Returns:
        A plugin ready to be added to a Processor

    Raises:
        PluginLoadError: If the plugin cannot be resolved or instantiated
    """
    if isinstance(entry, str):
        name, args = entry, ()
    else:
        name, config = entry
        args = (config,)

    factory = _PLUGIN_REGISTRY.get(name) or _import_reference(name)
    if not callable(factory):
        raise PluginLoadError(f"Plugin '{name}' is not callable", name)

    try:
        plugin = factory(*args)
    except TypeError as e:
        raise PluginLoadError(f"Cannot instantiate plugin '{name}': {e}", name) from e

    if not callable(plugin):
        raise PluginLoadError(f"Plugin '{name}' did not produce a callable plugin", name)
    return plugin


def load_plugins(entries: tuple[PluginEntry, ...] | list[PluginEntry]) -> list[PluginLike]:
    return [load_plugin(entry) for entry in entries]


def load_syntax(name: str) -> Syntax:
    """Resolve a syntax by name.

    Args:
        name: Registered syntax name or import reference

    Returns:
        A syntax instance

    Raises:
        PluginLoadError: If the syntax cannot be resolved
    """
    syntax = _SYNTAX_REGISTRY.get(name) or _import_reference(name)
    if isinstance(syntax, type) and issubclass(syntax, Syntax):
        syntax = syntax()
    if not isinstance(syntax, Syntax):
        raise PluginLoadError(f"'{name}' is not a stylesheet syntax", name)
    return syntax
