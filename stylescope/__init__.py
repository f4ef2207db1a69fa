from stylescope.config import FiletypeOptions, ProjectConfig, ResolverOptions
from stylescope.errors import (
    DialectCompileError,
    ImportCycleError,
    PluginLoadError,
    StyleScopeError,
    TransformError,
)
from stylescope.naming import create_name_generator
from stylescope.registry import register_plugin, register_syntax
from stylescope.resolver import TokenResolver, require_css_module

__version__ = "0.1.0"


__all__ = [
    "DialectCompileError",
    "FiletypeOptions",
    "ImportCycleError",
    "PluginLoadError",
    "ProjectConfig",
    "ResolverOptions",
    "StyleScopeError",
    "TokenResolver",
    "TransformError",
    "create_name_generator",
    "register_plugin",
    "register_syntax",
    "require_css_module",
]
