"""Plugins for the transform engine.

The CSS Modules chain runs in this order: Values, LocalByDefault,
ExtractImports, Scope, ModulesParser.
"""

from stylescope.engine.plugins.discard_comments import DiscardComments
from stylescope.engine.plugins.extract_imports import ExtractImports
from stylescope.engine.plugins.local_by_default import LocalByDefault
from stylescope.engine.plugins.modules_parser import ModulesParser
from stylescope.engine.plugins.scope import Scope
from stylescope.engine.plugins.values import Values

__all__ = [
    "DiscardComments",
    "ExtractImports",
    "LocalByDefault",
    "ModulesParser",
    "Scope",
    "Values",
]
