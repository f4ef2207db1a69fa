"""Resolve ICSS imports and collect exports into the token map.

Each ``:import("path")`` rule is resolved through the fetch callback, which
returns the token map of the imported stylesheet. The aliases declared in the
rule are substituted everywhere, and the ``:export`` rules become
``root.tokens``.
"""

from collections.abc import Callable, Mapping

from stylescope.engine.icss import (
    import_path,
    is_export_rule,
    is_import_rule,
    replace_symbols,
    replace_value_symbols,
)
from stylescope.engine.nodes import Declaration, Root
from stylescope.engine.processor import Plugin, Result

# fetch(path relative to the importer, importer path) -> token map
Fetcher = Callable[[str, str], Mapping[str, str]]


class ModulesParser(Plugin):
    """Resolve imports with a fetcher and expose exports as tokens."""

    name = "modules-parser"

    def __init__(self, fetch: Fetcher):
        self.fetch = fetch

    def __call__(self, root: Root, result: Result) -> None:
        translations: dict[str, str] = {}

        for node in root.each():
            if not is_import_rule(node):
                continue
            path = import_path(node)
            exports = self.fetch(path, root.source_path or "")
            for decl in node.nodes:
                if not isinstance(decl, Declaration):
                    continue
                if decl.value in exports:
                    translations[decl.prop] = exports[decl.value]
                else:
                    result.warn(
                        f'"{decl.value}" is not exported by "{path}"',
                        plugin=self.name,
                        node=decl,
                    )
            node.remove()

        tokens: dict[str, str] = {}
        for node in root.each():
            if not is_export_rule(node):
                continue
            for decl in node.nodes:
                if isinstance(decl, Declaration):
                    tokens[decl.prop] = decl.value
            node.remove()

        replace_symbols(root, translations)
        root.tokens = {
            name: replace_value_symbols(value, translations) for name, value in tokens.items()
        }
