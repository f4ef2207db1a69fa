"""Turn ``composes ... from`` declarations into ``:import`` rules.

    .button { composes: base rounded from "./shared.css"; }

becomes

    :import("./shared.css") { i__imported_base_0: base; i__imported_rounded_1: rounded; }
    .button { composes: i__imported_base_0 i__imported_rounded_1; }

``composes: x from global`` is rewritten to ``composes: global(x)``.
"""

import re
from collections.abc import Callable

from stylescope.engine.icss import (
    COMPOSES_PROP_RE,
    create_import_rule,
    import_path,
    is_import_rule,
    unquote,
)
from stylescope.engine.nodes import Declaration, Root
from stylescope.engine.processor import Plugin, Result

COMPOSES_FROM_RE = re.compile(r"^(.+?)\s+from\s+(\"[^\"]*\"|'[^']*'|global)$", re.DOTALL)


def _default_imported_name(name: str, index: int) -> str:
    return f"i__imported_{re.sub(r'[^a-zA-Z0-9_]', '_', name)}_{index}"


class ExtractImports(Plugin):
    """Extract cross-file composition into ICSS imports."""

    name = "modules-extract-imports"

    def __init__(self, create_imported_name: Callable[[str, int], str] | None = None):
        self.create_imported_name = create_imported_name or _default_imported_name

    def __call__(self, root: Root, result: Result) -> None:
        # path -> {imported name: alias}
        imports: dict[str, dict[str, str]] = {}
        index = 0

        for decl in root.walk_decls(COMPOSES_PROP_RE):
            match = COMPOSES_FROM_RE.match(decl.value.strip())
            if match is None:
                continue

            symbols, path = match.groups()
            names = symbols.split()

            if path == "global":
                decl.value = " ".join(f"global({name})" for name in names)
                continue

            aliases = imports.setdefault(unquote(path), {})
            local_names = []
            for name in names:
                if name not in aliases:
                    aliases[name] = self.create_imported_name(name, index)
                    index += 1
                local_names.append(aliases[name])
            decl.value = " ".join(local_names)

        if not imports:
            return

        existing = {import_path(node): node for node in root.each() if is_import_rule(node)}
        new_rules = []
        for path, aliases in imports.items():
            rule = existing.get(path)
            if rule is None:
                new_rules.append(create_import_rule(path, {a: n for n, a in aliases.items()}))
                continue
            for name, alias in aliases.items():
                rule.append(Declaration(alias, name))
        root.prepend(*new_rules)
