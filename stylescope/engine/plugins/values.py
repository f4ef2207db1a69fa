"""Shared values between stylesheets.

Handles ``@value`` definitions and imports:

    @value primary: #BF4040;
    @value small: (max-width: 599px);
    @value accent, secondary as brand from "./colors.css";

Definitions are substituted into declaration values and media queries and are
exported alongside the scoped class names. Imports become ``:import`` rules
that the modules parser resolves.
"""

import re
from collections.abc import Callable

from stylescope.engine.icss import (
    create_export_rule,
    create_import_rule,
    replace_symbols,
    replace_value_symbols,
    unquote,
)
from stylescope.engine.nodes import Root
from stylescope.engine.processor import Plugin, Result

VALUE_DEFINITION_RE = re.compile(r"(?:\s+|^)([\w-]+):?(.*?)$", re.DOTALL)
VALUE_IMPORTS_RE = re.compile(r"^(.+?|\([\s\S]+?\))\s+from\s+(\"[^\"]*\"|'[^']*'|[\w-]+)$")
VALUE_IMPORT_RE = re.compile(r"^([\w-]+)(?:\s+as\s+([\w-]+))?")


def _default_imported_name(name: str, index: int) -> str:
    return f"i__const_{re.sub(r'[^a-zA-Z0-9_]', '_', name)}_{index}"


class Values(Plugin):
    """Resolve ``@value`` definitions and imports."""

    name = "modules-values"

    def __init__(self, create_imported_name: Callable[[str, int], str] | None = None):
        self.create_imported_name = create_imported_name or _default_imported_name

    def __call__(self, root: Root, result: Result) -> None:
        definitions: dict[str, str] = {}
        imports: dict[str, dict[str, str]] = {}
        index = 0

        for at_rule in root.walk_at_rules("value"):
            params = at_rule.params.strip()
            imports_match = VALUE_IMPORTS_RE.match(params)
            if imports_match:
                names, path = imports_match.groups()
                if not path.startswith(("'", '"')):
                    path = definitions.get(path, path)
                path = unquote(path)
                aliases = imports.setdefault(path, {})

                for item in re.split(r",\s*", names.strip().strip("()")):
                    import_match = VALUE_IMPORT_RE.match(item.strip())
                    if import_match is None:
                        raise at_rule.error(f"@value statement {params!r} is invalid")
                    name, alias = import_match.groups()
                    local_name = alias or name
                    imported_name = self.create_imported_name(local_name, index)
                    index += 1
                    definitions[local_name] = imported_name
                    aliases[imported_name] = name
            else:
                definition_match = VALUE_DEFINITION_RE.match(params)
                if definition_match is None or not definition_match.group(2).strip():
                    result.warn(
                        f"Invalid value definition: {params}", plugin=self.name, node=at_rule
                    )
                    continue
                name, value = definition_match.groups()
                definitions[name] = replace_value_symbols(value.strip(), definitions)

            at_rule.remove()

        if not definitions:
            return

        replace_symbols(root, definitions)
        root.append(create_export_rule(definitions))
        root.prepend(*(create_import_rule(path, aliases) for path, aliases in imports.items()))
