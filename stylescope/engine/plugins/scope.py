"""Replace ``:local(...)`` names with generated scoped names.

Every class, id and keyframe name marked local is renamed through the scoped
name generator. Composition is resolved into the export list, and an
``:export`` rule mapping each local name to its scoped name(s) is appended.
"""

import re
from collections.abc import Callable

import tinycss2

from stylescope.engine.icss import (
    COMPOSES_PROP_RE,
    KEYFRAMES_RE,
    create_export_rule,
    is_icss_rule,
    is_import_rule,
    is_inside_keyframes,
)
from stylescope.engine.nodes import Declaration, Root, Rule
from stylescope.engine.processor import Plugin, Result

ScopedNameGenerator = Callable[[str, str, str], str]

LOCAL_VALUE_RE = re.compile(r":local\s*\((.+?)\)")
LOCAL_PARAMS_RE = re.compile(r"^\s*:local\s*\((.+?)\)\s*$")
SINGLE_LOCAL_CLASS_RE = re.compile(r"^\s*:local\(\s*\.([\w-]+)\s*\)\s*$")
GLOBAL_NAME_RE = re.compile(r"^global\(([^)]+)\)$")


def default_generate_scoped_name(name: str, path: str, css: str = "") -> str:
    """Generate ``_<sanitized path>__<name>``."""
    del css  # unused
    sanitized = re.sub(r"\.[^./\\]+$", "", path)
    sanitized = re.sub(r"[\W_]+", "_", sanitized).strip("_")
    return f"_{sanitized}__{name}".strip()


class Scope(Plugin):
    """Rename local names and build the export map."""

    name = "modules-scope"

    def __init__(self, generate_scoped_name: ScopedNameGenerator | None = None):
        self.generate_scoped_name = generate_scoped_name or default_generate_scoped_name

    def __call__(self, root: Root, result: Result) -> None:
        source_path = root.source_path or ""
        exports: dict[str, list[str]] = {}

        def export_scoped_name(name: str) -> str:
            scoped_name = self.generate_scoped_name(name, source_path, root.css)
            names = exports.setdefault(name, [])
            if scoped_name not in names:
                names.append(scoped_name)
            return scoped_name

        imported_names = {
            decl.prop
            for node in root.each()
            if is_import_rule(node)
            for decl in node.nodes
            if isinstance(decl, Declaration)
        }

        composing_rules: list[tuple[Rule, list[str] | None]] = []
        for rule in root.walk_rules():
            if is_icss_rule(rule) or is_inside_keyframes(rule):
                continue
            local_classes = _single_local_classes(rule.selector)
            rule.selector = _scope_selector(rule.selector, export_scoped_name)
            composing_rules.append((rule, local_classes))

        for rule, local_classes in composing_rules:
            for decl in [n for n in rule.nodes if isinstance(n, Declaration)]:
                if not COMPOSES_PROP_RE.match(decl.prop):
                    continue
                if local_classes is None:
                    raise decl.error(
                        "composition is only allowed when selector is single :local "
                        f'class name not in "{rule.selector}"'
                    )
                for local_class in local_classes:
                    self._compose(decl, exports.setdefault(local_class, []), exports, imported_names)
                decl.remove()

        for decl in root.walk_decls():
            if ":local" in decl.value:
                decl.value = LOCAL_VALUE_RE.sub(
                    lambda m: export_scoped_name(m.group(1).strip()), decl.value
                )

        for at_rule in root.walk_at_rules(KEYFRAMES_RE):
            match = LOCAL_PARAMS_RE.match(at_rule.params)
            if match:
                at_rule.params = export_scoped_name(match.group(1).strip())

        if exports:
            root.append(create_export_rule({k: " ".join(v) for k, v in exports.items()}))

    def _compose(
        self,
        decl: Declaration,
        target: list[str],
        exports: dict[str, list[str]],
        imported_names: set[str],
    ) -> None:
        for class_name in decl.value.split():
            global_match = GLOBAL_NAME_RE.match(class_name)
            if global_match:
                names = [global_match.group(1)]
            elif class_name in imported_names:
                names = [class_name]
            elif class_name in exports:
                names = exports[class_name]
            else:
                raise decl.error(
                    f'referenced class name "{class_name}" in {decl.prop} not found'
                )
            for name in names:
                if name not in target:
                    target.append(name)


def _single_local_classes(selector: str) -> list[str] | None:
    """Return the class names of a list of single local classes, else None."""
    classes = []
    for part in selector.split(","):
        match = SINGLE_LOCAL_CLASS_RE.match(part)
        if match is None:
            return None
        classes.append(match.group(1))
    return classes


def _scope_selector(selector: str, export_scoped_name: Callable[[str], str]) -> str:
    tokens = tinycss2.parse_component_value_list(selector)
    return _scope_tokens(tokens, export_scoped_name, local=False).strip()


def _scope_tokens(tokens: list, export_scoped_name: Callable[[str], str], local: bool) -> str:
    pieces: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None

        if token == ":" and following is not None and following.type == "function":
            if following.lower_name == "local":
                pieces.append(_scope_tokens(following.arguments, export_scoped_name, True).strip())
            else:
                inner = _scope_tokens(following.arguments, export_scoped_name, local)
                pieces.append(f":{tinycss2.serialize_identifier(following.name)}({inner})")
            i += 2
            continue

        if local and token == "." and following is not None and following.type == "ident":
            scoped_name = export_scoped_name(following.value)
            pieces.append(f".{tinycss2.serialize_identifier(scoped_name)}")
            i += 2
            continue

        if local and token.type == "hash" and token.is_identifier:
            scoped_name = export_scoped_name(token.value)
            pieces.append(f"#{tinycss2.serialize_identifier(scoped_name)}")
            i += 1
            continue

        pieces.append(token.serialize())
        i += 1

    return "".join(pieces)
