"""
Interoperable CSS helpers.

Plugins exchange imports and exports through two low-level rule shapes:

    :import("./other.css") { alias: exportedName; }
    :export { localName: value; }

This module creates and recognizes those rules and substitutes symbols in
declaration values and media queries.
"""

import re
from collections.abc import Mapping

import tinycss2

from stylescope.engine.nodes import AtRule, Declaration, Node, Root, Rule

IMPORT_RULE_RE = re.compile(r"^:import\((.+)\)$")
EXPORT_SELECTOR = ":export"
COMPOSES_PROP_RE = re.compile(r"^(composes|compose-with)$", re.IGNORECASE)
KEYFRAMES_RE = re.compile(r"^(-\w+-)?keyframes$", re.IGNORECASE)


def unquote(value: str) -> str:
    """Strip one pair of surrounding quotes, if present."""
    return re.sub(r"^['\"]|['\"]$", "", value.strip())


def is_import_rule(node: Node) -> bool:
    return isinstance(node, Rule) and IMPORT_RULE_RE.match(node.selector) is not None


def is_export_rule(node: Node) -> bool:
    return isinstance(node, Rule) and node.selector == EXPORT_SELECTOR


def is_icss_rule(node: Node) -> bool:
    return is_import_rule(node) or is_export_rule(node)


def import_path(rule: Rule) -> str:
    """Return the unquoted path of an ``:import(...)`` rule."""
    match = IMPORT_RULE_RE.match(rule.selector)
    if match is None:
        raise rule.error(f"Not an import rule: {rule.selector}")
    return unquote(match.group(1))


def create_import_rule(path: str, aliases: Mapping[str, str]) -> Rule:
    """Create an ``:import`` rule.

    Args:
        path: Path of the imported stylesheet, unquoted
        aliases: Mapping of local alias to the name exported by that stylesheet

    Returns:
        New import rule
    """
    rule = Rule(f':import("{path}")')
    for alias, name in aliases.items():
        rule.append(Declaration(alias, name))
    return rule


def create_export_rule(exports: Mapping[str, str]) -> Rule:
    rule = Rule(EXPORT_SELECTOR)
    for name, value in exports.items():
        rule.append(Declaration(name, value))
    return rule


def is_inside_keyframes(node: Node) -> bool:
    parent = node.parent
    while parent is not None:
        if isinstance(parent, AtRule) and KEYFRAMES_RE.match(parent.name):
            return True
        parent = parent.parent
    return False


def replace_value_symbols(value: str, replacements: Mapping[str, str]) -> str:
    """Substitute whole identifiers in a CSS value.

    Identifiers nested in functions and blocks are substituted as well; strings,
    numbers and every other token are left untouched.

    Args:
        value: CSS value text
        replacements: Mapping of identifier to replacement text

    Returns:
        Value with symbols substituted
    """
    if not replacements or not value:
        return value
    tokens = tinycss2.parse_component_value_list(value)
    if not _contains_symbol(tokens, replacements):
        return value
    return _serialize_replaced(tokens, replacements)


def replace_symbols(root: Root, replacements: Mapping[str, str]) -> None:
    """Substitute symbols in every declaration value and ``@media`` query."""
    if not replacements:
        return
    for decl in root.walk_decls():
        decl.value = replace_value_symbols(decl.value, replacements)
    for at_rule in root.walk_at_rules("media"):
        at_rule.params = replace_value_symbols(at_rule.params, replacements)


def _contains_symbol(tokens: list, replacements: Mapping[str, str]) -> bool:
    for token in tokens:
        if token.type == "ident" and token.value in replacements:
            return True
        children = _children(token)
        if children is not None and _contains_symbol(children, replacements):
            return True
    return False


def _children(token) -> list | None:
    if token.type == "function":
        return token.arguments
    if token.type in ("() block", "[] block", "{} block"):
        return token.content
    return None


def _serialize_replaced(tokens: list, replacements: Mapping[str, str]) -> str:
    chunks = []
    for token in tokens:
        if token.type == "ident" and token.value in replacements:
            chunks.append(replacements[token.value])
        elif token.type == "function":
            inner = _serialize_replaced(token.arguments, replacements)
            chunks.append(f"{tinycss2.serialize_identifier(token.name)}({inner})")
        elif token.type == "() block":
            chunks.append(f"({_serialize_replaced(token.content, replacements)})")
        elif token.type == "[] block":
            chunks.append(f"[{_serialize_replaced(token.content, replacements)}]")
        elif token.type == "{} block":
            chunks.append(f"{{{_serialize_replaced(token.content, replacements)}}}")
        else:
            chunks.append(token.serialize())
    return "".join(chunks)
