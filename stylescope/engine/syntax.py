"""
Parsers and printers for the transform engine.

A syntax turns stylesheet text into a tree of engine nodes and prints it back.
The default syntax reads plain CSS through tinycss2; alternate syntaxes can be
registered by name and selected per file extension.
"""

import os
from abc import ABC, abstractmethod
from typing import Any

import sass
import tinycss2
from loguru import logger

from stylescope.engine.nodes import AtRule, Comment, Container, Declaration, Node, Root, Rule
from stylescope.errors import TransformError

# At-rules whose block holds declarations rather than nested rules
DECLARATION_AT_RULES = {
    "font-face",
    "page",
    "counter-style",
    "property",
    "viewport",
    "font-palette-values",
    "position-try",
}

INDENT = "  "


class Syntax(ABC):
    """Base class for stylesheet syntaxes."""

    name = "syntax"

    @abstractmethod
    def parse(self, css: str, source_path: str | None = None) -> Root:
        """Parse stylesheet text into an engine tree."""
        ...

    def stringify(self, root: Root) -> str:
        """Print an engine tree as plain CSS. Default: indented CSS."""
        lines: list[str] = []
        for node in root.nodes:
            _stringify_node(node, 0, lines)
        return "\n".join(lines) + "\n" if lines else ""


class CssSyntax(Syntax):
    """Plain CSS syntax backed by tinycss2."""

    name = "css"

    def parse(self, css: str, source_path: str | None = None) -> Root:
        root = Root(source_path=source_path, css=css)
        for item in tinycss2.parse_stylesheet(css):
            self._append(root, item, source_path)
        return root

    def _append(self, parent: Container, item: Any, source_path: str | None) -> None:
        """Convert a tinycss2 node and append it to the parent container."""
        if item.type == "whitespace":
            return
        if item.type == "error":
            raise TransformError(item.message, source_path=source_path, line=item.source_line)

        node: Node
        children: list = []
        if item.type == "comment":
            node = Comment(item.value, line=item.source_line, column=item.source_column)
        elif item.type == "declaration":
            node = Declaration(
                item.name,
                tinycss2.serialize(item.value).strip(),
                important=item.important,
                line=item.source_line,
                column=item.source_column,
            )
        elif item.type == "qualified-rule":
            node = Rule(
                tinycss2.serialize(item.prelude).strip(),
                line=item.source_line,
                column=item.source_column,
            )
            children = tinycss2.parse_blocks_contents(item.content)
        elif item.type == "at-rule":
            node = AtRule(
                item.at_keyword,
                tinycss2.serialize(item.prelude).strip(),
                has_block=item.content is not None,
                line=item.source_line,
                column=item.source_column,
            )
            if item.content is not None:
                if item.lower_at_keyword in DECLARATION_AT_RULES or _in_style_rule(parent):
                    children = tinycss2.parse_blocks_contents(item.content)
                else:
                    children = tinycss2.parse_rule_list(item.content)
        else:
            raise TransformError(
                f"Unexpected {item.type} token",
                source_path=source_path,
                line=item.source_line,
            )

        parent.append(node)
        for child in children:
            self._append(node, child, source_path)


class ScssSyntax(CssSyntax):
    """SCSS syntax: the source is compiled with libsass, then parsed as CSS."""

    name = "scss"

    def parse(self, css: str, source_path: str | None = None) -> Root:
        include_paths = [os.path.dirname(source_path)] if source_path else []
        logger.debug(f"Compiling SCSS source: {source_path}")
        try:
            compiled = sass.compile(
                string=css, include_paths=include_paths, output_style="expanded"
            )
        except sass.CompileError as e:
            raise TransformError(str(e), source_path=source_path) from e

        root = super().parse(compiled, source_path)
        root.css = css
        return root


def _in_style_rule(node: Container | None) -> bool:
    """Whether the node is a rule or nested inside one."""
    while node is not None:
        if isinstance(node, Rule):
            return True
        node = node.parent
    return False


def _stringify_node(node: Node, depth: int, lines: list[str]) -> None:
    indent = INDENT * depth
    if isinstance(node, Comment):
        lines.append(f"{indent}/*{node.text}*/")
    elif isinstance(node, Declaration):
        important = " !important" if node.important else ""
        lines.append(f"{indent}{node.prop}: {node.value}{important};")
    elif isinstance(node, Rule):
        lines.append(f"{indent}{node.selector} {{")
        for child in node.nodes:
            _stringify_node(child, depth + 1, lines)
        lines.append(f"{indent}}}")
    elif isinstance(node, AtRule):
        header = f"{indent}@{node.name} {node.params}" if node.params else f"{indent}@{node.name}"
        if not node.has_block:
            lines.append(f"{header};")
            return
        lines.append(f"{header} {{")
        for child in node.nodes:
            _stringify_node(child, depth + 1, lines)
        lines.append(f"{indent}}}")


CSS_SYNTAX = CssSyntax()
