"""Stylesheet tree nodes used by the transform engine.

The tree mirrors the shape plugins expect from a PostCSS-like engine: a root
containing rules, at-rules, declarations and comments. Selectors, values and
at-rule params are stored as CSS text so plugins can rewrite them freely.
"""

import re
from collections.abc import Iterator

from stylescope.errors import TransformError


class Node:
    """Base class for every node in the tree."""

    type = "node"

    def __init__(self, line: int | None = None, column: int | None = None):
        self.parent: Container | None = None
        self.line = line
        self.column = column

    def root(self) -> "Node":
        """Return the topmost ancestor of this node."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def remove(self) -> None:
        """Detach this node from its parent."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def error(self, message: str) -> TransformError:
        """Build a TransformError located at this node."""
        return TransformError.from_node(message, self)


class Container(Node):
    """Node holding an ordered list of child nodes."""

    def __init__(
        self,
        nodes: list[Node] | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        super().__init__(line, column)
        self.nodes: list[Node] = []
        for node in nodes or ():
            self.append(node)

    def append(self, *nodes: Node) -> None:
        for node in nodes:
            node.remove()
            node.parent = self
            self.nodes.append(node)

    def prepend(self, *nodes: Node) -> None:
        for node in reversed(nodes):
            node.remove()
            node.parent = self
            self.nodes.insert(0, node)

    def remove_child(self, node: Node) -> None:
        self.nodes.remove(node)
        node.parent = None

    def each(self) -> Iterator[Node]:
        """Iterate over direct children; children may be removed meanwhile."""
        yield from list(self.nodes)

    def walk(self) -> Iterator[Node]:
        """Iterate depth-first over all descendants.

        Nodes removed during iteration are not descended into.
        """
        for node in list(self.nodes):
            if node.parent is not self:
                continue
            yield node
            if isinstance(node, Container) and node.parent is self:
                yield from node.walk()

    def walk_rules(self) -> Iterator["Rule"]:
        for node in self.walk():
            if isinstance(node, Rule):
                yield node

    def walk_decls(self, prop: str | re.Pattern[str] | None = None) -> Iterator["Declaration"]:
        """Iterate over declarations, optionally filtered by property.

        Args:
            prop: Exact property name or compiled pattern to match against

        Yields:
            Matching declarations
        """
        for node in self.walk():
            if not isinstance(node, Declaration):
                continue
            if prop is None:
                yield node
            elif isinstance(prop, re.Pattern):
                if prop.search(node.prop):
                    yield node
            elif node.prop.lower() == prop:
                yield node

    def walk_at_rules(self, name: str | re.Pattern[str] | None = None) -> Iterator["AtRule"]:
        for node in self.walk():
            if not isinstance(node, AtRule):
                continue
            if name is None:
                yield node
            elif isinstance(name, re.Pattern):
                if name.search(node.name):
                    yield node
            elif node.name.lower() == name:
                yield node

    def walk_comments(self) -> Iterator["Comment"]:
        for node in self.walk():
            if isinstance(node, Comment):
                yield node


class Root(Container):
    """Root of a parsed stylesheet.

    Attributes:
        source_path: Path the stylesheet was read from, if any
        css: Text the tree was parsed from
        tokens: Local-name to scoped-name mapping set by the modules parser
    """

    type = "root"

    def __init__(
        self,
        nodes: list[Node] | None = None,
        source_path: str | None = None,
        css: str = "",
    ):
        super().__init__(nodes)
        self.source_path = source_path
        self.css = css
        self.tokens: dict[str, str] = {}


class Rule(Container):
    """Qualified rule, e.g. ``.title { color: red }``."""

    type = "rule"

    def __init__(
        self,
        selector: str,
        nodes: list[Node] | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        super().__init__(nodes, line, column)
        self.selector = selector

    def __repr__(self) -> str:
        return f"<Rule {self.selector!r}>"


class AtRule(Container):
    """At-rule with or without a block, e.g. ``@media`` or ``@value``."""

    type = "atrule"

    def __init__(
        self,
        name: str,
        params: str = "",
        nodes: list[Node] | None = None,
        has_block: bool = False,
        line: int | None = None,
        column: int | None = None,
    ):
        super().__init__(nodes, line, column)
        self.name = name
        self.params = params
        self.has_block = has_block or bool(nodes)

    def __repr__(self) -> str:
        return f"<AtRule @{self.name} {self.params!r}>"


class Declaration(Node):
    """Property declaration, e.g. ``color: red !important``."""

    type = "decl"

    def __init__(
        self,
        prop: str,
        value: str,
        important: bool = False,
        line: int | None = None,
        column: int | None = None,
    ):
        super().__init__(line, column)
        self.prop = prop
        self.value = value
        self.important = important

    def __repr__(self) -> str:
        return f"<Declaration {self.prop}: {self.value!r}>"


class Comment(Node):
    """Comment, stored without its ``/*`` and ``*/`` markers."""

    type = "comment"

    def __init__(self, text: str, line: int | None = None, column: int | None = None):
        super().__init__(line, column)
        self.text = text
