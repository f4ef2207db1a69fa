"""
Transform pipeline for stylesheets.

A Processor holds an ordered list of plugins. Processing parses the source with
a syntax, hands the tree to every plugin in turn and returns a Result carrying
the transformed tree and any warnings the plugins reported.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Union

from loguru import logger

from stylescope.engine.nodes import Node, Root
from stylescope.engine.syntax import CSS_SYNTAX, Syntax


@dataclass
class TransformWarning:
    """Non-fatal diagnostic reported by a plugin.

    Attributes:
        text: Human readable message
        plugin: Name of the plugin that reported it
        line: Line of the node it refers to, if known
        source_path: Stylesheet it refers to, if known
    """

    text: str
    plugin: str | None = None
    line: int | None = None
    source_path: str | None = None

    def __str__(self) -> str:
        location = ""
        if self.source_path:
            location = f"{self.source_path}:{self.line}: " if self.line else f"{self.source_path}: "
        prefix = f"{self.plugin}: " if self.plugin else ""
        return f"{location}{prefix}{self.text}"


class Result:
    """Outcome of running a Processor over one stylesheet."""

    def __init__(self, processor: "Processor", root: Root, syntax: Syntax):
        self.processor = processor
        self.root = root
        self.syntax = syntax
        self.messages: list[TransformWarning] = []

    def warn(self, text: str, plugin: str | None = None, node: Node | None = None) -> TransformWarning:
        """Record a warning for the current stylesheet.

        Args:
            text: Warning message
            plugin: Name of the reporting plugin
            node: Node the warning refers to

        Returns:
            The recorded warning
        """
        warning = TransformWarning(
            text=text,
            plugin=plugin,
            line=node.line if node is not None else None,
            source_path=self.root.source_path,
        )
        self.messages.append(warning)
        return warning

    def warnings(self) -> list[TransformWarning]:
        return list(self.messages)

    @property
    def tokens(self) -> dict[str, str]:
        return self.root.tokens

    @property
    def css(self) -> str:
        return self.syntax.stringify(self.root)


class Plugin(ABC):
    """Base class for transform plugins.

    A plugin receives the parsed tree and the Result, and mutates the tree in
    place. Plain callables with the same signature are accepted as well.
    """

    name = "plugin"

    @abstractmethod
    def __call__(self, root: Root, result: Result) -> None:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"


PluginLike = Union[Plugin, Callable[[Root, Result], None]]


class Processor:
    """Ordered chain of plugins applied to a stylesheet."""

    def __init__(self, plugins: Iterable[PluginLike] = ()):
        self.plugins: list[PluginLike] = []
        for plugin in plugins:
            self.use(plugin)

    def use(self, plugin: PluginLike | type[Plugin]) -> "Processor":
        """Append a plugin to the chain.

        Plugin classes are instantiated without arguments.
        """
        if isinstance(plugin, type) and issubclass(plugin, Plugin):
            plugin = plugin()
        if not callable(plugin):
            raise TypeError(f"{plugin!r} is not a valid plugin")
        self.plugins.append(plugin)
        return self

    def process(
        self,
        css: str,
        source_path: str | None = None,
        syntax: Syntax | None = None,
    ) -> Result:
        """Parse the stylesheet and run every plugin over it.

        Args:
            css: Stylesheet text
            source_path: Path the text was read from
            syntax: Parser/printer to use (default: plain CSS)

        Returns:
            Result holding the transformed tree and warnings

        Raises:
            TransformError: If the source is malformed or a plugin rejects it
        """
        syntax = syntax or CSS_SYNTAX
        root = syntax.parse(css, source_path)
        result = Result(self, root, syntax)
        for plugin in self.plugins:
            logger.debug(f"Running {_plugin_name(plugin)} on {source_path or '<string>'}")
            plugin(root, result)
        return result


def _plugin_name(plugin: PluginLike) -> str:
    return getattr(plugin, "name", None) or getattr(plugin, "__name__", repr(plugin))
