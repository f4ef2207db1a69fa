"""
Exceptions and error handling for stylescope.

This module defines the exceptions raised while loading plugins, compiling the
indented dialect and transforming stylesheets.
"""

import os
from typing import Any


class StyleScopeError(Exception):
    """Base exception for every error raised by stylescope.

    The error optionally records the stylesheet and line it originated from and
    appends that location to the message.

    Examples:
        >>> raise StyleScopeError("Unknown word", source_path="a.css", line=3)
        StyleScopeError: Unknown word in a.css at line 3
    """

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        line: int | None = None,
    ):
        """Initialize the exception with a message and optional location.

        Args:
            message: The error message
            source_path: Path of the stylesheet where the error occurred
            line: Line number in the stylesheet, starting at 1
        """
        self.message = message
        self.source_path = source_path
        self.line = line

        location_info = ""
        if source_path:
            location_info = f" in {os.path.basename(source_path)}"
            if line:
                location_info += f" at line {line}"

        super().__init__(f"{message}{location_info}")


class PluginLoadError(StyleScopeError, ImportError):
    """Raised when a named syntax or plugin cannot be resolved."""

    def __init__(self, message: str, reference: str | None = None):
        super().__init__(message)
        self.reference = reference


class DialectCompileError(StyleScopeError):
    """Raised when the indented-syntax compiler reports an error.

    The message carries the compiler's own report verbatim.
    """


class TransformError(StyleScopeError):
    """Raised by the transform engine or a plugin for malformed input."""

    @classmethod
    def from_node(cls, message: str, node: Any) -> "TransformError":
        """Create an error located at an engine node.

        Args:
            message: The error message
            node: Node of the stylesheet tree where the error occurred

        Returns:
            A new error carrying the node's source path and line
        """
        root = node.root() if hasattr(node, "root") else None
        source_path = getattr(root, "source_path", None)
        return cls(message, source_path=source_path, line=getattr(node, "line", None))


class ImportCycleError(TransformError):
    """Raised when ``composes ... from`` references form a cycle."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        names = " -> ".join(os.path.basename(path) for path in chain)
        super().__init__(f"Circular composition detected: {names}", source_path=chain[0])
