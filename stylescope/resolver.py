"""
Token resolution for CSS Modules.

This module provides the main entry point, ``require_css_module``, which reads
a stylesheet, runs it through the CSS Modules pipeline and returns the map of
local class names to scoped names. Stylesheets referenced through
``composes: ... from "./other.css"`` are resolved recursively.
"""

import os
from collections.abc import Mapping
from typing import Any

from loguru import logger

from stylescope.config import FiletypeOptions, ResolverOptions
from stylescope.dialect import compile_indented, is_indented_source
from stylescope.engine.plugins import ExtractImports, LocalByDefault, ModulesParser, Scope, Values
from stylescope.engine.processor import Processor
from stylescope.engine.syntax import Syntax
from stylescope.errors import ImportCycleError
from stylescope.naming import get_scoped_name_generator
from stylescope.registry import load_plugins, load_syntax


def get_extension(path: str) -> str:
    """Return the extension of a path, dot included, or "" without a dot."""
    index = path.rfind(".")
    return path[index:] if index != -1 else ""


def get_filetype_options(
    path: str, filetypes: Mapping[str, FiletypeOptions] | None
) -> FiletypeOptions | None:
    """Look up the filetype options for a path by its extension.

    Args:
        path: Stylesheet path
        filetypes: Filetype options keyed by extension

    Returns:
        Matching options, or None when there is no entry for the extension
    """
    if not filetypes:
        return None
    return filetypes.get(get_extension(path))


class TokenResolver:
    """Resolve stylesheets into token maps within a single call.

    The resolver builds one pipeline per file extension and shares it between
    the requested stylesheet and every stylesheet it composes from.
    """

    def __init__(self, options: ResolverOptions):
        self.options = options
        self.project_root = options.project_root
        self.generate_scoped_name = get_scoped_name_generator(
            options.generate_scoped_name, self.project_root
        )
        self._runners: dict[str, tuple[Processor, Syntax | None]] = {}
        self._active: list[str] = []

    def _get_runner(self, path: str) -> tuple[Processor, Syntax | None]:
        extension = get_extension(path)
        if extension not in self._runners:
            self._runners[extension] = self._create_runner(
                get_filetype_options(path, self.options.filetypes)
            )
        return self._runners[extension]

    def _create_runner(
        self, filetype_options: FiletypeOptions | None
    ) -> tuple[Processor, Syntax | None]:
        syntax = None
        extra_plugins = []
        if filetype_options is not None:
            if filetype_options.syntax:
                syntax = load_syntax(filetype_options.syntax)
            extra_plugins = load_plugins(filetype_options.plugins)

        processor = Processor(
            [
                *extra_plugins,
                Values(),
                LocalByDefault(),
                ExtractImports(),
                Scope(self.generate_scoped_name),
                ModulesParser(self.fetch),
            ]
        )
        return processor, syntax

    def fetch(self, to: str, from_: str) -> dict[str, str]:
        """Resolve a composed stylesheet relative to the importing one.

        Args:
            to: Path as written in the importing stylesheet
            from_: Absolute path of the importing stylesheet

        Returns:
            Token map of the composed stylesheet
        """
        path = os.path.abspath(os.path.join(os.path.dirname(from_), to))
        logger.debug(f"Fetching {to} from {from_}")
        return self.get_tokens(path)

    def get_tokens(self, path: str) -> dict[str, str]:
        """Run a stylesheet through the pipeline and return its token map.

        Args:
            path: Stylesheet path

        Returns:
            Map of local names to scoped names

        Raises:
            ImportCycleError: If the stylesheet composes from itself, directly
                or through other stylesheets
            DialectCompileError: If an indented-syntax source does not compile
            PluginLoadError: If a configured syntax or plugin cannot be loaded
            TransformError: If the stylesheet is malformed
        """
        path = os.path.abspath(path)
        if path in self._active:
            raise ImportCycleError([*self._active[self._active.index(path):], path])

        self._active.append(path)
        try:
            return self._get_tokens(path)
        finally:
            self._active.pop()

    def _get_tokens(self, path: str) -> dict[str, str]:
        processor, syntax = self._get_runner(path)

        with open(path, encoding="utf-8") as f:
            source = f.read()

        if is_indented_source(path):
            source = compile_indented(path, source, self.project_root)
            syntax = None

        logger.debug(f"Resolving tokens: {path}")
        result = processor.process(source, source_path=path, syntax=syntax)
        for warning in result.warnings():
            logger.warning(str(warning))

        return dict(result.root.tokens)


def require_css_module(
    path: str,
    options: ResolverOptions | Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Resolve a stylesheet into its CSS Modules token map.

    Args:
        path: Path of the stylesheet
        options: Resolver options, as an instance or a plain mapping with
            ``filetypes``, ``generate_scoped_name`` and ``context`` keys

    Returns:
        Map of local class names to space-separated scoped names

    Examples:
        >>> require_css_module("button.css", {"generate_scoped_name": "[name]__[local]"})
        {'root': 'button__root'}
    """
    return TokenResolver(ResolverOptions.coerce(options)).get_tokens(path)
