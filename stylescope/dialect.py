"""
Pre-compiler for indented-syntax stylesheets.

Sources ending in ``.sass`` are compiled to plain CSS with libsass before the
CSS Modules pipeline sees them. The compiled source is prefixed with:

    $__WEB__: true
    $UI: (<theme map from the project config>)
    @import "<project root>/styles/index.sass"

The theme map and the shared import are only added when the project declares
them.
"""

import os
import re
from collections.abc import Mapping
from typing import Any

import sass
from loguru import logger

from stylescope.config import find_project_config
from stylescope.errors import DialectCompileError

INDENTED_EXTENSION = ".sass"
SHARED_STYLESHEET = os.path.join("styles", "index.sass")
WEB_FLAG = "$__WEB__: true"

# Values emitted without quotes: numbers with units, hex colors and identifiers
BARE_VALUE_RE = re.compile(
    r"^(-?\d+(\.\d+)?(%|[a-zA-Z]+)?|#[0-9a-fA-F]{3,8}|[a-zA-Z_][\w-]*)$"
)

# Location libsass reports for errors in the compiled string
STDIN_LOCATION_RE = re.compile(r"on line (\d+)((?::\d+)?) of stdin")


def is_indented_source(path: str) -> bool:
    return path.endswith(INDENTED_EXTENSION)


def to_sass_value(value: Any) -> str:
    """Convert a Python value into a Sass literal.

    Mappings become Sass maps, sequences become lists, and strings stay bare
    when they already read as a Sass number, color or identifier.

    Args:
        value: Value loaded from the project config

    Returns:
        Sass source for the value
    """
    if isinstance(value, Mapping):
        if not value:
            return "()"
        items = ", ".join(f"{_quote(str(k))}: {to_sass_value(v)}" for k, v in value.items())
        return f"({items})"
    if isinstance(value, (list, tuple)):
        if not value:
            return "()"
        if len(value) == 1:
            return f"({to_sass_value(value[0])},)"
        return f"({', '.join(to_sass_value(v) for v in value)})"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)

    text = str(value)
    return text if BARE_VALUE_RE.match(text) else _quote(text)


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_prelude(project_root: str) -> list[str]:
    """Lines prepended to every indented source of a project."""
    prelude = [WEB_FLAG]

    config = find_project_config(project_root)
    if config is not None and config.ui:
        prelude.append(f"$UI: {to_sass_value(config.ui)}")

    shared_path = os.path.join(project_root, SHARED_STYLESHEET)
    if os.path.isfile(shared_path):
        prelude.append(f"@import {_quote(shared_path.replace(os.sep, '/'))}")

    return prelude


def compile_indented(path: str, source: str, project_root: str) -> str:
    """Compile an indented-syntax stylesheet to plain CSS.

    Args:
        path: Absolute path of the stylesheet
        source: Stylesheet text
        project_root: Directory holding the project config and shared styles

    Returns:
        Compiled CSS

    Raises:
        DialectCompileError: If libsass reports an error
    """
    prelude = build_prelude(project_root)
    logger.debug(f"Compiling indented source: {path} (prelude: {len(prelude)} lines)")

    try:
        return sass.compile(
            string="\n".join([*prelude, source]),
            indented=True,
            include_paths=[os.path.dirname(path), project_root],
            output_style="expanded",
        )
    except sass.CompileError as e:
        message, line = _relocate_error(str(e), path, len(prelude))
        raise DialectCompileError(message, source_path=path, line=line) from e


def _relocate_error(message: str, path: str, offset: int) -> tuple[str, int | None]:
    """Point a libsass error at the stylesheet instead of the prefixed string.

    Args:
        message: libsass error message
        path: Path of the stylesheet
        offset: Number of prelude lines prepended to the source

    Returns:
        Rewritten message and the line in the stylesheet, if known
    """
    match = STDIN_LOCATION_RE.search(message)
    if match is None or int(match.group(1)) <= offset:
        return message, None

    line = int(match.group(1)) - offset
    location = f"on line {line}{match.group(2)} of {path}"
    return message[: match.start()] + location + message[match.end() :], line
