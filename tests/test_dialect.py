"""Tests for the indented-syntax pre-compiler."""

import pytest

from stylescope.config import PROJECT_CONFIG_FILENAME
from stylescope.dialect import (
    _relocate_error,
    build_prelude,
    compile_indented,
    is_indented_source,
    to_sass_value,
)
from stylescope.errors import DialectCompileError
from stylescope.resolver import require_css_module


def same_name(local_name, path, css):
    return f"x__{local_name}"


def test_is_indented_source():
    """Test recognition of the indented dialect by extension."""
    assert is_indented_source("/project/button.sass")
    assert not is_indented_source("/project/button.scss")
    assert not is_indented_source("/project/button.css")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("12px", "12px"),
        ("#ff0000", "#ff0000"),
        ("red", "red"),
        ("Helvetica Neue", '"Helvetica Neue"'),
        (True, "true"),
        (None, "null"),
        (2, "2"),
        (1.5, "1.5"),
        ([], "()"),
        (["a"], "(a,)"),
        (["a", "b"], "(a, b)"),
        ({}, "()"),
    ],
)
def test_to_sass_value(value, expected):
    """Test conversion of config values into Sass literals."""
    assert to_sass_value(value) == expected


def test_to_sass_value_nested_map():
    """Test that nested mappings become nested Sass maps."""
    theme = {"colors": {"primary": "#fff"}, "sizes": [1, 2]}
    assert to_sass_value(theme) == '("colors": ("primary": #fff), "sizes": (1, 2))'


def test_build_prelude_without_project_files(tmp_path):
    """Test that only the web flag is defined for a bare project."""
    assert build_prelude(str(tmp_path)) == ["$__WEB__: true"]


def test_build_prelude_with_project_files(tmp_path, write_file):
    """Test that the theme and shared stylesheet are added in order."""
    write_file(PROJECT_CONFIG_FILENAME, "ui:\n  spacing: 12px\n")
    shared = write_file("styles/index.sass", "$brand: green\n")

    assert build_prelude(str(tmp_path)) == [
        "$__WEB__: true",
        '$UI: ("spacing": 12px)',
        f'@import "{shared.as_posix()}"',
    ]


def test_compile_indented(tmp_path, write_file):
    """Test compiling a plain indented stylesheet."""
    path = write_file("button.sass", ".title\n  color: red\n")

    css = compile_indented(str(path), path.read_text(), str(tmp_path))

    assert ".title" in css
    assert "color: red" in css


def test_web_flag_is_defined(tmp_path, write_file):
    """Test that stylesheets can branch on the web flag."""
    path = write_file("button.sass", "@if $__WEB__\n  .title\n    color: blue\n")

    css = compile_indented(str(path), path.read_text(), str(tmp_path))

    assert "blue" in css


def test_theme_values_are_available(tmp_path, write_file):
    """Test that the ui theme from the project config is exposed as $UI."""
    write_file(PROJECT_CONFIG_FILENAME, "ui:\n  spacing: 12px\n")
    path = write_file("src/button.sass", ".title\n  padding: map-get($UI, spacing)\n")

    css = compile_indented(str(path), path.read_text(), str(tmp_path))

    assert "padding: 12px" in css


def test_shared_stylesheet_is_imported(tmp_path, write_file):
    """Test that styles/index.sass is imported into every stylesheet."""
    write_file("styles/index.sass", "$brand: green\n")
    path = write_file("src/button.sass", ".title\n  color: $brand\n")

    css = compile_indented(str(path), path.read_text(), str(tmp_path))

    assert "color: green" in css


def test_imports_resolve_from_source_directory(tmp_path, write_file):
    """Test that partials next to the stylesheet can be imported."""
    write_file("src/_colors.sass", "$accent: orange\n")
    path = write_file("src/button.sass", '@import "colors"\n.title\n  color: $accent\n')

    css = compile_indented(str(path), path.read_text(), str(tmp_path))

    assert "color: orange" in css


def test_compile_error_carries_compiler_message(tmp_path, write_file):
    """Test that compile errors keep the compiler's message."""
    path = write_file("button.sass", ".title\n  color: $nope\n")

    with pytest.raises(DialectCompileError, match="Undefined variable") as excinfo:
        compile_indented(str(path), path.read_text(), str(tmp_path))

    assert excinfo.value.source_path == str(path)


def test_indented_source_matches_compiled_css(tmp_path, write_file):
    """Test that resolving a .sass file equals resolving its compiled CSS."""
    source = "$size: 2px\n.title\n  border: $size solid\n  .icon\n    color: red\n.label\n  composes: title\n"
    path = write_file("button.sass", source)
    compiled = write_file("compiled/button.css", compile_indented(str(path), source, str(tmp_path)))
    options = {"generate_scoped_name": same_name, "context": str(tmp_path)}

    tokens = require_css_module(str(path), options)

    assert tokens == require_css_module(str(compiled), options)
    assert tokens == {"title": "x__title", "icon": "x__icon", "label": "x__label x__title"}


def test_indented_compile_error_propagates(tmp_path, write_file):
    """Test that resolving a broken .sass file raises DialectCompileError."""
    path = write_file("button.sass", ".title\n  color: $nope\n")

    with pytest.raises(DialectCompileError, match="Undefined variable"):
        require_css_module(str(path), {"context": str(tmp_path)})


def test_compile_error_points_at_stylesheet_line(tmp_path, write_file):
    """Test that compile errors report lines of the stylesheet, not of the prefixed source."""
    path = write_file("button.sass", ".title\n  color: $nope\n")

    with pytest.raises(DialectCompileError) as excinfo:
        compile_indented(str(path), path.read_text(), str(tmp_path))

    assert excinfo.value.line == 2
    assert str(path) in str(excinfo.value)
    assert "of stdin" not in str(excinfo.value)


@pytest.mark.parametrize(
    "message, offset, expected",
    [
        (
            "Error: Undefined variable.\n        on line 3:10 of stdin\n>>   color: $nope",
            1,
            ("Error: Undefined variable.\n        on line 2:10 of /p/a.sass\n>>   color: $nope", 2),
        ),
        ("Error: x\n        on line 4 of stdin", 2, ("Error: x\n        on line 2 of /p/a.sass", 2)),
        ("Error: x\n        on line 1:5 of stdin", 2, ("Error: x\n        on line 1:5 of stdin", None)),
        ("Error: x\n        on line 3 of /p/b.sass", 1, ("Error: x\n        on line 3 of /p/b.sass", None)),
    ],
)
def test_relocate_error(message, offset, expected):
    """Test rewriting libsass locations past the prelude."""
    assert _relocate_error(message, "/p/a.sass", offset) == expected
