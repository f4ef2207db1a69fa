"""Tests for the transform engine: syntaxes, node tree and processor."""

import pytest

from stylescope.engine import (
    AtRule,
    Comment,
    CssSyntax,
    Declaration,
    Plugin,
    Processor,
    Rule,
    ScssSyntax,
)
from stylescope.engine.plugins import DiscardComments
from stylescope.errors import TransformError


@pytest.fixture
def syntax():
    """Fixture providing the plain CSS syntax."""
    return CssSyntax()


def test_parse_rules_and_at_rules(syntax):
    """Test that rules, declarations and at-rules become engine nodes."""
    root = syntax.parse(
        ".a { color: red !important }\n"
        "@media (max-width: 10px) { .b { color: blue } }\n",
        "/project/a.css",
    )

    rule, media = root.nodes
    assert isinstance(rule, Rule)
    assert rule.selector == ".a"
    decl = rule.nodes[0]
    assert isinstance(decl, Declaration)
    assert (decl.prop, decl.value, decl.important) == ("color", "red", True)

    assert isinstance(media, AtRule)
    assert media.name == "media"
    assert media.params == "(max-width: 10px)"
    assert media.nodes[0].selector == ".b"
    assert root.source_path == "/project/a.css"


def test_parse_records_lines(syntax):
    """Test that nodes remember their source line."""
    root = syntax.parse("\n.a {\n  color: red;\n}\n")

    rule = root.nodes[0]
    assert rule.line == 2
    assert rule.nodes[0].line == 3


def test_parse_statement_at_rule(syntax):
    """Test at-rules without a block."""
    root = syntax.parse('@value primary: red;\n@import "x.css";\n')

    value, import_rule = root.nodes
    assert value.name == "value"
    assert value.params == "primary: red"
    assert not value.has_block
    assert import_rule.params == '"x.css"'


@pytest.mark.parametrize(
    "css, message",
    [
        (".a {} .b", "EOF reached before {} block"),
        (".a { color red; }", ""),
    ],
)
def test_parse_errors_raise_transform_error(syntax, css, message):
    """Test that malformed stylesheets raise TransformError."""
    with pytest.raises(TransformError, match=message):
        syntax.parse(css, "/project/broken.css")


def test_walk_survives_removal(syntax):
    """Test that nodes can be removed while walking."""
    root = syntax.parse(".a { color: red; margin: 0 } .b { color: blue }")

    for decl in root.walk_decls("color"):
        decl.remove()

    assert [decl.prop for decl in root.walk_decls()] == ["margin"]


def test_node_error_is_located(syntax):
    """Test that node errors carry the stylesheet and line."""
    root = syntax.parse("\n\n.a { color: red }", "/project/a.css")
    error = root.nodes[0].error("Bad rule")

    assert isinstance(error, TransformError)
    assert str(error) == "Bad rule in a.css at line 3"


def test_processor_runs_plugins_in_order():
    """Test that plugins see the tree in registration order."""
    calls = []

    def first(root, result):
        calls.append(("first", root.nodes[0].selector))
        root.nodes[0].selector = ".renamed"

    def second(root, result):
        calls.append(("second", root.nodes[0].selector))

    result = Processor([first, second]).process(".a { color: red }")

    assert calls == [("first", ".a"), ("second", ".renamed")]
    assert result.css == ".renamed {\n  color: red;\n}\n"


def test_processor_instantiates_plugin_classes():
    """Test that plugin classes are instantiated without arguments."""

    class Uppercase(Plugin):
        name = "uppercase"

        def __call__(self, root, result):
            for decl in root.walk_decls():
                decl.value = decl.value.upper()

    result = Processor().use(Uppercase).process(".a { color: red }")

    assert result.css == ".a {\n  color: RED;\n}\n"


def test_processor_rejects_non_callables():
    """Test that non-callable plugins are rejected."""
    with pytest.raises(TypeError):
        Processor(["not a plugin"])


def test_result_collects_warnings():
    """Test that plugin warnings are collected with their location."""

    def warn(root, result):
        result.warn("Looks odd", plugin="warn", node=root.nodes[0])

    result = Processor([warn]).process("\n.a { color: red }", "/project/a.css")

    (warning,) = result.warnings()
    assert warning.text == "Looks odd"
    assert warning.line == 2
    assert str(warning) == "/project/a.css:2: warn: Looks odd"


def test_discard_comments():
    """Test that comments are dropped except for /*! ones."""
    css = "/* drop */ /*! keep */ .a { /* drop */ color: red }"

    kept = Processor([DiscardComments()]).process(css)
    assert [comment.text for comment in kept.root.walk_comments()] == ["! keep "]

    dropped = Processor([DiscardComments({"remove_all": True})]).process(css)
    assert list(dropped.root.walk_comments()) == []


def test_comments_are_parsed(syntax):
    """Test that comments become Comment nodes."""
    root = syntax.parse("/* header */ .a { color: red }")
    assert isinstance(root.nodes[0], Comment)
    assert root.nodes[0].text == " header "


def test_scss_syntax_compiles_source():
    """Test that the SCSS syntax compiles before parsing."""
    source = "$c: red;\n.a { .b { color: $c; } }\n"
    root = ScssSyntax().parse(source, "/project/a.scss")

    rule = root.nodes[0]
    assert rule.selector == ".a .b"
    assert rule.nodes[0].value == "red"
    assert root.css == source


def test_scss_syntax_compile_error():
    """Test that SCSS compile errors raise TransformError."""
    with pytest.raises(TransformError, match="Undefined variable"):
        ScssSyntax().parse(".a { color: $missing; }", "/project/a.scss")


def test_parse_nested_rules(syntax):
    """Test that rules nested in a rule body become child rules."""
    root = syntax.parse(".a { color: red; .b { color: blue } }", "/project/a.css")

    (rule,) = root.nodes
    decl, nested = rule.nodes
    assert (decl.prop, decl.value) == ("color", "red")
    assert isinstance(nested, Rule)
    assert nested.selector == ".b"
    assert nested.parent is rule
    assert nested.nodes[0].value == "blue"


def test_parse_at_rules_nested_in_rules(syntax):
    """Test that conditional at-rules inside a rule hold declarations."""
    root = syntax.parse(
        ".a { @media print { @supports (display: grid) { color: blue } } }",
        "/project/a.css",
    )

    media = root.nodes[0].nodes[0]
    assert isinstance(media, AtRule)
    assert media.name == "media"
    supports = media.nodes[0]
    assert isinstance(supports, AtRule)
    decl = supports.nodes[0]
    assert isinstance(decl, Declaration)
    assert (decl.prop, decl.value) == ("color", "blue")
