"""Stylesheet transform engine.

This package parses stylesheets into a node tree with tinycss2 and runs them
through a chain of plugins, in the manner of PostCSS.
"""

from stylescope.engine.nodes import AtRule, Comment, Declaration, Root, Rule
from stylescope.engine.processor import Plugin, Processor, Result, TransformWarning
from stylescope.engine.syntax import CSS_SYNTAX, CssSyntax, ScssSyntax, Syntax

__all__ = [
    "AtRule",
    "Comment",
    "CSS_SYNTAX",
    "CssSyntax",
    "Declaration",
    "Plugin",
    "Processor",
    "Result",
    "Root",
    "Rule",
    "ScssSyntax",
    "Syntax",
    "TransformWarning",
]
