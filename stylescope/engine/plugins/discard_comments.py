"""Remove comments, except ``/*! ... */`` ones when asked to keep them."""

from typing import Any

from stylescope.engine.nodes import Root
from stylescope.engine.processor import Plugin, Result


class DiscardComments(Plugin):
    """Strip comments from the stylesheet."""

    name = "discard-comments"

    def __init__(self, options: dict[str, Any] | None = None):
        options = options or {}
        self.remove_all = bool(options.get("remove_all", False))

    def __call__(self, root: Root, result: Result) -> None:
        for comment in root.walk_comments():
            if comment.text.startswith("!") and not self.remove_all:
                continue
            comment.remove()
