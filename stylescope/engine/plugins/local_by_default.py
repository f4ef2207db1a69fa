"""Mark class names, ids and animation names as local unless declared global.

Rewrites selectors so that every bare class or id becomes ``:local(...)``:

    .title :global(.icon) { }      ->  :local(.title) .icon { }
    :global .page .title { }       ->  .page .title { }
    @keyframes fade { }            ->  @keyframes :local(fade) { }
    animation: fade 1s;            ->  animation: :local(fade) 1s;

The scope plugin later replaces each ``:local(...)`` with a generated name.
"""

import re

import tinycss2

from stylescope.engine.icss import KEYFRAMES_RE, is_icss_rule, is_inside_keyframes
from stylescope.engine.nodes import Root
from stylescope.engine.processor import Plugin, Result

MODES = ("local", "global")

ANIMATION_PROPS = ("animation", "animation-name")

CSS_WIDE_KEYWORDS = {"none", "initial", "inherit", "unset", "revert", "revert-layer"}

# Keywords of the animation shorthand that are never keyframe names
ANIMATION_KEYWORDS = CSS_WIDE_KEYWORDS | {
    "alternate",
    "alternate-reverse",
    "backwards",
    "both",
    "ease",
    "ease-in",
    "ease-in-out",
    "ease-out",
    "forwards",
    "infinite",
    "linear",
    "normal",
    "paused",
    "reverse",
    "running",
    "step-end",
    "step-start",
}

GLOBAL_PARAMS_RE = re.compile(r"^\s*:global\s*\((.+)\)\s*$")
LOCAL_PARAMS_RE = re.compile(r"^\s*:local\s*\((.+)\)\s*$")


def localize_selector(selector: str, mode: str = "local") -> str:
    """Rewrite a selector so that names in local mode are wrapped in ``:local()``.

    Args:
        selector: Selector list text
        mode: Mode each comma-separated selector starts in

    Returns:
        Rewritten selector text
    """
    tokens = tinycss2.parse_component_value_list(selector)
    return _localize_tokens(tokens, mode).strip()


def _localize_tokens(tokens: list, default_mode: str) -> str:
    pieces: list[str] = []
    mode = default_mode
    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None

        if token == ",":
            mode = default_mode
            pieces.append(",")
            i += 1
            continue

        if token == ":" and following is not None:
            if following.type == "ident" and following.lower_value in MODES:
                mode = following.lower_value
                i += 2
                if _at_compound_start(pieces):
                    while i < len(tokens) and tokens[i].type == "whitespace":
                        i += 1
                continue
            if following.type == "function" and following.lower_name in MODES:
                inner = tinycss2.serialize(following.arguments).strip()
                if following.lower_name == "global":
                    pieces.append(inner)
                else:
                    pieces.append(_localize_tokens(following.arguments, "local").strip())
                i += 2
                continue
            if following.type == "function":
                inner = _localize_tokens(following.arguments, mode)
                pieces.append(f":{tinycss2.serialize_identifier(following.name)}({inner})")
                i += 2
                continue

        if token == "." and following is not None and following.type == "ident":
            class_selector = f".{following.serialize()}"
            pieces.append(f":local({class_selector})" if mode == "local" else class_selector)
            i += 2
            continue

        if token.type == "hash" and token.is_identifier:
            pieces.append(f":local({token.serialize()})" if mode == "local" else token.serialize())
            i += 1
            continue

        pieces.append(token.serialize())
        i += 1

    return "".join(pieces)


def _at_compound_start(pieces: list[str]) -> bool:
    if not pieces:
        return True
    last = pieces[-1]
    return last.isspace() or last in (",", ">", "+", "~")


def localize_animation(value: str, prop: str, mode: str = "local") -> str:
    """Wrap keyframe names of an animation value in ``:local()``.

    Args:
        value: Declaration value
        prop: ``animation`` or ``animation-name``
        mode: Current mode of the enclosing rule

    Returns:
        Rewritten value
    """
    # animation-name holds only names and CSS-wide keywords
    keywords = ANIMATION_KEYWORDS if prop == "animation" else CSS_WIDE_KEYWORDS
    tokens = tinycss2.parse_component_value_list(value)
    pieces: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        following = tokens[i + 1] if i + 1 < len(tokens) else None

        if token == ":" and following is not None and following.type == "function" \
                and following.lower_name in MODES:
            name = tinycss2.serialize(following.arguments).strip()
            pieces.append(name if following.lower_name == "global" else f":local({name})")
            i += 2
            continue

        if token.type == "function" and token.lower_name in MODES:
            name = tinycss2.serialize(token.arguments).strip()
            pieces.append(name if token.lower_name == "global" else f":local({name})")
        elif token.type == "ident" and mode == "local" and token.lower_value not in keywords:
            pieces.append(f":local({token.serialize()})")
        else:
            pieces.append(token.serialize())
        i += 1

    return "".join(pieces)


def _selector_mode(selector: str, default_mode: str) -> str:
    """Mode in effect for declarations of a rule.

    Only the bare ``:global``/``:local`` forms switch the mode; the function
    forms apply to their argument alone. Every selector of the list has to
    end in the same mode, otherwise the default applies.
    """
    tokens = tinycss2.parse_component_value_list(selector)
    modes = []
    mode = default_mode
    for token, following in zip(tokens, [*tokens[1:], None]):
        if token == ",":
            modes.append(mode)
            mode = default_mode
        elif token == ":" and following is not None and following.type == "ident" \
                and following.lower_value in MODES:
            mode = following.lower_value
    modes.append(mode)
    return modes[0] if len(set(modes)) == 1 else default_mode


class LocalByDefault(Plugin):
    """Localize selectors, keyframes and animation names."""

    name = "modules-local-by-default"

    def __init__(self, mode: str = "local"):
        if mode not in MODES:
            raise ValueError(f"Unsupported mode: {mode}")
        self.mode = mode

    def __call__(self, root: Root, result: Result) -> None:
        for at_rule in root.walk_at_rules(KEYFRAMES_RE):
            global_match = GLOBAL_PARAMS_RE.match(at_rule.params)
            if global_match:
                at_rule.params = global_match.group(1).strip()
            elif LOCAL_PARAMS_RE.match(at_rule.params) is None and self.mode == "local":
                at_rule.params = f":local({at_rule.params.strip()})"

        for rule in root.walk_rules():
            if is_icss_rule(rule) or is_inside_keyframes(rule):
                continue

            rule_mode = _selector_mode(rule.selector, self.mode)
            rule.selector = localize_selector(rule.selector, self.mode)

            for decl in rule.nodes:
                prop = getattr(decl, "prop", "").lower()
                if prop in ANIMATION_PROPS:
                    decl.value = localize_animation(decl.value, prop, rule_mode)
