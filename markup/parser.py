"""Discord-flavored markup parser built on markdown-it-py.

Configured to Discord's subset: no raw HTML, no images, no thematic breaks,
no indented or setext blocks. Three inline rules add Discord's own syntax
and run before the generic emphasis rule:

    __underline__      ||spoiler||      <t:EPOCH[:STYLE]>

Each custom rule is a plain forward scan: check the start marker and the
minimum length, look for the closing marker, and either consume the whole
construct or report no match so parsing continues with the default rules.
There is no escape handling inside the scan.
"""

import re
from functools import lru_cache
from typing import List, Optional

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from .timestamps import coerce_style, format_timestamp, system_clock

SPOILER_LABEL = "Spoiler (click to reveal)"

# markdown-it's text terminators plus "|" so spoilers are seen mid-line
_TEXT_TERMINATORS = frozenset("\n!#$%&*+-:<=>@[\\]^_`{}~|")

# Longer digit runs are left as literal text
_EPOCH_RE = re.compile(r"[+-]?\d{1,20}", re.ASCII)

_DISABLED_RULES = [
    "code",
    "hr",
    "lheading",
    "reference",
    "html_block",
    "html_inline",
    "image",
]


def _text(state: StateInline, silent: bool) -> bool:
    pos = state.pos
    while pos < state.posMax and state.src[pos] not in _TEXT_TERMINATORS:
        pos += 1
    if pos == state.pos:
        return False
    if not silent:
        state.pending += state.src[state.pos : pos]
    state.pos = pos
    return True


def _find_closing_pair(state: StateInline, marker: str, start: int) -> int:
    """Index of the first ``marker * 2`` at or after ``start`` inside the inline range, or -1."""
    pos = start
    while pos < state.posMax - 1:
        if state.src[pos] == marker and state.src[pos + 1] == marker:
            return pos
        pos += 1
    return -1


def _push_paired(
    state: StateInline,
    name: str,
    tag: str,
    marker: str,
    content_start: int,
    content_end: int,
) -> Token:
    """Push ``<name>_open``, the inline content, and ``<name>_close``; returns the open token."""
    old_max = state.posMax

    token_open = state.push(f"{name}_open", tag, 1)
    token_open.markup = marker * 2

    state.pos = content_start
    state.posMax = content_end
    state.md.inline.tokenize(state)
    state.posMax = old_max

    token_close = state.push(f"{name}_close", tag, -1)
    token_close.markup = marker * 2
    return token_open


def underline_rule(state: StateInline, silent: bool) -> bool:
    """``__text__``: Discord uses a double underscore for underline, not bold."""
    start = state.pos
    if state.src[start] != "_":
        return False
    # Need at least __x__
    if start + 4 >= state.posMax:
        return False
    if state.src[start + 1] != "_":
        return False

    content_start = start + 2
    close = _find_closing_pair(state, "_", content_start)
    if close == -1:
        return False

    if not silent:
        _push_paired(state, "underline", "u", "_", content_start, close)
    state.pos = close + 2
    return True


def spoiler_rule(state: StateInline, silent: bool) -> bool:
    """``||text||``: rendered as a click-to-reveal span."""
    start = state.pos
    if state.src[start] != "|":
        return False
    if start + 4 >= state.posMax:
        return False
    if state.src[start + 1] != "|":
        return False

    content_start = start + 2
    close = _find_closing_pair(state, "|", content_start)
    if close == -1:
        return False

    if not silent:
        token = _push_paired(state, "spoiler", "span", "|", content_start, close)
        token.attrSet("class", "spoiler")
        token.attrSet("tabindex", "0")
        token.attrSet("role", "button")
        token.attrSet("aria-label", state.env.get("spoiler_label", SPOILER_LABEL))
    state.pos = close + 2
    return True


def timestamp_rule(state: StateInline, silent: bool) -> bool:
    """``<t:EPOCH>`` / ``<t:EPOCH:STYLE>``, pre-rendered against ``env["now"]``."""
    start = state.pos
    if not state.src.startswith("<t:", start):
        return False

    end = state.src.find(">", start + 3, state.posMax)
    if end == -1:
        return False

    parts = state.src[start + 3 : end].split(":")
    if not _EPOCH_RE.fullmatch(parts[0]):
        return False

    epoch = int(parts[0])
    style = coerce_style(parts[1] if len(parts) > 1 else None)

    if not silent:
        now = state.env.get("now")
        if now is None:
            now = system_clock()
        token = state.push("discord_timestamp", "span", 0)
        token.markup = state.src[start : end + 1]
        token.attrSet("class", "discord-timestamp")
        token.attrSet("data-epoch", str(epoch))
        token.attrSet("data-style", style.value)
        token.content = format_timestamp(
            epoch, style.value, now, state.env.get("timezone", "UTC")
        )
        token.meta = {"epoch": epoch, "style": style.value}

    state.pos = end + 1
    return True


def discord_plugin(md: MarkdownIt) -> None:
    """Register the Discord inline rules ahead of emphasis."""
    md.inline.ruler.at("text", _text)
    md.inline.ruler.before("emphasis", "discord_underline", underline_rule)
    md.inline.ruler.before("emphasis", "discord_spoiler", spoiler_rule)
    md.inline.ruler.before("emphasis", "discord_timestamp", timestamp_rule)


def create_parser() -> MarkdownIt:
    md = MarkdownIt(
        "commonmark",
        {"html": False, "linkify": True, "typographer": False, "breaks": False},
    )
    md.enable(["strikethrough", "linkify"])
    md.disable(_DISABLED_RULES)
    md.use(discord_plugin)
    return md


@lru_cache()
def get_parser() -> MarkdownIt:
    """Shared parser instance; holds no per-document state."""
    return create_parser()


def parse(
    text: str,
    *,
    now: Optional[int] = None,
    timezone: str = "UTC",
    spoiler_label: str = SPOILER_LABEL,
) -> List[Token]:
    """Tokenize ``text``. Malformed Discord syntax is left as literal text."""
    env = {
        "now": system_clock() if now is None else now,
        "timezone": timezone,
        "spoiler_label": spoiler_label,
    }
    return get_parser().parse(text or "", env)


def iter_inline(tokens: List[Token]):
    """Yield the inline children of every block token, in document order."""
    for token in tokens:
        if token.type == "inline" and token.children:
            yield from token.children


__all__ = [
    "SPOILER_LABEL",
    "underline_rule",
    "spoiler_rule",
    "timestamp_rule",
    "discord_plugin",
    "create_parser",
    "get_parser",
    "parse",
    "iter_inline",
]
