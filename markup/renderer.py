"""Token stream to (unsanitized) HTML.

The output must go through :func:`markup.sanitize.sanitize` before display.
"""

import html
from typing import List, Optional, Protocol

from loguru import logger
from markdown_it.common.utils import unescapeAll
from markdown_it.renderer import RendererHTML
from markdown_it.token import Token

from .languages import HighlightFn, resolve_language_alias
from .parser import get_parser


class HighlighterResolver(Protocol):
    def resolve(self, language_id: str) -> Optional[HighlightFn]: ...


def escape_html(text: str) -> str:
    """Escape ``& < > " '``."""
    return html.escape(text, quote=True)


class PreviewRenderer(RendererHTML):
    """markdown-it HTML renderer with Discord timestamps and pluggable highlighting."""

    def __init__(self, parser=None, highlighters: Optional[HighlighterResolver] = None):
        super().__init__(parser)
        self._highlighters = highlighters

    def text(self, tokens, idx, options, env) -> str:
        return escape_html(tokens[idx].content)

    def code_inline(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        return f"<code{self.renderAttrs(token)}>{escape_html(token.content)}</code>"

    def link_open(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        attrs = dict(token.attrs)
        attrs["rel"] = "noopener noreferrer"
        attrs["target"] = "_blank"
        return self.renderToken([token.copy(attrs=attrs)], 0, options, env)

    def fence(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        info = unescapeAll(token.info).strip() if token.info else ""
        lang = info.split(maxsplit=1)[0] if info else ""

        highlighted = self._highlight(token.content, lang)
        if highlighted is not None:
            return highlighted
        return (
            '<pre class="language-none"><code>'
            f"{escape_html(token.content)}</code></pre>\n"
        )

    def discord_timestamp(self, tokens, idx, options, env) -> str:
        token = tokens[idx]
        epoch = escape_html(str(token.attrGet("data-epoch") or "0"))
        style = escape_html(str(token.attrGet("data-style") or "f"))
        return (
            f'<span class="discord-timestamp" data-epoch="{epoch}" '
            f'data-style="{style}" title="{escape_html(token.markup)}">'
            f"{escape_html(token.content)}</span>"
        )

    def _highlight(self, code: str, lang: str) -> Optional[str]:
        if not lang or self._highlighters is None:
            return None

        canonical = resolve_language_alias(lang)
        try:
            highlight_fn = self._highlighters.resolve(canonical)
            if highlight_fn is None:
                logger.debug(f"RENDER: no highlighter for {canonical!r}")
                return None
            body = highlight_fn(code)
        except Exception as e:
            logger.debug(
                f"RENDER: highlighter failed for {canonical!r}: {type(e).__name__}: {e}"
            )
            return None

        cls = escape_html(canonical)
        return (
            f'<pre class="language-{cls}" data-language="{cls}">'
            f'<code class="language-{cls}">{body}</code></pre>\n'
        )


def render_tokens(
    tokens: List[Token],
    *,
    highlighters: Optional[HighlighterResolver] = None,
) -> str:
    """Render a parsed token stream to raw HTML."""
    renderer = PreviewRenderer(highlighters=highlighters)
    return renderer.render(tokens, get_parser().options, {})


__all__ = [
    "HighlighterResolver",
    "PreviewRenderer",
    "escape_html",
    "render_tokens",
]
