"""Live preview pipeline: parse, render, sanitize."""

from dataclasses import dataclass, field
from typing import Optional

from .parser import SPOILER_LABEL, parse
from .renderer import HighlighterResolver, render_tokens
from .sanitize import DEFAULT_POLICY, SanitizePolicy, sanitize
from .timestamps import Clock, system_clock


@dataclass
class MarkupPreview:
    """Renders editor content to safe HTML with caller-supplied capabilities."""

    highlighters: Optional[HighlighterResolver] = None
    clock: Clock = system_clock
    timezone: str = "UTC"
    spoiler_label: str = SPOILER_LABEL
    policy: SanitizePolicy = field(default=DEFAULT_POLICY)

    def render(self, text: str, *, now: Optional[int] = None) -> str:
        tokens = parse(
            text,
            now=self.clock() if now is None else now,
            timezone=self.timezone,
            spoiler_label=self.spoiler_label,
        )
        raw = render_tokens(tokens, highlighters=self.highlighters)
        return sanitize(raw, self.policy)


def render_markdown(
    text: str,
    *,
    highlighters: Optional[HighlighterResolver] = None,
    now: Optional[int] = None,
    timezone: str = "UTC",
) -> str:
    """Render ``text`` to sanitized HTML in one call."""
    return MarkupPreview(highlighters=highlighters, timezone=timezone).render(
        text, now=now
    )


__all__ = ["MarkupPreview", "render_markdown"]
