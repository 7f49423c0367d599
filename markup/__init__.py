"""Discord markup parsing, rendering and sanitization."""

from .languages import LanguageRegistry, resolve_language_alias
from .parser import parse
from .preview import MarkupPreview, render_markdown
from .renderer import render_tokens
from .sanitize import sanitize, sanitize_url
from .timestamps import TimestampStyle, format_timestamp, generate_timestamp_token

__all__ = [
    "LanguageRegistry",
    "resolve_language_alias",
    "parse",
    "MarkupPreview",
    "render_markdown",
    "render_tokens",
    "sanitize",
    "sanitize_url",
    "TimestampStyle",
    "format_timestamp",
    "generate_timestamp_token",
]
