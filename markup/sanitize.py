"""HTML sanitization for rendered previews.

Allowlist based: tags, attributes and URL schemes that are not explicitly
permitted are removed, not escaped. Dangerous elements (scripts, frames,
forms, images...) are dropped together with everything inside them before
Bleach strips the remaining unknown tags down to their text.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet

from bleach.html5lib_shim import Filter
from bleach.sanitizer import Cleaner
from bs4 import BeautifulSoup
from loguru import logger

ALLOWED_TAGS = frozenset(
    {
        "a",
        "strong",
        "b",
        "em",
        "i",
        "s",
        "del",
        "u",
        "code",
        "pre",
        "span",
        "ul",
        "ol",
        "li",
        "blockquote",
        "p",
        "br",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
    }
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "class",
        "href",
        "rel",
        "target",
        "data-epoch",
        "data-style",
        "data-language",
        "title",
        "tabindex",
        "role",
        "aria-label",
    }
)

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto"})

FORBIDDEN_TAGS = frozenset(
    {"script", "style", "iframe", "object", "embed", "form", "input", "img"}
)

_BLOCKED_SCHEME_RE = re.compile(r"^(?:javascript|data|vbscript):", re.IGNORECASE)
_ALLOWED_URI_RE = re.compile(r"^(?:https?|mailto):", re.IGNORECASE)


@dataclass(frozen=True)
class SanitizePolicy:
    """Immutable allowlists applied by :func:`sanitize`."""

    tags: FrozenSet[str] = field(default=ALLOWED_TAGS)
    attributes: FrozenSet[str] = field(default=ALLOWED_ATTRIBUTES)
    protocols: FrozenSet[str] = field(default=ALLOWED_PROTOCOLS)
    forbidden_tags: FrozenSet[str] = field(default=FORBIDDEN_TAGS)

    def allows_attribute(self, name: str) -> bool:
        name = name.lower()
        if name.startswith("on"):
            return False
        return name in self.attributes


DEFAULT_POLICY = SanitizePolicy()


def sanitize_url(url: str) -> str:
    """Return a safe version of ``url`` for use in a link, or "" if it must be dropped."""
    trimmed = url.strip()

    if _BLOCKED_SCHEME_RE.match(trimmed):
        return ""

    # Any leading "/" passes, protocol-relative "//host" included
    if (
        _ALLOWED_URI_RE.match(trimmed)
        or trimmed.startswith("/")
        or trimmed.startswith("#")
    ):
        return trimmed

    # No scheme at all: treat as a bare host/path
    if "://" not in trimmed:
        return f"https://{trimmed}"

    return ""


class HrefFilter(Filter):
    """Run every surviving ``href`` through :func:`sanitize_url`."""

    def __iter__(self):
        for token in super().__iter__():
            if token["type"] in ("StartTag", "EmptyTag") and token.get("data"):
                attrs = token["data"]
                key = (None, "href")
                if key in attrs:
                    safe = sanitize_url(attrs[key])
                    if safe:
                        attrs[key] = safe
                    else:
                        del attrs[key]
            yield token


@lru_cache(maxsize=8)
def _cleaner(policy: SanitizePolicy) -> Cleaner:
    def allow_attribute(tag: str, name: str, value: str) -> bool:
        return policy.allows_attribute(name)

    return Cleaner(
        tags=policy.tags,
        attributes=allow_attribute,
        protocols=policy.protocols,
        strip=True,
        strip_comments=True,
        filters=[HrefFilter],
    )


def _drop_forbidden(html: str, forbidden: FrozenSet[str]) -> str:
    soup = BeautifulSoup(html, "html.parser")
    dropped = 0
    for element in soup.find_all(sorted(forbidden)):
        if element.decomposed:
            continue
        element.decompose()
        dropped += 1
    if dropped:
        logger.debug(f"SANITIZE: dropped {dropped} forbidden element(s)")
    return str(soup)


def sanitize(html: str, policy: SanitizePolicy = DEFAULT_POLICY) -> str:
    """Clean ``html`` down to ``policy``; unsafe markup is removed silently."""
    if not html:
        return ""
    return _cleaner(policy).clean(_drop_forbidden(html, policy.forbidden_tags))


__all__ = [
    "ALLOWED_TAGS",
    "ALLOWED_ATTRIBUTES",
    "ALLOWED_PROTOCOLS",
    "FORBIDDEN_TAGS",
    "SanitizePolicy",
    "DEFAULT_POLICY",
    "HrefFilter",
    "sanitize",
    "sanitize_url",
]
