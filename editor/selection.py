"""Text selection transforms used by the editor toolbar.

Every function takes the buffer and a selection and returns a new buffer and
selection; nothing is mutated. Out-of-range indices are clamped first, so the
functions are total over any integer input.
"""

import re
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SelectionRange:
    start: int
    end: int


@dataclass(frozen=True)
class WrapResult:
    text: str
    selection: SelectionRange


LINK_TEXT_PLACEHOLDER = "link text"
URL_PLACEHOLDER = "url"

_FENCE = "```"
_FENCE_LINE_RE = re.compile(r"```[^`\n]*")
_OPEN_FENCE_TAIL_RE = re.compile(r"```[^`\n]*\n\Z")


def clamp_selection(text: str, start: int, end: int) -> Tuple[int, int]:
    """Clamp to ``0 <= start <= end <= len(text)``."""
    length = len(text)
    start = min(max(start, 0), length)
    end = min(max(end, start), length)
    return start, end


def _result(text: str, start: int, end: int) -> WrapResult:
    return WrapResult(text=text, selection=SelectionRange(start=start, end=end))


def toggle_wrap(text: str, start: int, end: int, token: str) -> WrapResult:
    """Toggle a symmetric delimiter (``**``, ``__``, ``||``...) around the selection.

    In priority order:
      1. the token sits right outside the selection: remove both;
      2. the selected text itself starts and ends with the token: strip them;
      3. otherwise wrap, keeping the original text selected inside the markers.
    """
    start, end = clamp_selection(text, start, end)
    if not token:
        return _result(text, start, end)

    size = len(token)
    before, selected, after = text[:start], text[start:end], text[end:]

    if before.endswith(token) and after.startswith(token):
        return _result(
            before[:-size] + selected + after[size:],
            start - size,
            end - size,
        )

    if (
        len(selected) >= size * 2
        and selected.startswith(token)
        and selected.endswith(token)
    ):
        return _result(
            before + selected[size:-size] + after,
            start,
            end - size * 2,
        )

    return _result(before + token + selected + token + after, start + size, end + size)


def toggle_wrap_asymmetric(
    text: str, start: int, end: int, open_token: str, close_token: str
) -> WrapResult:
    """Like :func:`toggle_wrap` with distinct open/close tokens; no inner-strip case."""
    start, end = clamp_selection(text, start, end)
    before, selected, after = text[:start], text[start:end], text[end:]
    open_size = len(open_token)

    if (
        open_token
        and close_token
        and before.endswith(open_token)
        and after.startswith(close_token)
    ):
        return _result(
            before[:-open_size] + selected + after[len(close_token):],
            start - open_size,
            end - open_size,
        )

    return _result(
        before + open_token + selected + close_token + after,
        start + open_size,
        end + open_size,
    )


def toggle_block_prefix(text: str, start: int, end: int, prefix: str) -> WrapResult:
    """Toggle a line prefix (``>`` quote, ``-`` list) on every line the selection touches.

    If every line already carries ``prefix + " "`` (blank lines count as
    carrying it) the prefix is removed, otherwise it is added to each
    non-blank line. The selection grows to cover the affected lines.
    """
    start, end = clamp_selection(text, start, end)

    line_start = text.rfind("\n", 0, start) + 1
    line_end = text.find("\n", end)
    actual_end = len(text) if line_end == -1 else line_end

    before = text[:line_start]
    after = text[actual_end:]
    lines = text[line_start:actual_end].split("\n")
    marker = prefix + " "

    if all(line.startswith(marker) or not line.strip() for line in lines):
        new_lines = [
            line[len(marker):] if line.startswith(marker) else line for line in lines
        ]
        delta = -len(marker) * sum(1 for line in lines if line.startswith(marker))
    else:
        new_lines = [marker + line if line.strip() else line for line in lines]
        delta = len(marker) * sum(1 for line in lines if line.strip())

    return _result(
        before + "\n".join(new_lines) + after,
        line_start,
        actual_end + delta,
    )


def _enclosing_fence(text: str, start: int, end: int) -> Tuple[int, int]:
    """Lengths of the fences directly around the selection, or (0, 0) if not fenced.

    The opening fence (with its newline) must end exactly at ``start`` and the
    closing newline and fence must begin exactly at ``end``. Either fence may
    share its line with other text, which is what wrapping part of a line makes.
    """
    opening = _OPEN_FENCE_TAIL_RE.search(text, 0, start)
    if opening is None:
        return 0, 0

    close = "\n" + _FENCE
    if not text.startswith(close, end):
        return 0, 0
    return start - opening.start(), len(close)


def _inner_fence(selected: str) -> Tuple[int, int]:
    """Fence lengths when the selection itself is a complete fenced block, or (0, 0)."""
    first_newline = selected.find("\n")
    if first_newline == -1 or not _FENCE_LINE_RE.fullmatch(selected[:first_newline]):
        return 0, 0
    close = "\n" + _FENCE
    # The closing fence must not overlap the opening line
    if not selected.endswith(close) or len(selected) - len(close) < first_newline:
        return 0, 0
    return first_newline + 1, len(close)


def toggle_code_block(text: str, start: int, end: int, language: str = "") -> WrapResult:
    """Toggle a fenced code block around the selection.

    Unwraps when the selection is the body of a fenced block (fences right
    outside it) or when the selection itself is a whole fenced block;
    otherwise wraps it in ```` ```language ```` / ```` ``` ```` lines.
    """
    start, end = clamp_selection(text, start, end)
    before, selected, after = text[:start], text[start:end], text[end:]

    open_len, close_len = _enclosing_fence(text, start, end)
    if open_len:
        return _result(
            before[:-open_len] + selected + after[close_len:],
            start - open_len,
            end - open_len,
        )

    open_len, close_len = _inner_fence(selected)
    if open_len:
        inner = selected[open_len : len(selected) - close_len]
        return _result(before + inner + after, start, start + len(inner))

    open_fence = _FENCE + language + "\n"
    close_fence = "\n" + _FENCE
    return _result(
        before + open_fence + selected + close_fence + after,
        start + len(open_fence),
        end + len(open_fence),
    )


def insert_at(text: str, position: int, to_insert: str) -> WrapResult:
    """Splice ``to_insert`` at ``position``; the caret lands right after it."""
    position, _ = clamp_selection(text, position, position)
    caret = position + len(to_insert)
    return _result(text[:position] + to_insert + text[position:], caret, caret)


def insert_masked_link(
    text: str, start: int, end: int, url: str = URL_PLACEHOLDER
) -> WrapResult:
    """Replace the selection with ``[selection](url)``.

    An empty selection becomes the ``link text`` placeholder. With the
    ``url`` placeholder the URL part is selected for immediate editing;
    otherwise the caret is placed after the link.
    """
    start, end = clamp_selection(text, start, end)
    label = text[start:end] or LINK_TEXT_PLACEHOLDER
    link = f"[{label}]({url})"
    new_text = text[:start] + link + text[end:]

    if url == URL_PLACEHOLDER:
        url_start = start + len(label) + 3  # len("[") + len("](")
        return _result(new_text, url_start, url_start + len(url))

    caret = start + len(link)
    return _result(new_text, caret, caret)


__all__ = [
    "SelectionRange",
    "WrapResult",
    "LINK_TEXT_PLACEHOLDER",
    "URL_PLACEHOLDER",
    "clamp_selection",
    "toggle_wrap",
    "toggle_wrap_asymmetric",
    "toggle_block_prefix",
    "toggle_code_block",
    "insert_at",
    "insert_masked_link",
]
