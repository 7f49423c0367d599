"""Toolbar and keyboard actions mapped onto selection transforms."""

from enum import Enum
from typing import Dict, Optional

from loguru import logger

from markup.timestamps import generate_timestamp_token

from .selection import (
    URL_PLACEHOLDER,
    WrapResult,
    insert_at,
    insert_masked_link,
    toggle_block_prefix,
    toggle_code_block,
    toggle_wrap,
)


class FormatAction(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    SPOILER = "spoiler"
    QUOTE = "quote"
    LIST = "list"
    LINK = "link"
    CODE_BLOCK = "code_block"
    TIMESTAMP = "timestamp"


WRAP_TOKENS: Dict[FormatAction, str] = {
    FormatAction.BOLD: "**",
    FormatAction.ITALIC: "*",
    FormatAction.UNDERLINE: "__",
    FormatAction.STRIKETHROUGH: "~~",
    FormatAction.CODE: "`",
    FormatAction.SPOILER: "||",
}

BLOCK_PREFIXES: Dict[FormatAction, str] = {
    FormatAction.QUOTE: ">",
    FormatAction.LIST: "-",
}

# "mod" is Ctrl, or Cmd on macOS
KEYBOARD_SHORTCUTS: Dict[str, FormatAction] = {
    "mod+b": FormatAction.BOLD,
    "mod+i": FormatAction.ITALIC,
    "mod+u": FormatAction.UNDERLINE,
    "mod+shift+s": FormatAction.STRIKETHROUGH,
    "mod+`": FormatAction.CODE,
    "mod+shift+c": FormatAction.CODE_BLOCK,
}


def action_for_shortcut(shortcut: str) -> Optional[FormatAction]:
    """Look up the action bound to a shortcut such as ``"Mod+Shift+S"``."""
    normalized = "+".join(part.strip().lower() for part in shortcut.split("+"))
    return KEYBOARD_SHORTCUTS.get(normalized)


def apply_action(
    action: FormatAction | str,
    text: str,
    start: int,
    end: int,
    *,
    language: str = "",
    url: str = URL_PLACEHOLDER,
    epoch: Optional[int] = None,
    style: Optional[str] = None,
) -> WrapResult:
    """Apply a toolbar action to ``text`` and the selection ``[start, end)``.

    Raises:
        ValueError: if ``action`` is not a known action name, or a timestamp
            is requested without an ``epoch``.
    """
    action = FormatAction(action)
    logger.debug(f"ACTION: {action.value} start={start} end={end}")

    if action in WRAP_TOKENS:
        return toggle_wrap(text, start, end, WRAP_TOKENS[action])
    if action in BLOCK_PREFIXES:
        return toggle_block_prefix(text, start, end, BLOCK_PREFIXES[action])
    if action is FormatAction.LINK:
        return insert_masked_link(text, start, end, url)
    if action is FormatAction.CODE_BLOCK:
        return toggle_code_block(text, start, end, language)

    if epoch is None:
        raise ValueError("timestamp action requires an epoch")
    return insert_at(text, end, generate_timestamp_token(epoch, style))


__all__ = [
    "FormatAction",
    "WRAP_TOKENS",
    "BLOCK_PREFIXES",
    "KEYBOARD_SHORTCUTS",
    "action_for_shortcut",
    "apply_action",
]
