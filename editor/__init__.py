"""Editor-side text transforms and toolbar actions."""

from .actions import FormatAction, apply_action
from .selection import (
    SelectionRange,
    WrapResult,
    insert_at,
    insert_masked_link,
    toggle_block_prefix,
    toggle_code_block,
    toggle_wrap,
    toggle_wrap_asymmetric,
)

__all__ = [
    "FormatAction",
    "apply_action",
    "SelectionRange",
    "WrapResult",
    "insert_at",
    "insert_masked_link",
    "toggle_block_prefix",
    "toggle_code_block",
    "toggle_wrap",
    "toggle_wrap_asymmetric",
]
