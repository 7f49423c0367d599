"""Tests for editor/selection.py"""

import pytest

from editor.selection import (
    SelectionRange,
    WrapResult,
    clamp_selection,
    insert_at,
    insert_masked_link,
    toggle_block_prefix,
    toggle_code_block,
    toggle_wrap,
    toggle_wrap_asymmetric,
)


def _r(text, start, end):
    return WrapResult(text=text, selection=SelectionRange(start=start, end=end))


class TestClamp:
    def test_in_range(self):
        assert clamp_selection("abc", 1, 2) == (1, 2)

    def test_out_of_range(self):
        assert clamp_selection("abc", -3, 99) == (0, 3)

    def test_end_before_start(self):
        assert clamp_selection("abc", 2, 1) == (2, 2)


class TestToggleWrap:
    def test_wrap(self):
        assert toggle_wrap("hello world", 0, 5, "**") == _r("**hello** world", 2, 7)

    def test_unwrap_outside(self):
        assert toggle_wrap("**hello** world", 2, 7, "**") == _r("hello world", 0, 5)

    def test_unwrap_inside(self):
        assert toggle_wrap("**hello** world", 0, 9, "**") == _r("hello world", 0, 5)

    def test_wrap_then_unwrap_restores(self):
        wrapped = toggle_wrap("a b c", 2, 3, "||")
        sel = wrapped.selection
        assert toggle_wrap(wrapped.text, sel.start, sel.end, "||") == _r("a b c", 2, 3)

    def test_empty_selection_inserts_pair(self):
        assert toggle_wrap("ab", 1, 1, "**") == _r("a****b", 3, 3)

    def test_selection_is_clamped(self):
        assert toggle_wrap("abc", -5, 100, "*") == _r("*abc*", 1, 4)

    def test_empty_token_is_noop(self):
        assert toggle_wrap("abc", 0, 2, "") == _r("abc", 0, 2)

    def test_short_selection_equal_to_token_is_wrapped(self):
        assert toggle_wrap("**", 0, 2, "**") == _r("******", 2, 4)


class TestToggleWrapAsymmetric:
    def test_wrap(self):
        assert toggle_wrap_asymmetric("x", 0, 1, "[", "]") == _r("[x]", 1, 2)

    def test_unwrap(self):
        assert toggle_wrap_asymmetric("[x]", 1, 2, "[", "]") == _r("x", 0, 1)

    def test_no_inner_strip(self):
        assert toggle_wrap_asymmetric("[x]", 0, 3, "[", "]") == _r("[[x]]", 1, 4)


class TestToggleBlockPrefix:
    def test_prefix_all_lines(self):
        assert toggle_block_prefix("one\ntwo", 0, 7, ">") == _r("> one\n> two", 0, 11)

    def test_remove_prefix(self):
        assert toggle_block_prefix("> one\n> two", 0, 11, ">") == _r("one\ntwo", 0, 7)

    def test_caret_in_middle_line(self):
        assert toggle_block_prefix("a\nbc\nd", 3, 3, "-") == _r("a\n- bc\nd", 2, 6)

    def test_blank_lines_are_left_alone(self):
        assert toggle_block_prefix("a\n\nb", 0, 4, ">") == _r("> a\n\n> b", 0, 8)

    def test_mixed_lines_get_prefixed(self):
        result = toggle_block_prefix("- a\nb", 0, 5, "-")
        assert result == _r("- - a\n- b", 0, 9)

    def test_first_line_selection(self):
        assert toggle_block_prefix("abc\ndef", 1, 2, ">") == _r("> abc\ndef", 0, 5)


class TestToggleCodeBlock:
    def test_wrap_with_language(self):
        assert toggle_code_block("x = 1", 0, 5, "python") == _r(
            "```python\nx = 1\n```", 10, 15
        )

    def test_wrap_without_language(self):
        assert toggle_code_block("a", 0, 1) == _r("```\na\n```", 4, 5)

    def test_unwrap_body_selection(self):
        assert toggle_code_block("```python\nx = 1\n```", 10, 15) == _r("x = 1", 0, 5)

    def test_unwrap_whole_block_selection(self):
        assert toggle_code_block("```\ny\n```", 0, 9) == _r("y", 0, 1)

    def test_round_trip_in_context(self):
        text = "before\ncode\nafter"
        wrapped = toggle_code_block(text, 7, 11, "js")
        assert wrapped.text == "before\n```js\ncode\n```\nafter"
        sel = wrapped.selection
        assert toggle_code_block(wrapped.text, sel.start, sel.end) == _r(text, 7, 11)

    def test_partial_fence_is_wrapped(self):
        result = toggle_code_block("```x", 0, 4)
        assert result.text == "```\n```x\n```"


class TestInsert:
    def test_insert_at(self):
        assert insert_at("ab", 1, "X") == _r("aXb", 2, 2)

    def test_insert_at_clamps(self):
        assert insert_at("ab", 10, "X") == _r("abX", 3, 3)

    def test_masked_link_selects_url_placeholder(self):
        assert insert_masked_link("see docs", 4, 8) == _r("see [docs](url)", 11, 14)

    def test_masked_link_empty_selection(self):
        assert insert_masked_link("", 0, 0) == _r("[link text](url)", 12, 15)

    def test_masked_link_with_url_puts_caret_after(self):
        assert insert_masked_link("go", 0, 2, "https://x.y") == _r(
            "[go](https://x.y)", 17, 17
        )


def _selections(text):
    return [(s, e) for s in range(len(text) + 1) for e in range(s, len(text) + 1)]


_PLAIN_TEXTS = ["", "hello world", "say hello", "one\ntwo", "a\n\nb c"]


class TestRoundTrips:
    """Applying a toggle to its own result restores the original text."""

    @pytest.mark.parametrize("token", ["**", "*", "__", "~~", "`", "||"])
    @pytest.mark.parametrize("text", _PLAIN_TEXTS)
    def test_toggle_wrap_twice(self, text, token):
        for start, end in _selections(text):
            once = toggle_wrap(text, start, end, token)
            sel = once.selection
            twice = toggle_wrap(once.text, sel.start, sel.end, token)
            assert twice == _r(text, start, end), (start, end)

    @pytest.mark.parametrize("prefix", [">", "-"])
    @pytest.mark.parametrize("text", _PLAIN_TEXTS + ["  \nx"])
    def test_toggle_block_prefix_twice(self, text, prefix):
        for start, end in _selections(text):
            once = toggle_block_prefix(text, start, end, prefix)
            sel = once.selection
            twice = toggle_block_prefix(once.text, sel.start, sel.end, prefix)
            assert twice.text == text, (start, end)

    @pytest.mark.parametrize("language", ["", "py"])
    @pytest.mark.parametrize("text", _PLAIN_TEXTS)
    def test_toggle_code_block_twice(self, text, language):
        for start, end in _selections(text):
            once = toggle_code_block(text, start, end, language)
            sel = once.selection
            twice = toggle_code_block(once.text, sel.start, sel.end)
            assert twice == _r(text, start, end), (start, end)

    def test_mid_line_code_block_unwraps(self):
        wrapped = toggle_code_block("hello world", 0, 5)
        assert wrapped == _r("```\nhello\n``` world", 4, 9)
        assert toggle_code_block(wrapped.text, 4, 9) == _r("hello world", 0, 5)

    def test_line_end_code_block_unwraps(self):
        wrapped = toggle_code_block("say hello", 4, 9, "js")
        assert wrapped == _r("say ```js\nhello\n```", 10, 15)
        assert toggle_code_block(wrapped.text, 10, 15) == _r("say hello", 4, 9)
