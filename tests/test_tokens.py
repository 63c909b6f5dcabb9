"""Tests for the token limiter."""

from __future__ import annotations

import pytest

from pageoutline.utils.tokens import approximate_tokens, truncate_by_tokens


def test_approximate_tokens_rounds_up() -> None:
    """Four characters make one token; partial tokens count."""

    assert approximate_tokens("") == 0
    assert approximate_tokens("abcd") == 1
    assert approximate_tokens("abcde") == 2


def test_short_text_is_untouched() -> None:
    """Text within the limit is returned as is."""

    assert truncate_by_tokens("hello world", max_tokens=10) == "hello world"


def test_truncation_prefers_word_boundary() -> None:
    """The cut backs up to a space near the end of the allowed span."""

    text = "alpha beta gamma delta epsilon " * 20

    out = truncate_by_tokens(text, max_tokens=10)
    body, marker = out.split("\n")

    assert len(body) <= 40
    assert not body.endswith(" ")
    assert text.startswith(body)
    assert marker == f"...[snapshot truncated, original ~{approximate_tokens(text)} tokens exceeded 10 limit]"


def test_truncation_without_nearby_space_cuts_hard() -> None:
    """Without a late space the text is cut at the exact character limit."""

    out = truncate_by_tokens("x" * 100, max_tokens=5)

    assert out.split("\n")[0] == "x" * 20


def test_non_positive_limit_rejected() -> None:
    """A zero token limit is invalid."""

    with pytest.raises(ValueError):
        truncate_by_tokens("abc", max_tokens=0)
