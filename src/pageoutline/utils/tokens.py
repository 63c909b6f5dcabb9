"""Approximate token accounting for outline text."""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def approximate_tokens(text: str) -> int:
    """Rough token count (about four characters per token)."""

    return math.ceil(len(text) / CHARS_PER_TOKEN)


def truncate_by_tokens(text: str, max_tokens: int = 20_000) -> str:
    """Truncate text to fit within a token limit.

    The cut lands on the last space when that space is within the final 20% of the
    allowed characters; a marker line with the original size is appended.

    Args:
        text: Text to truncate.
        max_tokens: Maximum number of tokens allowed.

    Returns:
        The text unchanged when it fits, otherwise the truncated text plus marker.
    """

    if max_tokens < 1:
        raise ValueError("max_tokens must be positive")

    token_count = approximate_tokens(text)
    if token_count <= max_tokens:
        return text

    target_chars = max_tokens * CHARS_PER_TOKEN
    truncated = text[:target_chars]
    last_space = truncated.rfind(" ")
    if last_space > target_chars * 0.8:
        truncated = truncated[:last_space]

    return (
        truncated
        + f"\n...[snapshot truncated, original ~{token_count} tokens exceeded {max_tokens} limit]"
    )
