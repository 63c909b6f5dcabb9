"""Outline options and results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class OutlineOptions(BaseModel):
    """Per-call knobs threaded through the compression pipeline.

    ``max_lines`` has no lower bound here; a non-positive budget is rejected
    by the renderer with ``OutlineBudgetError``.
    """

    max_lines: int = 100
    min_group_size: int = Field(default=3, ge=3)

    text_limit: int = Field(default=50, ge=1)
    fold_ref_limit: int = Field(default=5, ge=1)
    sample_children: int = Field(default=3, ge=0, le=3)

    similarity_threshold: int = Field(default=3, ge=0, le=32)
    # Skipped siblings at or above this priority may still get one line each,
    # at most boost_lines of them per outline.
    priority_boost: int = Field(default=9, ge=0, le=11)
    boost_lines: int = Field(default=5, ge=0)
    fingerprint_cache_size: int = Field(default=50_000, ge=1)


class OutlineResult(BaseModel):
    """A rendered outline plus the numbers behind it."""

    text: str
    rendered_lines: int = Field(ge=0)
    original_lines: int = Field(ge=0)

    nodes: int = Field(default=0, ge=0)
    wrappers_removed: int = Field(default=0, ge=0)
    patterns: int = Field(default=0, ge=0)
    folded_items: int = Field(default=0, ge=0)

    refs_total: int = Field(default=0, ge=0)
    refs_hidden: int = Field(default=0, ge=0)

    @property
    def compression_ratio(self) -> float:
        """Fraction of original lines removed (0.0 when nothing was removed)."""

        if not self.original_lines:
            return 0.0
        return max(0.0, 1.0 - self.rendered_lines / self.original_lines)
