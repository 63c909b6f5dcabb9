"""Rendering of a cleaned element tree into a compact outline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from pageoutline.logging import get_logger
from pageoutline.models.element import ElementNode, ElementTree
from pageoutline.models.outline import OutlineOptions
from pageoutline.outline.lists import ListDetector, ListPattern
from pageoutline.outline.parser import CURSOR_MARKER
from pageoutline.utils.refs import ELLIPSIS_REF, HIDDEN_REFS_HEADER

logger = get_logger(__name__)

TEXT_ELLIPSIS = "..."


class OutlineBudgetError(ValueError):
    """Raised when an outline is requested with a non-positive line budget."""


def ensure_budget(max_lines: int) -> None:
    if max_lines <= 0:
        raise OutlineBudgetError(f"max_lines must be a positive integer, got {max_lines}")


def truncate_text(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TEXT_ELLIPSIS


def format_node(node: ElementNode, *, text_limit: int = 50) -> str:
    """Format a node as one outline line.

    ``<indent>- <kind>[ <text>][ [ref=<id>]...][ [cursor=pointer]]``
    """

    parts = [f"{' ' * node.indent}- {node.kind_token}"]
    if node.text:
        parts.append(truncate_text(node.text, text_limit))
    parts.extend(f"[ref={ref}]" for ref in node.all_refs())
    if node.interactive:
        parts.append(CURSOR_MARKER)
    return " ".join(parts)


def format_fold_line(pattern: ListPattern, *, ref_limit: int = 5) -> tuple[str, list[str]]:
    """Format the summary line for a pattern's folded items.

    Returns:
        The fold line and the folded item refs that did not fit on it.
    """

    sample = pattern.sample
    refs = [ref for item in pattern.folded for ref in item.all_refs()]
    line = f"{' ' * sample.indent}- {sample.kind_token} (... and {pattern.count - 1} more similar)"
    shown = refs[:ref_limit]
    if shown:
        listed = ", ".join(shown)
        if len(refs) > ref_limit:
            listed += f", {ELLIPSIS_REF}"
        line += f" [refs: {listed}]"
    return line, refs[ref_limit:]


@dataclass
class HiddenRefs:
    """Refs that are neither inline nor on a fold line, with the source lines they cover."""

    label: Literal["fold", "omitted"]
    first_line: int
    last_line: int
    refs: list[str] = field(default_factory=list)
    kind_token: str | None = None

    def format(self) -> str:
        head = f"- {self.label} L{self.first_line + 1}-L{self.last_line + 1}"
        if self.kind_token:
            head += f" {self.kind_token}"
        return f"{head}: {', '.join(self.refs)}"


@dataclass
class _SiblingFrame:
    """A sibling list being walked, with the patterns detected in it."""

    siblings: Sequence[int]
    by_sample: dict[int, ListPattern]
    folded: set[int]
    pos: int = 0
    # Pattern whose fold line is emitted once this list is done.
    closes: ListPattern | None = None


class OutlineRenderer:
    """Depth-first renderer with an advisory line budget.

    The budget is checked before a node or pattern is started. Once it is spent the
    rest of the current sibling list is skipped; skipped nodes whose priority reaches
    ``priority_boost`` may still get their own line, up to ``boost_lines`` of them per
    outline. Whatever is skipped or folded away keeps its refs in the hidden-refs index
    appended after the body.

    The walk keeps its own stack, so nesting depth is bounded by memory only.
    """

    def __init__(self, tree: ElementTree, detector: ListDetector, options: OutlineOptions):
        ensure_budget(options.max_lines)
        self._tree = tree
        self._detector = detector
        self._options = options
        self._remaining = options.max_lines
        self._boosts_left = options.boost_lines
        self._lines: list[str] = []
        self._hidden: list[HiddenRefs] = []
        self.patterns: list[ListPattern] = []

    @property
    def hidden_ref_count(self) -> int:
        return sum(len(h.refs) for h in self._hidden)

    def render(self) -> list[str]:
        """Render the whole tree.

        Returns:
            Body lines, including the hidden-refs block when there is one.
        """

        self._walk(self._tree.roots)
        lines = list(self._lines)
        if self._hidden:
            lines.append(HIDDEN_REFS_HEADER)
            lines.extend(h.format() for h in self._hidden)
        if len(lines) > self._options.max_lines:
            logger.debug("Outline exceeds budget: %d lines for max_lines=%d", len(lines), self._options.max_lines)
        return lines

    def _emit(self, line: str) -> None:
        self._lines.append(line)
        self._remaining -= 1

    def _frame(self, siblings: Sequence[int], closes: ListPattern | None = None) -> _SiblingFrame:
        patterns = self._detector.detect(siblings)
        return _SiblingFrame(
            siblings=siblings,
            by_sample={p.sample.index: p for p in patterns},
            folded={item.index for p in patterns for item in p.folded},
            closes=closes,
        )

    def _walk(self, roots: Sequence[int]) -> None:
        stack = [self._frame(roots)]
        while stack:
            frame = stack[-1]
            if frame.pos >= len(frame.siblings):
                stack.pop()
                if frame.closes is not None:
                    self._close_pattern(frame.closes)
                continue

            pos = frame.pos
            index = frame.siblings[pos]
            frame.pos += 1
            if index in frame.folded:
                continue
            if self._remaining <= 0:
                self._skip(frame.siblings[pos:], frame.by_sample, frame.folded)
                frame.pos = len(frame.siblings)
                continue

            pattern = frame.by_sample.get(index)
            if pattern is not None:
                shown = self._open_pattern(pattern)
                if shown:
                    stack.append(self._frame(shown, closes=pattern))
                else:
                    self._close_pattern(pattern)
            else:
                node = self._tree[index]
                self._emit(format_node(node, text_limit=self._options.text_limit))
                if node.children:
                    stack.append(self._frame(node.children))

    def _open_pattern(self, pattern: ListPattern) -> list[int]:
        """Emit the sample line and return the sample children to render."""

        self.patterns.append(pattern)
        self._emit(format_node(pattern.sample, text_limit=self._options.text_limit))
        return pattern.sample.children[: self._options.sample_children]

    def _close_pattern(self, pattern: ListPattern) -> None:
        sample = pattern.sample
        limit = self._options.sample_children

        line, overflow = format_fold_line(pattern, ref_limit=self._options.fold_ref_limit)
        self._emit(line)

        refs = list(overflow)
        for item in pattern.folded:
            refs.extend(self._tree.subtree_refs(item.index, include_self=False))
        for child in sample.children[limit:]:
            refs.extend(self._tree.subtree_refs(child))
        if refs:
            self._hidden.append(
                HiddenRefs(
                    label="fold",
                    first_line=sample.line_number,
                    last_line=max(self._tree.last_line(item.index) for item in pattern.items),
                    refs=refs,
                    kind_token=sample.kind_token,
                )
            )

    def _skip(self, indices: Sequence[int], by_sample: dict[int, ListPattern], folded: set[int]) -> None:
        refs: list[str] = []
        first_line: int | None = None
        last_line: int | None = None

        for index in indices:
            if index in folded:
                continue
            node = self._tree[index]
            pattern = by_sample.get(index)
            if pattern is None and node.priority >= self._options.priority_boost and self._boosts_left > 0:
                self._boosts_left -= 1
                self._emit(format_node(node, text_limit=self._options.text_limit))
                refs.extend(self._tree.subtree_refs(index, include_self=False))
            else:
                members = pattern.items if pattern is not None else [node]
                for member in members:
                    refs.extend(self._tree.subtree_refs(member.index))

            members_last = (
                max(self._tree.last_line(m.index) for m in pattern.items)
                if pattern is not None
                else self._tree.last_line(index)
            )
            first_line = node.line_number if first_line is None else min(first_line, node.line_number)
            last_line = members_last if last_line is None else max(last_line, members_last)

        if refs and first_line is not None and last_line is not None:
            self._hidden.append(HiddenRefs(label="omitted", first_line=first_line, last_line=last_line, refs=refs))
