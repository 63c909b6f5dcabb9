"""Detection of list patterns among sibling nodes."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pageoutline.logging import get_logger
from pageoutline.models.element import ElementKind, ElementNode, ElementTree
from pageoutline.outline.fingerprint import StructuralFingerprint

logger = get_logger(__name__)

PatternKind = Literal["semantic", "structural"]


@dataclass
class ListPattern:
    """A run of similar siblings that renders as one sample plus a fold line.

    ``start`` and ``end`` are positions in the sibling list; structural patterns may
    skip over siblings at other indentation levels, so items are not always contiguous.
    """

    kind: PatternKind
    start: int
    end: int
    items: list[ElementNode]
    group_id: str

    @property
    def sample(self) -> ElementNode:
        return self.items[0]

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def refs(self) -> list[str]:
        refs: list[str] = []
        for item in self.items:
            refs.extend(item.all_refs())
        return refs

    @property
    def folded(self) -> list[ElementNode]:
        """Items after the sample."""

        return self.items[1:]


class ListDetector:
    """Find semantic and structural list patterns in sibling lists."""

    def __init__(self, tree: ElementTree, fingerprint: StructuralFingerprint, *, min_group_size: int = 3):
        if min_group_size < 3:
            raise ValueError("min_group_size must be at least 3")
        self._tree = tree
        self._fingerprint = fingerprint
        self.min_group_size = min_group_size
        self._group_ids = itertools.count(1)

    def detect(self, siblings: Sequence[int]) -> list[ListPattern]:
        """Detect all list patterns in one sibling list.

        Args:
            siblings: Arena indices of the siblings, in document order.

        Returns:
            Non-overlapping patterns ordered by start position.
        """

        if len(siblings) < self.min_group_size:
            return []

        semantic = self._detect_semantic(siblings)
        taken = {pos for pattern, positions in semantic for pos in positions}
        structural = self._detect_structural(siblings, taken)

        patterns = sorted((p for p, _ in semantic + structural), key=lambda p: p.start)
        for pattern in patterns:
            for item in pattern.items:
                item.group_id = pattern.group_id
        if patterns:
            logger.debug(
                "Detected %d list patterns among %d siblings (%s)",
                len(patterns),
                len(siblings),
                ", ".join(f"{p.kind}:{p.sample.kind_token}x{p.count}" for p in patterns),
            )
        return patterns

    def find_similar_run(self, indices: Sequence[int]) -> tuple[int, int] | None:
        """Find the longest run whose members are all similar to its first node.

        Returns:
            Inclusive ``(start, end)`` positions into ``indices``, or ``None`` when no
            run reaches the minimum group size.
        """

        best: tuple[int, int] | None = None
        best_len = self.min_group_size - 1
        n = len(indices)
        for i in range(n):
            # No run starting here could be longer than the best one found.
            if n - i <= best_len:
                break
            base = self._fingerprint.compute(indices[i])
            j = i + 1
            while j < n and self._fingerprint.within(base, indices[j]):
                j += 1
            if j - i > best_len:
                best = (i, j - 1)
                best_len = j - i
        return best

    def _detect_semantic(self, siblings: Sequence[int]) -> list[tuple[ListPattern, list[int]]]:
        found: list[tuple[ListPattern, list[int]]] = []
        run: list[int] = []

        def flush() -> None:
            if len(run) < self.min_group_size:
                return
            sub = self.find_similar_run([siblings[p] for p in run])
            positions = run[sub[0] : sub[1] + 1] if sub else list(run)
            found.append((self._make("semantic", siblings, positions), positions))

        for pos, index in enumerate(siblings):
            if self._tree[index].kind is ElementKind.LISTITEM:
                run.append(pos)
            else:
                flush()
                run = []
        flush()
        return found

    def _detect_structural(
        self, siblings: Sequence[int], taken: set[int]
    ) -> list[tuple[ListPattern, list[int]]]:
        groups: dict[int, list[int]] = {}
        for pos, index in enumerate(siblings):
            if pos in taken:
                continue
            groups.setdefault(self._tree[index].indent, []).append(pos)

        found: list[tuple[ListPattern, list[int]]] = []
        for remaining in groups.values():
            while len(remaining) >= self.min_group_size:
                run = self.find_similar_run([siblings[p] for p in remaining])
                if run is None:
                    break
                positions = remaining[run[0] : run[1] + 1]
                found.append((self._make("structural", siblings, positions), positions))
                consumed = set(positions)
                remaining = [p for p in remaining if p not in consumed]
        return found

    def _make(self, kind: PatternKind, siblings: Sequence[int], positions: list[int]) -> ListPattern:
        items = [self._tree[siblings[p]] for p in positions]
        return ListPattern(
            kind=kind,
            start=positions[0],
            end=positions[-1],
            items=items,
            group_id=f"{kind}-{items[0].kind_token}-{next(self._group_ids)}",
        )
