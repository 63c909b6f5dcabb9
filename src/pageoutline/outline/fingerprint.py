"""Structural fingerprints (32-bit simhash) for element subtrees.

A node's fingerprint is built from a handful of string features describing its
shape rather than its text:

- ``skeleton``: own kind, kinds of the first children, kinds of the first grandchildren
- ``shape``: child count and the child counts of the first children
- ``count``: counts of important kinds within the top three levels
- ``interactive``: present when the node or a shallow descendant is clickable
- ``depth``: height of the subtree

Every feature is hashed with DJB2 and folded into 32 bits by weighted bit voting.
Two nodes whose fingerprints differ in at most ``threshold`` bits are similar.
"""

from __future__ import annotations

from pageoutline.models.element import ElementKind, ElementNode, ElementTree
from pageoutline.utils.cache import LRUCache

HASH_BITS = 32
_MASK = (1 << HASH_BITS) - 1

SKELETON_CHILDREN = 5
SKELETON_GRANDCHILDREN = 3
SHAPE_CHILDREN = 3
COUNT_DEPTH = 2
INTERACTIVE_DEPTH = 2

IMPORTANT_KINDS: tuple[ElementKind, ...] = (
    ElementKind.BUTTON,
    ElementKind.LINK,
    ElementKind.TEXT,
    ElementKind.IMG,
    ElementKind.HEADING,
    ElementKind.CHECKBOX,
    ElementKind.RADIO,
)
CLICKABLE_KINDS = frozenset({ElementKind.BUTTON, ElementKind.LINK, ElementKind.CHECKBOX, ElementKind.RADIO})

FEATURE_WEIGHTS: dict[str, int] = {
    "skeleton": 5,
    "shape": 3,
    "depth": 2,
    "count": 1,
    "interactive": 1,
}


def djb2(text: str) -> int:
    """DJB2 string hash truncated to 32 bits."""

    h = 5381
    for ch in text:
        h = ((h << 5) + h + ord(ch)) & _MASK
    return h


def hamming_distance(a: int, b: int) -> int:
    return bin((a ^ b) & _MASK).count("1")


def fold_features(features: list[tuple[str, str]]) -> int:
    """Fold weighted features into one simhash value.

    Each feature votes ``+weight`` on every bit set in its hash and ``-weight`` on every
    bit that is clear; a bit of the result is set when its total is positive.
    """

    votes = [0] * HASH_BITS
    for category, value in features:
        h = djb2(f"{category}:{value}")
        weight = FEATURE_WEIGHTS[category]
        for bit in range(HASH_BITS):
            votes[bit] += weight if (h >> bit) & 1 else -weight

    result = 0
    for bit, total in enumerate(votes):
        if total > 0:
            result |= 1 << bit
    return result


class StructuralFingerprint:
    """Compute and cache fingerprints for nodes of one tree.

    The cache is keyed by arena index and lives as long as this object, which is
    created per compression call. The tree must not be restructured afterwards.
    """

    def __init__(self, tree: ElementTree, *, threshold: int = 3, cache_size: int = 50_000):
        self._tree = tree
        self.threshold = threshold
        self._cache: LRUCache[int, int] = LRUCache(max_size=cache_size)

    def features(self, index: int) -> list[tuple[str, str]]:
        node = self._tree[index]
        features = [
            ("skeleton", self._skeleton(node)),
            ("shape", self._shape(node)),
            ("count", self._type_counts(node)),
        ]
        if self._is_interactive(node):
            features.append(("interactive", "yes"))
        features.append(("depth", str(self._tree.max_depth(index))))
        return features

    def compute(self, index: int) -> int:
        cached = self._cache.get(index)
        if cached is not None:
            return cached
        value = fold_features(self.features(index))
        self._cache.put(index, value)
        return value

    def distance(self, a: int, b: int) -> int:
        return hamming_distance(self.compute(a), self.compute(b))

    def similar(self, a: int, b: int) -> bool:
        return self.distance(a, b) <= self.threshold

    def within(self, base: int, index: int) -> bool:
        """Whether node ``index`` is similar to a precomputed ``base`` fingerprint."""

        return hamming_distance(base, self.compute(index)) <= self.threshold

    def _skeleton(self, node: ElementNode) -> str:
        signature = node.kind_token
        children = self._tree.children_of(node.index)
        if children:
            signature += ">" + "+".join(c.kind_token for c in children[:SKELETON_CHILDREN])
            grandchildren = self._tree.children_of(children[0].index)
            if grandchildren:
                signature += ">" + "+".join(g.kind_token for g in grandchildren[:SKELETON_GRANDCHILDREN])
        return signature

    def _shape(self, node: ElementNode) -> str:
        widths = [len(node.children)]
        widths.extend(len(c.children) for c in self._tree.children_of(node.index)[:SHAPE_CHILDREN])
        return "w" + "-".join(str(w) for w in widths)

    def _type_counts(self, node: ElementNode) -> str:
        counts: dict[ElementKind, int] = {}
        stack = [(node.index, 0)]
        while stack:
            index, depth = stack.pop()
            current = self._tree[index]
            counts[current.kind] = counts.get(current.kind, 0) + 1
            if depth < COUNT_DEPTH:
                stack.extend((child, depth + 1) for child in current.children)

        signature = "".join(
            f"{kind.value[0]}{counts[kind]}" for kind in IMPORTANT_KINDS if counts.get(kind)
        )
        return signature or "empty"

    def _is_interactive(self, node: ElementNode) -> bool:
        if node.interactive:
            return True
        stack = [(node.index, 0)]
        while stack:
            index, depth = stack.pop()
            current = self._tree[index]
            if current.kind in CLICKABLE_KINDS:
                return True
            if depth < INTERACTIVE_DEPTH:
                stack.extend((child, depth + 1) for child in current.children)
        return False
