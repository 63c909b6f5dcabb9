"""Removal of meaningless ``generic`` wrapper nodes.

Two rules, applied bottom-up until nothing changes:

1. An empty ``generic`` (no children, no text, no ref) is dropped.
2. A ``generic`` with exactly one child is replaced by that child. The child takes
   over the wrapper's indentation and parent, inherits its text when it has none,
   and keeps the wrapper's refs in ``merged_refs`` so no ref id is lost.
"""

from __future__ import annotations

from pageoutline.logging import get_logger
from pageoutline.models.element import ElementKind, ElementNode, ElementTree

logger = get_logger(__name__)


def is_empty_generic(node: ElementNode) -> bool:
    return (
        node.kind is ElementKind.GENERIC
        and not node.children
        and not node.text
        and not node.all_refs()
    )


def is_single_child_wrapper(node: ElementNode) -> bool:
    return node.kind is ElementKind.GENERIC and len(node.children) == 1


def _absorb(wrapper: ElementNode, child: ElementNode) -> None:
    child.indent = wrapper.indent
    child.parent = wrapper.parent
    if wrapper.text and not child.text:
        child.text = wrapper.text
    child.merged_refs.extend(wrapper.all_refs())


class WrapperRemover:
    """Rewrite an element tree in place, dropping and collapsing wrappers."""

    def __init__(self, tree: ElementTree):
        self._tree = tree

    def run(self) -> int:
        """Apply passes until a fixed point.

        Returns:
            Number of nodes removed or collapsed.
        """

        total = 0
        while True:
            changed = self._clean()
            if not changed:
                break
            total += changed
        logger.debug("Wrapper removal changed %d nodes", total)
        return total

    def _clean(self) -> int:
        # Reversed preorder visits every node after all of its descendants.
        order: list[int] = []
        stack = list(self._tree.roots)
        while stack:
            index = stack.pop()
            order.append(index)
            stack.extend(self._tree[index].children)

        changed = 0
        for index in reversed(order):
            node = self._tree[index]
            if node.children:
                node.children, n = self._filter(node.children)
                changed += n
        self._tree.roots, n = self._filter(self._tree.roots)
        return changed + n

    def _filter(self, indices: list[int]) -> tuple[list[int], int]:
        result: list[int] = []
        changed = 0
        for index in indices:
            node = self._tree[index]
            if is_empty_generic(node):
                changed += 1
                continue

            while is_single_child_wrapper(node):
                child = self._tree[node.children[0]]
                _absorb(node, child)
                node.children = []
                node = child
                changed += 1

            result.append(node.index)
        return result, changed


def remove_wrappers(tree: ElementTree) -> int:
    """Drop empty generics and collapse single-child generics in ``tree``."""

    return WrapperRemover(tree).run()
