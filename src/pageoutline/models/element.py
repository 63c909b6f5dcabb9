"""Element tree models.

The tree is stored as an arena: every node lives in ``ElementTree.nodes`` and refers to
its children and parent by integer index. Removing or collapsing a node only rewrites
index lists, so no node ever holds a dangling reference.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class ElementKind(str, Enum):
    """Element roles the engine branches on.

    Any role token not listed here maps to ``OTHER``; the original token is kept on the
    node so rendering never loses it.
    """

    GENERIC = "generic"
    LIST = "list"
    LISTITEM = "listitem"
    BUTTON = "button"
    LINK = "link"
    TEXT = "text"
    IMG = "img"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXTBOX = "textbox"
    SEARCHBOX = "searchbox"
    COMBOBOX = "combobox"
    SELECT = "select"
    OPTION = "option"
    TABLE = "table"
    ROW = "row"
    CELL = "cell"
    NAVIGATION = "navigation"
    MAIN = "main"
    FORM = "form"
    ARTICLE = "article"
    SECTION = "section"
    BANNER = "banner"
    CONTENTINFO = "contentinfo"
    SEPARATOR = "separator"
    OTHER = "other"

    @classmethod
    def from_token(cls, token: str) -> ElementKind:
        """Map a raw role token to a kind, falling back to ``OTHER``."""

        try:
            return cls(token)
        except ValueError:
            return cls.OTHER


@dataclass
class ElementNode:
    """One parsed snapshot line."""

    kind: ElementKind
    kind_token: str
    indent: int
    line_number: int
    ref: str | None = None
    text: str | None = None
    interactive: bool = False

    index: int = -1
    children: list[int] = field(default_factory=list)
    parent: int | None = None

    # Refs of generic wrappers collapsed into this node.
    merged_refs: list[str] = field(default_factory=list)

    priority: int = 5
    group_id: str | None = None

    def all_refs(self) -> list[str]:
        """Return this node's own ref followed by any refs it absorbed."""

        refs = [self.ref] if self.ref else []
        refs.extend(self.merged_refs)
        return refs


@dataclass
class ElementTree:
    """Arena of element nodes plus the ordered root list."""

    nodes: list[ElementNode] = field(default_factory=list)
    roots: list[int] = field(default_factory=list)
    line_count: int = 0

    def add(self, node: ElementNode) -> int:
        """Store a node in the arena and return its index."""

        node.index = len(self.nodes)
        self.nodes.append(node)
        return node.index

    def __getitem__(self, index: int) -> ElementNode:
        return self.nodes[index]

    def children_of(self, index: int) -> list[ElementNode]:
        return [self.nodes[i] for i in self.nodes[index].children]

    def iter_subtree(self, index: int) -> Iterator[ElementNode]:
        """Yield a node and its descendants in document order."""

        stack = [index]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def iter_nodes(self, indices: Iterable[int] | None = None) -> Iterator[ElementNode]:
        """Yield every node reachable from ``indices`` (default: the roots)."""

        for index in self.roots if indices is None else indices:
            yield from self.iter_subtree(index)

    def subtree_refs(self, index: int, *, include_self: bool = True) -> list[str]:
        refs: list[str] = []
        for node in self.iter_subtree(index):
            if node.index == index and not include_self:
                continue
            refs.extend(node.all_refs())
        return refs

    def refs(self) -> list[str]:
        """All refs reachable from the roots, in document order."""

        refs: list[str] = []
        for node in self.iter_nodes():
            refs.extend(node.all_refs())
        return refs

    def last_line(self, index: int) -> int:
        """Largest source line number inside a subtree."""

        return max(node.line_number for node in self.iter_subtree(index))

    def max_depth(self, index: int) -> int:
        """Height of the subtree rooted at ``index`` (a leaf has depth 0)."""

        deepest = 0
        stack = [(index, 0)]
        while stack:
            current, depth = stack.pop()
            deepest = max(deepest, depth)
            stack.extend((child, depth + 1) for child in self.nodes[current].children)
        return deepest
