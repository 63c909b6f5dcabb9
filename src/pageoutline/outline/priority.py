"""Content-importance scores for element nodes."""

from __future__ import annotations

from pageoutline.models.element import ElementKind, ElementNode, ElementTree

HIGH_PRIORITY_KINDS = frozenset(
    {
        ElementKind.HEADING,
        ElementKind.BUTTON,
        ElementKind.LINK,
        ElementKind.SEARCHBOX,
        ElementKind.NAVIGATION,
        ElementKind.MAIN,
        ElementKind.FORM,
        ElementKind.ARTICLE,
        ElementKind.SECTION,
    }
)
MEDIUM_PRIORITY_KINDS = frozenset(
    {
        ElementKind.LIST,
        ElementKind.LISTITEM,
        ElementKind.TEXTBOX,
        ElementKind.CHECKBOX,
        ElementKind.RADIO,
        ElementKind.SELECT,
        ElementKind.TABLE,
    }
)
LOW_PRIORITY_KINDS = frozenset({ElementKind.GENERIC, ElementKind.SEPARATOR, ElementKind.IMG, ElementKind.TEXT})

FIXED_PRIORITY = {
    ElementKind.SEARCHBOX: 10,
    ElementKind.NAVIGATION: 9,
}

MIN_PRIORITY = 0
MAX_PRIORITY = 10


def score_priority(node: ElementNode) -> int:
    """Score a node from 0 (noise) to 10 (always worth showing)."""

    if node.kind in FIXED_PRIORITY:
        return FIXED_PRIORITY[node.kind]

    score = 5
    if node.kind in HIGH_PRIORITY_KINDS:
        score += 3
    elif node.kind in MEDIUM_PRIORITY_KINDS:
        score += 1
    elif node.kind in LOW_PRIORITY_KINDS:
        score -= 2

    # Shallower elements matter more.
    score -= node.indent // 8

    text = node.text or ""
    if len(text) > 10:
        score += 1
    if node.interactive:
        score += 1
    if "/url:" in text:
        score += 1
    if "[level=" in text:
        score += 2

    return max(MIN_PRIORITY, min(MAX_PRIORITY, score))


def assign_priorities(tree: ElementTree) -> None:
    """Annotate every reachable node with its priority."""

    for node in tree.iter_nodes():
        node.priority = score_priority(node)
