"""Snapshot line parsing and tree building."""

from __future__ import annotations

import re

from pageoutline.logging import get_logger
from pageoutline.models.element import ElementKind, ElementNode, ElementTree

logger = get_logger(__name__)

_ELEMENT_RE = re.compile(r"^\s*-\s*(?P<kind>[a-z]+)(?P<rest>.*)$")
_REF_RE = re.compile(r"\[ref=(?P<ref>[^\]]+)\]")
CURSOR_MARKER = "[cursor=pointer]"


def _extract_text(segment: str) -> str | None:
    segment = segment.replace(CURSOR_MARKER, "").strip()
    if segment.startswith(":"):
        segment = segment[1:].strip()
    elif segment.endswith(":"):
        segment = segment[:-1].rstrip()
    return segment or None


def parse_line(line: str, line_number: int) -> ElementNode | None:
    """Parse one snapshot line into a detached node.

    Lines without a ``- kind`` prefix are not errors: they return ``None`` and are
    skipped by the caller.

    Args:
        line: Raw snapshot line.
        line_number: 0-based position of the line in the snapshot.

    Returns:
        A node that is not yet attached to any tree, or ``None``.
    """

    if not line.strip():
        return None
    m = _ELEMENT_RE.match(line)
    if not m:
        return None

    token = m.group("kind")
    rest = m.group("rest")
    ref_match = _REF_RE.search(rest)
    segment = rest[: ref_match.start()] if ref_match else rest

    return ElementNode(
        kind=ElementKind.from_token(token),
        kind_token=token,
        indent=len(line) - len(line.lstrip()),
        line_number=line_number,
        ref=ref_match.group("ref") if ref_match else None,
        text=_extract_text(segment),
        interactive=CURSOR_MARKER in line,
    )


def build_tree(snapshot: str) -> ElementTree:
    """Build an element tree from snapshot text using indentation.

    A stack holds the open ancestors; each new node closes every ancestor whose
    indentation is not smaller than its own, then becomes the last child of whatever
    remains on top (or a new root).
    """

    lines = snapshot.splitlines()
    tree = ElementTree(line_count=len(lines))
    stack: list[ElementNode] = []
    dropped = 0

    for i, line in enumerate(lines):
        node = parse_line(line, i)
        if node is None:
            if line.strip():
                dropped += 1
            continue

        while stack and stack[-1].indent >= node.indent:
            stack.pop()

        index = tree.add(node)
        if stack:
            parent = stack[-1]
            parent.children.append(index)
            node.parent = parent.index
        else:
            tree.roots.append(index)
        stack.append(node)

    logger.debug("Parsed %d nodes from %d lines (%d unparseable)", len(tree.nodes), len(lines), dropped)
    return tree
