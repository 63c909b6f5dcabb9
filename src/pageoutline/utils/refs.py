"""Reference id extraction from rendered outlines."""

from __future__ import annotations

import re

HIDDEN_REFS_HEADER = "Hidden refs:"
ELLIPSIS_REF = "..."

_INLINE_REF_RE = re.compile(r"\[ref=(?P<id>[^\]]+)\]")
_FOLD_REFS_RE = re.compile(r"\(\.\.\. and \d+ more similar\) \[refs: (?P<ids>[^\]]+)\]")
_HIDDEN_LINE_RE = re.compile(r"^- (?:fold|omitted) L\d+-L\d+(?: \S+)?: (?P<ids>.+)$")


def _split_ids(raw: str) -> list[str]:
    return [p.strip() for p in raw.split(",") if p.strip() and p.strip() != ELLIPSIS_REF]


def extract_refs(text: str) -> list[str]:
    """Extract every reference id recoverable from an outline.

    Ids are collected from inline ``[ref=...]`` markers, fold lines
    (``[refs: a, b, ...]``) and the trailing hidden-refs block, in document order.
    Duplicates are kept so callers can check that each id occurs once.

    Args:
        text: Rendered outline, with or without its header line.

    Returns:
        List of ids like ``e12``.
    """

    refs: list[str] = []
    in_hidden = False
    for line in text.splitlines():
        if line == HIDDEN_REFS_HEADER:
            in_hidden = True
            continue
        if in_hidden:
            m = _HIDDEN_LINE_RE.match(line)
            if m:
                refs.extend(_split_ids(m.group("ids")))
            continue
        refs.extend(m.group("id") for m in _INLINE_REF_RE.finditer(line))
        fold = _FOLD_REFS_RE.search(line)
        if fold:
            refs.extend(_split_ids(fold.group("ids")))
    return refs
