"""Tests for list pattern detection."""

from __future__ import annotations

import pytest

from pageoutline.models.element import ElementTree
from pageoutline.outline.fingerprint import StructuralFingerprint
from pageoutline.outline.lists import ListDetector
from pageoutline.outline.parser import build_tree

from fingerprints import DistinctFingerprint, KindFingerprint, NumberFingerprint


def _roots(lines: list[str]) -> tuple[ElementTree, list[int]]:
    tree = build_tree("\n".join(lines))
    return tree, tree.roots


def _summary(patterns) -> list[tuple[str, int, int, int]]:
    return [(p.kind, p.start, p.end, p.count) for p in patterns]


def test_forty_eight_listitems_form_one_semantic_pattern() -> None:
    """Structurally identical list items fold into a single semantic pattern."""

    lines = ["- list [ref=l]:"]
    for i in range(48):
        lines += [
            f"  - listitem [ref=li{i}]:",
            f'    - link "Article {i}" [ref=a{i}]',
            f"    - text: posted {i} hours ago",
        ]
    tree = build_tree("\n".join(lines))
    items = tree[tree.roots[0]].children
    detector = ListDetector(tree, StructuralFingerprint(tree))

    patterns = detector.detect(items)

    assert _summary(patterns) == [("semantic", 0, 47, 48)]
    assert patterns[0].sample.ref == "li0"
    assert patterns[0].refs == [f"li{i}" for i in range(48)]


def test_dissimilar_listitems_still_form_a_semantic_pattern() -> None:
    """Role agreement alone is enough when no similar sub-run exists."""

    tree, roots = _roots(["- listitem [ref=a]", "- listitem [ref=b]", "- listitem [ref=c]", "- listitem [ref=d]"])
    detector = ListDetector(tree, DistinctFingerprint(tree))

    assert _summary(detector.detect(roots)) == [("semantic", 0, 3, 4)]


def test_semantic_run_at_end_of_siblings_is_detected() -> None:
    """A listitem run that closes the sibling list is not lost."""

    tree, roots = _roots(["- heading [ref=h]", "- listitem [ref=a]", "- listitem [ref=b]", "- listitem [ref=c]"])
    detector = ListDetector(tree, DistinctFingerprint(tree))

    assert _summary(detector.detect(roots)) == [("semantic", 1, 3, 3)]


def test_structural_runs_and_short_runs() -> None:
    """Three similar buttons fold; a pair of links does not."""

    tree, roots = _roots(
        [
            "- button [ref=b1]",
            "- button [ref=b2]",
            "- button [ref=b3]",
            "- heading [ref=h]",
            "- link [ref=l1]",
            "- link [ref=l2]",
        ]
    )
    detector = ListDetector(tree, KindFingerprint(tree))

    patterns = detector.detect(roots)

    assert _summary(patterns) == [("structural", 0, 2, 3)]
    assert patterns[0].refs == ["b1", "b2", "b3"]


def test_semantic_members_are_excluded_from_structural_pass() -> None:
    """Listitems claimed by the semantic pass never join a structural pattern."""

    tree, roots = _roots(
        [
            "- listitem [ref=a]",
            "- listitem [ref=b]",
            "- listitem [ref=c]",
            "- button [ref=d]",
            "- button [ref=e]",
            "- button [ref=f]",
        ]
    )
    detector = ListDetector(tree, KindFingerprint(tree))

    assert _summary(detector.detect(roots)) == [("semantic", 0, 2, 3), ("structural", 3, 5, 3)]


def test_structural_pass_groups_by_indentation() -> None:
    """Only siblings with the same indentation are compared."""

    tree, roots = _roots(
        [
            "    - button [ref=a]",
            "  - button [ref=b]",
            "- button [ref=c]",
            "- button [ref=d]",
            "- button [ref=e]",
        ]
    )
    detector = ListDetector(tree, KindFingerprint(tree))

    patterns = detector.detect(roots)

    assert _summary(patterns) == [("structural", 2, 4, 3)]
    assert patterns[0].refs == ["c", "d", "e"]


def test_structural_pass_rescans_after_removing_matches() -> None:
    """Once a run is consumed, the nodes around it can form a run of their own."""

    tree, roots = _roots(
        [
            "- button [ref=x1]",
            "- link [ref=a1]",
            "- link [ref=a2]",
            "- link [ref=a3]",
            "- button [ref=x2]",
            "- button [ref=x3]",
        ]
    )
    detector = ListDetector(tree, KindFingerprint(tree))

    patterns = detector.detect(roots)

    assert _summary(patterns) == [("structural", 0, 5, 3), ("structural", 1, 3, 3)]
    assert patterns[0].refs == ["x1", "x2", "x3"]
    memberships = [item.index for p in patterns for item in p.items]
    assert len(memberships) == len(set(memberships))


def test_patterns_annotate_group_ids() -> None:
    """Members of one pattern share a group id; different patterns differ."""

    tree, roots = _roots(["- button", "- button", "- button", "- link", "- link", "- link"])
    detector = ListDetector(tree, KindFingerprint(tree))

    first, second = detector.detect(roots)

    assert len({item.group_id for item in first.items}) == 1
    assert len({item.group_id for item in second.items}) == 1
    assert first.items[0].group_id != second.items[0].group_id


def test_find_similar_run_prefers_longest() -> None:
    """The longest similar run wins over an earlier shorter one."""

    tree, roots = _roots(["- link", "- link", "- link", "- heading", "- img", "- img", "- img", "- img"])
    detector = ListDetector(tree, KindFingerprint(tree))

    assert detector.find_similar_run(roots) == (4, 7)
    assert detector.find_similar_run(roots[:2]) is None


def test_short_sibling_lists_and_min_group_size() -> None:
    """Fewer siblings than the minimum never produce a pattern."""

    tree, roots = _roots(["- button", "- button"])
    assert ListDetector(tree, KindFingerprint(tree)).detect(roots) == []

    tree, roots = _roots(["- button", "- button", "- button"])
    assert ListDetector(tree, KindFingerprint(tree), min_group_size=4).detect(roots) == []

    with pytest.raises(ValueError):
        ListDetector(tree, KindFingerprint(tree), min_group_size=2)


def _row(name: str, child: str, count: int) -> list[str]:
    return [f"- row [ref={name}]:"] + [f"  - {child}" for _ in range(count)]


def test_structural_pass_with_real_fingerprints() -> None:
    """Rows sharing a skeleton fold despite different widths; a different skeleton breaks the run."""

    tree, roots = _roots(
        _row("r0", "img", 5)
        + _row("r1", "img", 6)
        + _row("r2", "img", 8)
        + _row("r3", "cell", 6)
        + _row("r4", "img", 7)
        + _row("r5", "img", 6)
    )
    fp = StructuralFingerprint(tree)
    detector = ListDetector(tree, fp)

    assert fp.distance(roots[0], roots[1]) > 0
    assert fp.similar(roots[0], roots[1])
    assert fp.similar(roots[0], roots[2])
    assert not fp.similar(roots[0], roots[3])
    assert not fp.similar(roots[3], roots[4])

    patterns = detector.detect(roots)

    assert _summary(patterns) == [("structural", 0, 2, 3)]
    assert patterns[0].refs == ["r0", "r1", "r2"]


def test_longest_run_may_start_inside_an_earlier_run() -> None:
    """Every start position is tried, so an overlapping longer run wins."""

    tree, roots = _roots(["- button: 0", "- button: 1", "- button: 1", "- button: 2", "- button: 2", "- button: 2"])
    detector = ListDetector(tree, NumberFingerprint(tree))

    assert detector.find_similar_run(roots) == (1, 5)
    assert _summary(detector.detect(roots)) == [("structural", 1, 5, 5)]
