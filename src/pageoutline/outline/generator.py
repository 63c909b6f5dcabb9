"""Outline generation entry points.

Every call builds its own tree, fingerprint cache and detector, so calls share no
state and may run concurrently.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence

from pageoutline.logging import get_logger, outline_context
from pageoutline.models.outline import OutlineOptions, OutlineResult
from pageoutline.outline.fingerprint import StructuralFingerprint
from pageoutline.outline.lists import ListDetector
from pageoutline.outline.parser import build_tree
from pageoutline.outline.priority import assign_priorities
from pageoutline.outline.renderer import OutlineRenderer, ensure_budget
from pageoutline.outline.wrappers import remove_wrappers

logger = get_logger(__name__)


def format_header(rendered: int, original: int) -> str:
    return f"Page Outline ({rendered}/{original} lines):"


def compress_outline(snapshot: str, options: OutlineOptions | None = None) -> OutlineResult:
    """Compress a snapshot into an outline and report what happened.

    Args:
        snapshot: Indented accessibility snapshot text.
        options: Rendering options; defaults are used when omitted.

    Returns:
        OutlineResult: Outline text plus counters.

    Raises:
        OutlineBudgetError: If ``options.max_lines`` is not positive.
    """

    options = options or OutlineOptions()
    ensure_budget(options.max_lines)

    with outline_context(uuid.uuid4().hex[:8]):
        tree = build_tree(snapshot)
        removed = remove_wrappers(tree)
        assign_priorities(tree)

        fingerprint = StructuralFingerprint(
            tree,
            threshold=options.similarity_threshold,
            cache_size=options.fingerprint_cache_size,
        )
        detector = ListDetector(tree, fingerprint, min_group_size=options.min_group_size)
        renderer = OutlineRenderer(tree, detector, options)
        body = renderer.render()

        text = "\n".join([format_header(len(body), tree.line_count), *body])
        result = OutlineResult(
            text=text,
            rendered_lines=len(body),
            original_lines=tree.line_count,
            nodes=len(tree.nodes),
            wrappers_removed=removed,
            patterns=len(renderer.patterns),
            folded_items=sum(p.count - 1 for p in renderer.patterns),
            refs_total=len(tree.refs()),
            refs_hidden=renderer.hidden_ref_count,
        )
        logger.info(
            "Outline %d/%d lines, %d patterns, %d refs (%d hidden)",
            result.rendered_lines,
            result.original_lines,
            result.patterns,
            result.refs_total,
            result.refs_hidden,
        )
        return result


def generate_outline(snapshot: str, options: OutlineOptions | None = None) -> str:
    """Compress a snapshot and return only the outline text."""

    return compress_outline(snapshot, options).text


async def generate_outline_async(snapshot: str, options: OutlineOptions | None = None) -> str:
    """Async variant of :func:`generate_outline`.

    The CPU-bound work runs in a worker thread so the event loop stays responsive.
    """

    return await asyncio.to_thread(generate_outline, snapshot, options)


async def generate_outlines(
    snapshots: Sequence[str],
    options: OutlineOptions | None = None,
    *,
    max_concurrent: int = 4,
) -> list[str]:
    """Compress several snapshots concurrently, preserving input order.

    Args:
        snapshots: Snapshot texts, e.g. one per open page.
        options: Rendering options shared by all calls.
        max_concurrent: Upper bound on simultaneous worker threads.
    """

    if max_concurrent < 1:
        raise ValueError("max_concurrent must be positive")
    semaphore = asyncio.Semaphore(max_concurrent)

    async def run_one(snapshot: str) -> str:
        async with semaphore:
            return await generate_outline_async(snapshot, options)

    return list(await asyncio.gather(*(run_one(s) for s in snapshots)))
