"""Chunked, order-preserving concurrent execution of an async per-item processor."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

from .config import CONCURRENCY_LIMIT

T = TypeVar("T")
R = TypeVar("R")

Processor = Callable[[T, int], Awaitable[R]]
ProgressCallback = Callable[[int, int, str], None]
ChunkCallback = Callable[[int, int], None]


def print_progress(position: int, total: int, name: str) -> None:
    """Default progress sink: one line per item as it starts."""
    print(f"Processing {position}/{total}: {name}")


def item_name(item: Any) -> str:
    """Best-effort display name for progress lines."""
    name = getattr(item, "name", None)
    if name is None and isinstance(item, dict):
        name = item.get("name")
    return str(name if name is not None else item)


async def process_concurrently(
    items: Sequence[T],
    processor: Processor,
    concurrency: int = CONCURRENCY_LIMIT,
    *,
    on_progress: Optional[ProgressCallback] = print_progress,
    on_chunk_start: Optional[ChunkCallback] = None,
    name_of: Callable[[Any], str] = item_name,
) -> List[R]:
    """Run `processor(item, index)` over `items`, at most `concurrency` at a time.

    Items are split into consecutive chunks of `concurrency`; every chunk is
    started in input order and fully awaited before the next one begins, so
    no more than `concurrency` calls are ever outstanding. `results[i]` is the
    output for `items[i]` whatever the completion order.

    A `concurrency` below 1 is clamped to 1. An exception raised by the
    processor propagates out of its chunk (fail-fast); processors that must
    not abort the batch are expected to handle their own errors.
    """
    total = len(items)
    if total == 0:
        return []
    size = max(1, int(concurrency))

    async def run_one(item: T, index: int) -> R:
        if on_progress is not None:
            on_progress(index + 1, total, name_of(item))
        return await processor(item, index)

    results: List[R] = []
    for chunk_index, start in enumerate(range(0, total, size)):
        chunk = items[start:start + size]
        if on_chunk_start is not None:
            on_chunk_start(chunk_index, len(chunk))
        chunk_results = await asyncio.gather(
            *(run_one(item, start + offset) for offset, item in enumerate(chunk))
        )
        results.extend(chunk_results)
    return results


__all__ = ["process_concurrently", "print_progress", "item_name"]
