"""Bounded worker pool that keeps results aligned with their inputs."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 8


def bounded_map(
    func: Callable[[T], R],
    items: Sequence[T],
    limit: int = DEFAULT_CONCURRENCY,
    fallback: Optional[Callable[[T, Exception], R]] = None,
    on_result: Optional[Callable[[int, R], None]] = None,
) -> List[R]:
    """Apply ``func`` to every item with at most ``limit`` calls in flight.

    ``results[i]`` always belongs to ``items[i]``, whatever order the calls
    finish in. If ``func`` raises and a ``fallback`` is given, the fallback's
    return value fills that slot and the rest of the batch carries on;
    without a fallback the exception propagates once the pool is drained.
    ``on_result`` is called on the calling thread as each slot is filled.
    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be at least 1, got {limit}")

    results: List[Optional[R]] = [None] * len(items)
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=min(limit, len(items))) as pool:
        futures: Dict[Future, int] = {pool.submit(func, item): i for i, item in enumerate(items)}
        for future in as_completed(futures):
            index = futures[future]
            try:
                value = future.result()
            except Exception as e:
                if fallback is None:
                    raise
                logger.debug(f"Item {index} failed, using fallback: {e!r}")
                value = fallback(items[index], e)
            results[index] = value
            if on_result is not None:
                on_result(index, value)

    return results  # type: ignore[return-value]
