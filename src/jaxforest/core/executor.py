"""Row-parallel execution.

Rows of a batch are routed independently, so the batch is cut into
contiguous blocks and each block is handed to a worker thread. Every block
owns a disjoint slice of the output; nothing else is shared.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


def row_blocks(num_rows: int, block_size: int) -> Iterator[tuple[int, int]]:
    """Yield (start, stop) bounds covering [0, num_rows) in order."""
    for start in range(0, num_rows, block_size):
        yield start, min(start + block_size, num_rows)


def map_row_blocks(
    fn: Callable[[int, int], None],
    num_rows: int,
    block_size: int,
    num_workers: int = 1,
) -> int:
    """Run ``fn(start, stop)`` over every row block.

    Args:
        fn: Callable that processes rows [start, stop). It must only write
            to its own rows of the output.
        num_rows: Number of rows in the batch.
        block_size: Rows per block.
        num_workers: Maximum number of worker threads. 1 runs inline.

    Returns:
        Number of blocks processed.
    """
    blocks = list(row_blocks(num_rows, block_size))
    if num_workers == 1 or len(blocks) <= 1:
        for start, stop in blocks:
            fn(start, stop)
        return len(blocks)

    logger.debug("Dispatching %d row blocks to %d workers", len(blocks), num_workers)
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [executor.submit(fn, start, stop) for start, stop in blocks]
        # Re-raises the first worker failure in the caller.
        for f in futures:
            f.result()
    return len(blocks)
