"""Chunked concurrent execution with a cooldown between chunks."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class BatchRunner:
    def __init__(self, *, sleep: Sleep = asyncio.sleep) -> None:
        self._sleep = sleep

    async def run[T, R](
        self,
        items: Sequence[T],
        chunk_size: int,
        operation: Callable[[T], Awaitable[R]],
        cooldown: float = 1.0,
    ) -> list[R]:
        """Run ``operation`` over ``items`` ``chunk_size`` at a time.

        Results keep the order of ``items``. The cooldown is skipped after the
        last chunk.
        """

        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")

        chunks = [items[i : i + chunk_size] for i in range(0, len(items), chunk_size)]
        results: list[R] = []
        for index, chunk in enumerate(chunks):
            chunk_results = await asyncio.gather(*(operation(item) for item in chunk))
            results.extend(chunk_results)
            if index < len(chunks) - 1 and cooldown > 0:
                log.debug(
                    "Batch %s/%s done, cooling down %.2fs", index + 1, len(chunks), cooldown
                )
                await self._sleep(cooldown)
        return results
