"""
Batch processing service for bulk writes
"""

import asyncio
from typing import List, Any, Callable, Awaitable
from src.config.constants import BATCH_SIZE, BATCH_DELAY
from src.models.response import BatchAppendResult
from src.utils.error_handler import PartialBatchFailure
from src.utils.logger import logger


def split_into_chunks(items: List[Any], chunk_size: int) -> List[List[Any]]:
    """Split items into consecutive chunks of at most chunk_size"""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]


class BatchProcessor:
    """Writes items chunk by chunk, pausing between chunks to respect rate limits"""

    def __init__(self, batch_size: int = BATCH_SIZE, delay: float = BATCH_DELAY):
        """
        Initialize batch processor

        Args:
            batch_size: Number of items per chunk
            delay: Pause between chunks in seconds
        """
        self.batch_size = batch_size
        self.delay = delay
        self.logger = logger

    async def process_batch(
        self,
        items: List[Any],
        processor: Callable[[List[Any]], Awaitable[Any]],
    ) -> BatchAppendResult:
        """
        Process items in chunks

        A failing chunk is logged and recorded; remaining chunks still run.

        Args:
            items: Items to process
            processor: Async function that handles one chunk

        Returns:
            Counts of requested and processed items plus per-chunk failures
        """
        result = BatchAppendResult(requested=len(items))
        chunks = split_into_chunks(items, self.batch_size)

        for index, chunk in enumerate(chunks):
            self.logger.info(f"Processing batch {index + 1}/{len(chunks)} ({len(chunk)} items)")
            try:
                await processor(chunk)
                result.added += len(chunk)
            except Exception as e:
                failure = PartialBatchFailure(index, len(chunk), e)
                self.logger.error(str(failure))
                result.failures.append(str(failure))

            # Small delay between batches to avoid rate limiting
            if index < len(chunks) - 1 and self.delay > 0:
                await asyncio.sleep(self.delay)

        self.logger.info(
            f"Batch processing complete: {result.added}/{result.requested} succeeded, "
            f"{len(result.failures)} batches failed"
        )
        return result
