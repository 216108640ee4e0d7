"""
Tests for batch processor
"""

import pytest
from unittest.mock import AsyncMock, patch
from src.services.batch_processor import BatchProcessor, split_into_chunks


def test_split_into_chunks():
    assert split_into_chunks(list(range(5)), 2) == [[0, 1], [2, 3], [4]]
    assert split_into_chunks([], 3) == []

    with pytest.raises(ValueError):
        split_into_chunks([1], 0)


@pytest.mark.asyncio
async def test_process_batch_all_chunks_succeed():
    """Test that every chunk reaches the processor in order"""
    processor = AsyncMock()
    batch = BatchProcessor(batch_size=2, delay=0)

    result = await batch.process_batch([1, 2, 3, 4, 5], processor)

    assert [call.args[0] for call in processor.call_args_list] == [[1, 2], [3, 4], [5]]
    assert result.requested == 5
    assert result.added == 5
    assert result.partial is False


@pytest.mark.asyncio
async def test_process_batch_records_failed_chunk():
    """Test that a failure does not stop later chunks"""
    processor = AsyncMock(side_effect=[None, RuntimeError("quota"), None])
    batch = BatchProcessor(batch_size=2, delay=0)

    result = await batch.process_batch([1, 2, 3, 4, 5], processor)

    assert processor.await_count == 3
    assert result.added == 3
    assert result.partial is True
    assert result.failures == ["Batch 2 (2 rows) failed: quota"]


@pytest.mark.asyncio
async def test_process_batch_pauses_between_chunks():
    """Test that the delay is applied between chunks only"""
    batch = BatchProcessor(batch_size=1, delay=0.5)

    with patch("src.services.batch_processor.asyncio.sleep", new=AsyncMock()) as sleep:
        await batch.process_batch([1, 2, 3], AsyncMock())

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.5)
