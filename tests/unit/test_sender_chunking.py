"""Tests for chunking and pacing strategies."""
import pytest
from unittest.mock import patch, AsyncMock

from partialuploader.core.config import DEFAULT_CHUNK_SIZE, PacingConfig
from partialuploader.core.sender.strategies import FixedSizeChunkingStrategy, FixedPacingStrategy


class TestFixedSizeChunkingStrategy:
    """Test suite for FixedSizeChunkingStrategy."""

    def test_default_chunk_size(self):
        """Test default chunk size."""
        strategy = FixedSizeChunkingStrategy()
        assert strategy.chunk_size == DEFAULT_CHUNK_SIZE == 25_165_824

    def test_invalid_chunk_size(self):
        """Test invalid chunk size raises error."""
        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(chunk_size=0)

        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(chunk_size=-1)

    def test_empty_file(self):
        """Test chunking empty file."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        assert strategy.calculate_chunks(0) == []

    @pytest.mark.parametrize("size", [1, 9, 10])
    def test_file_fits_in_one_chunk(self, size):
        """Test file no larger than chunk size is a single last chunk."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        chunks = strategy.calculate_chunks(size)

        assert len(chunks) == 1
        assert chunks[0].ordinal == 1
        assert (chunks[0].start, chunks[0].end) == (0, size)

    def test_twenty_five_bytes_in_tens(self):
        """Test 25 bytes with chunk size 10 gives 10, 10, 5."""
        strategy = FixedSizeChunkingStrategy(chunk_size=10)
        chunks = strategy.calculate_chunks(25)

        assert [c.size for c in chunks] == [10, 10, 5]
        assert [c.ordinal for c in chunks] == [1, 2, 3]

    def test_file_exact_multiple(self):
        """Test file size exact multiple of chunk size."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1000)
        chunks = strategy.calculate_chunks(3000)

        assert len(chunks) == 3
        assert chunks[-1].size == 1000

    @pytest.mark.parametrize("size,chunk_size", [(1, 7), (99, 7), (100, 10), (1001, 250)])
    def test_chunk_count_is_ceiling(self, size, chunk_size):
        """Test ceil(S/C) chunks covering the file contiguously."""
        strategy = FixedSizeChunkingStrategy(chunk_size=chunk_size)
        chunks = strategy.calculate_chunks(size)

        assert len(chunks) == -(-size // chunk_size) == strategy.count_chunks(size)
        assert sum(c.size for c in chunks) == size
        assert all(c.size == chunk_size for c in chunks[:-1])
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.end == current.start


class TestFixedPacingStrategy:
    """Test suite for FixedPacingStrategy."""

    def test_defaults(self):
        pacing = FixedPacingStrategy()
        assert pacing.config.startup_delay == 0.05
        assert pacing.config.inter_chunk_delay == 0.55

    @pytest.mark.asyncio
    async def test_waits_configured_delays(self):
        pacing = FixedPacingStrategy(PacingConfig(startup_delay=0.2, inter_chunk_delay=0.7))

        with patch('partialuploader.core.sender.strategies.pacing.asyncio.sleep', new=AsyncMock()) as sleep:
            await pacing.before_first()
            await pacing.between_chunks()

        assert [call.args[0] for call in sleep.await_args_list] == [0.2, 0.7]

    @pytest.mark.asyncio
    async def test_disabled_pacing_never_sleeps(self):
        pacing = FixedPacingStrategy(PacingConfig.disabled())

        with patch('partialuploader.core.sender.strategies.pacing.asyncio.sleep', new=AsyncMock()) as sleep:
            await pacing.before_first()
            await pacing.between_chunks()

        sleep.assert_not_awaited()
