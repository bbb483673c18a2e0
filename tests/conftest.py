"""Pytest fixtures for partialuploader tests."""
import os

import pytest

from partialuploader.core.config import PacingConfig, ReceiverConfig, RetryConfig, SenderConfig
from partialuploader.core.exceptions import TransientStorageError
from partialuploader.core.storage import LocalStorageGateway, MemoryStorageGateway


class FlakyStorage(MemoryStorageGateway):
    """Memory storage whose first `failures` writes fail."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.write_attempts = 0

    async def write_bytes(self, key, data):
        self.write_attempts += 1
        if self.write_attempts <= self.failures:
            raise TransientStorageError(f"disk full writing {key}")
        await super().write_bytes(key, data)


class BrokenReadStorage(MemoryStorageGateway):
    """Memory storage whose reads fail with an unexpected error while `broken` is set."""

    def __init__(self):
        super().__init__()
        self.broken = True

    async def read_bytes(self, key):
        if self.broken:
            raise RuntimeError(f"backend crashed reading {key}")
        return await super().read_bytes(key)


class UndeletableStorage(MemoryStorageGateway):
    """Memory storage that cannot delete anything."""

    async def delete_tree(self, key):
        raise TransientStorageError(f"permission denied deleting {key}")


class RecordingTransport:
    """Chunk transport that records requests and replays scripted outcomes."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.requests = []
        self.headers = []
        self.closed = False

    async def send_chunk(self, url, request, headers=None):
        self.requests.append(request)
        self.headers.append(headers)
        outcome = self.outcomes.pop(0) if self.outcomes else 200
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


class RecordingPacer:
    """Pacing strategy that records calls instead of sleeping."""

    def __init__(self):
        self.calls = []

    async def before_first(self):
        self.calls.append('startup')

    async def between_chunks(self):
        self.calls.append('between')


@pytest.fixture
def receiver_config(tmp_path):
    """Receiver configuration without retry delays."""
    return ReceiverConfig(
        base_path=str(tmp_path / "App_Data"),
        final_area_name="tmp",
        save_retry=RetryConfig(max_retries=3, delay=0.0)
    )


@pytest.fixture
def sender_config():
    """Sender configuration without pacing or retry delays."""
    return SenderConfig(
        chunk_size=10,
        pacing=PacingConfig.disabled(),
        retry=RetryConfig(max_retries=1, delay=0.0)
    )


@pytest.fixture
def memory_storage():
    return MemoryStorageGateway()


@pytest.fixture
def local_storage(receiver_config):
    return LocalStorageGateway(receiver_config.base_path)


@pytest.fixture
def make_file(tmp_path):
    """Factory creating a file with the given content."""
    def _make(content: bytes, name: str = "sample.bin"):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _make


@pytest.fixture
def random_bytes():
    """Factory for random payloads."""
    return os.urandom


@pytest.fixture
def flaky_storage():
    """Factory for storage that fails its first writes."""
    return FlakyStorage


@pytest.fixture
def recording_transport():
    """Factory for a scripted transport."""
    return RecordingTransport


@pytest.fixture
def recording_pacer():
    return RecordingPacer()


@pytest.fixture
def broken_read_storage():
    return BrokenReadStorage()


@pytest.fixture
def undeletable_storage():
    return UndeletableStorage()
