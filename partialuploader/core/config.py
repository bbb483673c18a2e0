"""
Configuration module.

Provides explicit configuration values for the sender and the receiver.
Every component receives its configuration at construction time.
"""
from dataclasses import dataclass, field

DEFAULT_CHUNK_SIZE = 25_165_824
STAGING_AREA_NAME = '__chunk-staging__'


@dataclass(frozen=True)
class RetryConfig:
    """
    Retry configuration.

    Controls fixed-delay retry behavior. `max_retries` counts the
    additional attempts after the first one.
    """
    max_retries: int = 3
    delay: float = 3.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    @property
    def total_attempts(self) -> int:
        """Returns the number of attempts including the first one."""
        return self.max_retries + 1


@dataclass(frozen=True)
class PacingConfig:
    """
    Sender pacing configuration.

    Throttles the sender so the receiver is not flooded.
    """
    startup_delay: float = 0.05  # Before the first chunk
    inter_chunk_delay: float = 0.55  # Between successive chunks

    @classmethod
    def disabled(cls) -> 'PacingConfig':
        """Create configuration with no pacing delays."""
        return cls(startup_delay=0.0, inter_chunk_delay=0.0)


@dataclass(frozen=True)
class TimeoutConfig:
    """
    Timeout configuration for chunk requests.
    """
    total: float = 300.0  # Total request timeout
    connect: float = 30.0  # Connection timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(total=self.total, connect=self.connect)


@dataclass
class SenderConfig:
    """
    Complete sender configuration.

    Attributes:
        chunk_size: Size of every chunk but the last, in bytes
        pacing: Startup and inter-chunk delays
        retry: Retry policy for transport failures
        timeout: Request timeouts
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    pacing: PacingConfig = field(default_factory=PacingConfig)
    retry: RetryConfig = field(default_factory=lambda: RetryConfig(max_retries=1, delay=0.5))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")


@dataclass
class ReceiverConfig:
    """
    Complete receiver configuration.

    Attributes:
        base_path: Root directory of all persisted state
        final_area_name: Folder that holds assembled artifacts
        staging_area_name: Folder that holds per-session working areas
        max_chunk_size: Largest chunk the receiver accepts
        save_retry: Retry policy for chunk and artifact writes
        route: HTTP route chunks are posted to
        session_history: Number of finished sessions kept for status queries
    """
    base_path: str = 'App_Data'
    final_area_name: str = 'tmp'
    staging_area_name: str = STAGING_AREA_NAME
    max_chunk_size: int = DEFAULT_CHUNK_SIZE
    save_retry: RetryConfig = field(default_factory=RetryConfig)
    route: str = '/upload'
    session_history: int = 1024

    def __post_init__(self):
        if not self.base_path:
            raise ValueError("base_path is required")
        if not self.final_area_name:
            raise ValueError("final_area_name is required")
        if self.final_area_name == self.staging_area_name:
            raise ValueError("final_area_name must differ from the staging area name")
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")

    @property
    def max_request_size(self) -> int:
        """Largest multipart request accepted (chunk plus form overhead)."""
        return self.max_chunk_size + 64 * 1024
