"""
partialuploader - Chunked, resumable file transfer over HTTP.

Usage:
    >>> from partialuploader import ChunkSender
    >>>
    >>> async with ChunkSender() as sender:
    ...     result = await sender.send("http://localhost:8080/upload", "video.mp4")
    ...     print(result.id, result.success)

Receiving side:
    >>> from partialuploader import ReceiverConfig
    >>> from partialuploader.server import create_app
    >>> app = create_app(ReceiverConfig(base_path="App_Data"))
"""
import logging

# Configuration
from .core.config import (
    ReceiverConfig,
    SenderConfig,
    RetryConfig,
    PacingConfig,
    TimeoutConfig,
    DEFAULT_CHUNK_SIZE
)

# Errors
from .core.exceptions import (
    FailureKind,
    PartialUploadError,
    ValidationError,
    TransientStorageError,
    IntegrityError,
    TransportError,
    RejectionError,
    SessionStateError
)

# Storage
from .core.storage import (
    StorageGateway,
    LocalStorageGateway,
    MemoryStorageGateway,
    StorageLayout
)

# Sessions
from .core.session import SessionState, UploadSession, SessionRegistry

# Receiving and sending
from .core.receiver import ChunkReceiver, ChunkAssembler, ChunkUpload, ChunkReceipt, AssemblyResult
from .core.sender import ChunkSender, SendResult, SendProgress, AiohttpChunkTransport

__version__ = '1.0.0'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO):
    """
    Configure logging for partialuploader modules.

    Sets the level of every package logger and, when the application
    has not configured logging yet, installs a console handler.

    Args:
        level: Logging level (default: logging.INFO)
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    loggers = [
        'partialuploader',
        'partialuploader.sender',
        'partialuploader.sender.file',
        'partialuploader.sender.transport',
        'partialuploader.receiver',
        'partialuploader.receiver.sessions',
        'partialuploader.assembler',
        'partialuploader.storage',
        'partialuploader.server',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Ensure propagation is enabled
        logger.propagate = True


__all__ = [
    'ReceiverConfig',
    'SenderConfig',
    'RetryConfig',
    'PacingConfig',
    'TimeoutConfig',
    'DEFAULT_CHUNK_SIZE',
    'FailureKind',
    'PartialUploadError',
    'ValidationError',
    'TransientStorageError',
    'IntegrityError',
    'TransportError',
    'RejectionError',
    'SessionStateError',
    'StorageGateway',
    'LocalStorageGateway',
    'MemoryStorageGateway',
    'StorageLayout',
    'SessionState',
    'UploadSession',
    'SessionRegistry',
    'ChunkReceiver',
    'ChunkAssembler',
    'ChunkUpload',
    'ChunkReceipt',
    'AssemblyResult',
    'ChunkSender',
    'SendResult',
    'SendProgress',
    'AiohttpChunkTransport',
    'setup_logging',
]
