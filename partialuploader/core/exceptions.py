"""
Custom exceptions for chunked upload operations.

This module defines the error taxonomy shared by the sender and receiver.
"""
from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """Label attached to failed send results and receipts."""
    VALIDATION = "validation"
    STORAGE = "storage"
    INTEGRITY = "integrity"
    TRANSPORT = "transport"
    REJECTED = "rejected"


class PartialUploadError(Exception):
    """Base exception for all chunked upload errors."""

    kind: FailureKind = FailureKind.VALIDATION

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            status: HTTP status code associated with the error (if any)
        """
        self.status = status
        super().__init__(message)


class ValidationError(PartialUploadError):
    """Exception raised when required chunk metadata is missing or malformed."""
    kind = FailureKind.VALIDATION


class TransientStorageError(PartialUploadError):
    """Exception raised when a storage write, read or delete fails."""
    kind = FailureKind.STORAGE


class IntegrityError(PartialUploadError):
    """Exception raised when a chunk is absent at assembly time."""

    kind = FailureKind.INTEGRITY

    def __init__(
        self,
        message: str,
        ordinal: Optional[int] = None,
        status: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            ordinal: Ordinal of the missing chunk
            status: HTTP status code (if any)
        """
        self.ordinal = ordinal
        super().__init__(message, status)


class TransportError(PartialUploadError):
    """Exception raised for client-side network failures."""
    kind = FailureKind.TRANSPORT


class RejectionError(PartialUploadError):
    """Exception raised when the receiver explicitly refuses a chunk."""
    kind = FailureKind.REJECTED


class SessionStateError(PartialUploadError):
    """Exception raised for an illegal upload session state transition."""
    pass


EXCEPTIONS_BY_KIND = {
    FailureKind.VALIDATION: ValidationError,
    FailureKind.STORAGE: TransientStorageError,
    FailureKind.INTEGRITY: IntegrityError,
    FailureKind.TRANSPORT: TransportError,
    FailureKind.REJECTED: RejectionError,
}
