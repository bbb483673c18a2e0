"""
Storage layout.

Derives every storage key used by the receiver:

    {staging_area}/{session_id}/{file_name}_chunk_{ordinal}
    {final_area}/{session_id}/{file_name}

Keys are relative to the storage gateway root (the configured base path).
"""
import re
from pathlib import PurePosixPath
from typing import Optional

from ..config import STAGING_AREA_NAME
from ..exceptions import ValidationError

CHUNK_MARKER = '_chunk_'


def chunk_file_name(file_name: str, ordinal: int) -> str:
    """Returns the deterministic name of a chunk file."""
    return f"{file_name}{CHUNK_MARKER}{ordinal}"


def parse_chunk_ordinal(part_name: str, file_name: str) -> Optional[int]:
    """
    Extract the ordinal from a chunk file name.

    Args:
        part_name: Name such as 'report.pdf_chunk_3'
        file_name: Logical file name the chunk belongs to

    Returns:
        The ordinal, or None if part_name is not a chunk of file_name
    """
    match = re.fullmatch(re.escape(file_name) + CHUNK_MARKER + r'(\d+)', part_name or '')
    if not match:
        return None
    return int(match.group(1))


def validate_segment(value: Optional[str], field: str) -> str:
    """
    Ensure value can be used as a single path segment.

    Raises:
        ValidationError: If value is empty or contains path separators
    """
    if not value:
        raise ValidationError(f"{field} is required")
    if value in ('.', '..') or '/' in value or '\\' in value or '\x00' in value:
        raise ValidationError(f"{field} is not a valid name: {value!r}")
    return value


class StorageLayout:
    """Maps sessions and chunks to storage keys."""

    def __init__(self, final_area_name: str, staging_area_name: str = STAGING_AREA_NAME):
        self.final_area_name = validate_segment(final_area_name, 'final_area_name')
        self.staging_area_name = validate_segment(staging_area_name, 'staging_area_name')

    def working_area(self, session_id: str) -> str:
        return str(PurePosixPath(self.staging_area_name, validate_segment(session_id, 'sessionId')))

    def chunk_key(self, session_id: str, file_name: str, ordinal: int) -> str:
        name = chunk_file_name(validate_segment(file_name, 'filename'), ordinal)
        return str(PurePosixPath(self.working_area(session_id), name))

    def artifact_dir(self, session_id: str) -> str:
        """Working area with the staging segment swapped for the final area."""
        parts = list(PurePosixPath(self.working_area(session_id)).parts)
        parts[parts.index(self.staging_area_name)] = self.final_area_name
        return str(PurePosixPath(*parts))

    def artifact_key(self, session_id: str, file_name: str) -> str:
        return str(PurePosixPath(self.artifact_dir(session_id), validate_segment(file_name, 'filename')))
