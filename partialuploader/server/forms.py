"""
Multipart form parsing for chunk requests.
"""
import asyncio
from typing import Optional

from aiohttp import web
from multidict import MultiDictProxy

from ..core.exceptions import ValidationError
from ..core.receiver import ChunkUpload
from ..core.storage import parse_chunk_ordinal

SESSION_ID_FIELDS = ('sessionId', 'fileGuid')


def _first_file(form: MultiDictProxy) -> Optional[web.FileField]:
    field = form.get('file')
    if isinstance(field, web.FileField):
        return field
    for value in form.values():
        if isinstance(value, web.FileField):
            return value
    return None


def _text(form: MultiDictProxy, name: str) -> str:
    value = form.get(name)
    if value is None or isinstance(value, web.FileField):
        raise ValidationError(f"{name} is required")
    return str(value).strip()


def _integer(form: MultiDictProxy, name: str) -> int:
    value = _text(form, name)
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {value!r}")


def _flag(form: MultiDictProxy, name: str) -> bool:
    value = _text(form, name).lower()
    if value not in ('true', 'false'):
        raise ValidationError(f"{name} must be 'true' or 'false', got {value!r}")
    return value == 'true'


def session_id_of(form: MultiDictProxy) -> Optional[str]:
    for name in SESSION_ID_FIELDS:
        value = form.get(name)
        if value and not isinstance(value, web.FileField):
            return str(value).strip()
    return None


async def parse_chunk_form(form: MultiDictProxy) -> ChunkUpload:
    """
    Build a ChunkUpload from a posted multipart form.

    The ordinal is taken from the binary part's file name,
    which must read '{filename}_chunk_{ordinal}'. The part is read in
    the default executor so other requests keep being served.

    Raises:
        ValidationError: If a field is missing or malformed
    """
    file_field = _first_file(form)
    if file_field is None:
        raise ValidationError("file is required")

    session_id = session_id_of(form)
    if not session_id:
        raise ValidationError("sessionId is required")
    file_name = _text(form, 'filename')
    if not file_name:
        raise ValidationError("filename is required")

    ordinal = parse_chunk_ordinal(file_field.filename, file_name)
    if ordinal is None:
        raise ValidationError(
            f"file part name {file_field.filename!r} does not match '{file_name}_chunk_<n>'"
        )

    total_chunks = _integer(form, 'totalChunks')
    total_size = _integer(form, 'totalSize')
    is_last = _flag(form, 'isDone')
    payload = await asyncio.get_running_loop().run_in_executor(None, file_field.file.read)

    return ChunkUpload(
        session_id=session_id,
        ordinal=ordinal,
        total_chunks=total_chunks,
        total_size=total_size,
        file_name=file_name,
        payload=payload,
        is_last=is_last
    )
