"""
Session management module.

Provides the upload session entity and the registry that tracks it.
"""
from .models import SessionState, UploadSession
from .registry import SessionRegistry

__all__ = [
    'SessionState',
    'UploadSession',
    'SessionRegistry',
]
