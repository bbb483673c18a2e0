"""
Receiver module.

Persists incoming chunks and assembles completed sessions.
"""
from .receiver import ChunkReceiver
from .assembler import ChunkAssembler
from .models import ChunkUpload, ChunkReceipt, AssemblyResult

__all__ = [
    'ChunkReceiver',
    'ChunkAssembler',
    'ChunkUpload',
    'ChunkReceipt',
    'AssemblyResult',
]
