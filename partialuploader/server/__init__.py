"""HTTP receiver endpoint."""
from .app import create_app, run_server, RECEIVER_KEY

__all__ = [
    'create_app',
    'run_server',
    'RECEIVER_KEY',
]
