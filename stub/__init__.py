"""
Local stub of the game backend for trying the harness without a real server.
"""
from .app import create_app
from .server import StubServer

__all__ = [
    'StubServer',
    'create_app',
]
