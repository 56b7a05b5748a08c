import asyncio
import logging

import httpx
import pytest

from backend import set_backend
from stub import create_app

BASE_URL = "https://backend.test"
CLIENT_ID = "fortnite-client-simulator"
CLIENT_SECRET = "secret123"


class GatedTransport(httpx.AsyncBaseTransport):
    """Holds every request until ``release`` is set, counting exchanges"""

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.release = asyncio.Event()
        self.calls = 0

    async def handle_async_request(self, request):
        self.calls += 1
        await self.release.wait()
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture
def stub_transport():
    return httpx.ASGITransport(app=create_app(CLIENT_ID, CLIENT_SECRET))


@pytest.fixture
def active_backend():
    """Registers a backend for suite modules and clears it afterwards"""
    def register(backend):
        set_backend(backend)
        return backend

    yield register
    set_backend(None)


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
async def trickle_server():
    """Local HTTP server that sends a 10-byte body one byte every 0.3s

    Yields the server base URL. Every individual read completes well within a
    second, so only an overall deadline can cut the exchange short.
    """
    handlers = set()

    async def handle(reader, writer):
        handlers.add(asyncio.current_task())
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(
                b"HTTP/1.1 200 OK\r\n"
                b"Content-Type: application/json\r\n"
                b"Content-Length: 10\r\n\r\n"
            )
            await writer.drain()
            for byte in b'"xxxxxxxx"':
                await asyncio.sleep(0.3)
                writer.write(bytes([byte]))
                await writer.drain()
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    host, port = server.sockets[0].getsockname()[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        for task in handlers:
            task.cancel()
        server.close()
        await server.wait_closed()
