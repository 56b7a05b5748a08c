"""
StubServer class for running the stub backend under uvicorn.
"""
import logging

import uvicorn

from settings import LOG_LEVEL, STUB_BIND_ADDRESS, STUB_CLIENT_ID, STUB_CLIENT_SECRET, STUB_PORT
from .app import create_app

logger = logging.getLogger(__name__)


class StubServer:
    """Stub backend wrapper for CLI control"""

    def __init__(
        self,
        bind_address: str = None,
        port: int = None,
        client_id: str = None,
        client_secret: str = None
    ):
        self.server = None
        self.bind_address = bind_address or STUB_BIND_ADDRESS
        self.port = port or STUB_PORT
        self.client_id = client_id or STUB_CLIENT_ID
        self.client_secret = client_secret or STUB_CLIENT_SECRET
        self.app = create_app(self.client_id, self.client_secret)

    def run(self):
        """Run the stub backend (blocking)"""
        logger.info(f"Starting backend stub on http://{self.bind_address}:{self.port}")
        logger.info(f"Accepting client id: {self.client_id}")
        config = uvicorn.Config(
            self.app,
            host=self.bind_address,
            port=self.port,
            log_level=LOG_LEVEL,
            access_log=False  # Requests are logged by the app middleware
        )
        self.server = uvicorn.Server(config)
        self.server.run()

    def stop(self):
        """Stop the stub backend"""
        if self.server:
            self.server.should_exit = True
