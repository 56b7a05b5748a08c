"""Run the stub backend: python -m stub [--bind HOST] [--port PORT]"""

import argparse

import settings
from utils.logging_setup import configure_logging
from .server import StubServer


def main():
    parser = argparse.ArgumentParser(description="Local stub of the game backend")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")
    parser.add_argument("--client-id", default=None, help="Accepted client id (default: from config)")
    parser.add_argument("--client-secret", default=None, help="Accepted client secret (default: from config)")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    StubServer(
        bind_address=args.bind,
        port=args.port,
        client_id=args.client_id,
        client_secret=args.client_secret,
    ).run()


if __name__ == "__main__":
    main()
