"""Errors raised by the request engine"""


class RequestError(Exception):
    """Base error for a test request that could not produce a result"""


class NetworkFailure(RequestError):
    """Raised when the HTTP exchange fails at the transport level

    Covers refused connections, DNS failures, timeouts and malformed
    responses. The originating httpx exception is chained as ``__cause__``.
    """

    def __init__(self, description: str, method: str, url: str, reason: str):
        self.description = description
        self.method = method
        self.url = url
        super().__init__(f"{description}: {method} {url} failed: {reason}")


class ParseFailure(RequestError):
    """Raised when a response declares JSON but its body does not parse"""

    def __init__(self, description: str, content_type: str, body: str):
        self.description = description
        self.content_type = content_type
        self.body = body
        super().__init__(f"{description}: response declared {content_type} but body is not valid JSON")
