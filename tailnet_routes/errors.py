"""Exception hierarchy for the control-plane API client.

Every error raised by a client operation derives from ``TailscaleError``.
Operations re-raise errors through ``with_operation`` so that callers see
which call failed while the original error stays reachable via
``__cause__``::

    try:
        client.routes(device_id)
    except APIError as e:
        e.operation   # "tailscale.Routes"
        e.status      # 404
        e.__cause__   # the unwrapped APIError
"""

from typing import Optional


class TailscaleError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message
        self.operation: Optional[str] = None

    def with_operation(self, operation: str) -> "TailscaleError":
        """Return a copy of this error tagged with the failing operation."""
        wrapped = self.__class__.__new__(self.__class__)
        wrapped.__dict__.update(self.__dict__)
        wrapped.args = self.args
        wrapped.operation = operation
        return wrapped

    def _describe(self) -> str:
        return self.message

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self._describe()}"
        return self._describe()


class RequestConstructionError(TailscaleError):
    """The request could not be built (bad base URL or parameters)."""


class TransportError(TailscaleError):
    """The HTTP exchange itself failed: connection error or timeout."""

    def __init__(self, message: str = "", timed_out: bool = False):
        super().__init__(message)
        self.timed_out = timed_out


class APIError(TailscaleError):
    """The server answered with a non-200 status."""

    def __init__(self, message: str = "", status: int = 0, body: bytes = b""):
        super().__init__(message)
        self.status = status
        self.body = body

    def _describe(self) -> str:
        return f"Status: {self.status}, Message: {self.message!r}"


class MalformedResponse(TailscaleError):
    """A 200 response body did not decode into the expected shape."""

    def __init__(self, message: str = "", body: bytes = b""):
        super().__init__(message)
        self.body = body
