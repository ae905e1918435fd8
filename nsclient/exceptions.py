"""Exceptions defined and used by this package."""

import typing as t

import requests


class APIError(Exception):
    """Error interacting with NationStates API."""


class ClientError(APIError):
    """Error raised by the request gate while sending a request."""


class RateLimitedError(ClientError):
    """The gate refused to send because a server declared cool-down is in effect.

    `deadline` is the epoch timestamp before which no request may be sent.
    Waiting until then and retrying is always safe.
    """

    def __init__(self, deadline: float) -> None:
        super().__init__(f"Rate limited until {deadline:.3f}")
        self.deadline = deadline

    def retry_after(self, now: float) -> float:
        """Seconds left until the deadline, relative to `now`."""
        return max(0.0, self.deadline - now)


class TransportError(ClientError):
    """The underlying HTTP call failed; the original error is the __cause__."""


class HeaderError(ClientError):
    """A response was received but violated the rate-limit header contract.

    The response body may be unreliable.
    `response` is attached by the gate when a response exists.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.response: t.Optional[requests.Response] = None


class MissingHeaderError(HeaderError):
    """A required rate-limit header is absent."""

    def __init__(self, header: str) -> None:
        super().__init__(f"Could not find {header} in headers")
        self.header = header


class NotAnIntegerError(HeaderError):
    """A rate-limit header value is not a small non-negative integer."""

    def __init__(self, header: str, value: str) -> None:
        super().__init__(f"Could not parse {header} as integer, got '{value}'")
        self.header = header
        self.value = value


class ResourceError(APIError, ValueError):
    """Error with retrieving a resource from NS API."""


class XMLError(APIError, ValueError):
    """Malformed or unexpected XML returned by NS API."""


class ShardError(APIError, ValueError):
    """Invalid shard or shard parameters."""
