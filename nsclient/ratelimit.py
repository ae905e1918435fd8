"""Parsing of the rate-limit headers NationStates attaches to every response.

NS follows the IETF draft naming for rate-limit headers
(https://datatracker.ietf.org/doc/draft-ietf-httpapi-ratelimit-headers/):
RateLimit-Remaining and RateLimit-Reset are always present,
Retry-After only when the client is being throttled.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as t

from requests.structures import CaseInsensitiveDict

from nsclient.exceptions import MissingHeaderError, NotAnIntegerError

# Header values are encoded by the server as an unsigned byte
MAX_HEADER_VALUE = 255


class RateLimitHeader(str, enum.Enum):
    """The rate-limit headers read from each response."""

    REMAINING = "RateLimit-Remaining"
    RESET = "RateLimit-Reset"
    RETRY_AFTER = "Retry-After"


def header_integer(header: RateLimitHeader, value: str) -> int:
    """Parses a header value as a small ASCII decimal integer.

    Raises NotAnIntegerError if the value is not all digits or is out of range.
    """
    if not (value.isascii() and value.isdigit()):
        raise NotAnIntegerError(header.value, value)
    number = int(value)
    if number > MAX_HEADER_VALUE:
        raise NotAnIntegerError(header.value, value)
    return number


@dataclasses.dataclass(frozen=True)
class RateLimitSnapshot:
    """Immutable copy of one response's rate-limit headers.

    remaining: requests still permitted in the current window.
    resetSeconds: seconds until the current window resets.
    retryAfterSeconds: seconds the server demands before the next request,
    only present on throttled responses.
    """

    remaining: int
    resetSeconds: int
    retryAfterSeconds: t.Optional[int] = None

    @classmethod
    def from_headers(cls, headers: t.Mapping[str, str]) -> RateLimitSnapshot:
        """Constructs a snapshot from a response header mapping.

        Lookup is case insensitive.
        Raises MissingHeaderError if RateLimit-Remaining or RateLimit-Reset
        is absent, and NotAnIntegerError if any present header is malformed.
        """
        lookup = CaseInsensitiveDict(headers)

        def required(header: RateLimitHeader) -> int:
            if header.value not in lookup:
                raise MissingHeaderError(header.value)
            return header_integer(header, lookup[header.value])

        remaining = required(RateLimitHeader.REMAINING)
        reset = required(RateLimitHeader.RESET)
        retryAfter = (
            header_integer(
                RateLimitHeader.RETRY_AFTER, lookup[RateLimitHeader.RETRY_AFTER.value]
            )
            if RateLimitHeader.RETRY_AFTER.value in lookup
            else None
        )
        return cls(remaining=remaining, resetSeconds=reset, retryAfterSeconds=retryAfter)

    def wait(self) -> t.Optional[int]:
        """Seconds to hold off sending after this response, if any.

        An exhausted window waits for the reset, even if Retry-After is present.
        Otherwise Retry-After is honoured when given.
        """
        if self.remaining == 0:
            return self.resetSeconds
        return self.retryAfterSeconds

    def wait_fraction(self) -> t.Optional[float]:
        """Rough duty cycle hint, remaining / resetSeconds.

        Advisory only; not a duration. None if the window has no length.
        """
        if self.resetSeconds == 0:
            return None
        return self.remaining / self.resetSeconds


def parse(headers: t.Mapping[str, str]) -> RateLimitSnapshot:
    """Parses response headers into a RateLimitSnapshot.

    See RateLimitSnapshot.from_headers.
    """
    return RateLimitSnapshot.from_headers(headers)
