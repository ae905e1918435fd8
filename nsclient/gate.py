"""The request gate, the single path by which requests reach the NS API.

NS measures its rate limit per user agent, not per connection,
so every request made by a process has to go through one RequestGate.
Construct it once and hand it to everything that talks to the API.

The gate sends one request at a time, records the rate-limit headers
of every response, and refuses to send while a server declared
cool-down is in effect. It never retries; RateLimitedError carries
the deadline a caller should wait for.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import threading
import time
import typing as t

import requests

from nsclient.exceptions import HeaderError, RateLimitedError, TransportError
from nsclient.ratelimit import RateLimitSnapshot

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class Requestable(t.Protocol):
    """Anything that can produce a complete request URL."""

    def url(self) -> str:
        ...


Target = t.Union[str, Requestable]


def resolve_url(target: Target) -> str:
    """Returns the URL of a request descriptor, or the string itself."""
    if isinstance(target, str):
        return target
    return target.url()


@dataclasses.dataclass(frozen=True)
class GateState:
    """Server reported state as of the latest completed request.

    sendNotBefore is always derived from the lastSnapshot and lastSentAt
    pair it is stored with.
    """

    lastSnapshot: t.Optional[RateLimitSnapshot] = None
    lastSentAt: t.Optional[float] = None
    sendNotBefore: t.Optional[float] = None

    @classmethod
    def after(cls, snapshot: RateLimitSnapshot, sentAt: float) -> GateState:
        """The state following a response with the given snapshot."""
        wait = snapshot.wait()
        return cls(
            lastSnapshot=snapshot,
            lastSentAt=sentAt,
            sendNotBefore=None if wait is None else sentAt + wait,
        )

    def cooling(self, now: float) -> bool:
        """Whether a cool-down is in effect at the given time."""
        return self.sendNotBefore is not None and now < self.sendNotBefore


class RequestGate:
    """Rate-limit aware chokepoint for requests to the NS API.

    Two locks are involved and never held together:
    the transmission lock is held only for the physical GET and its timestamp,
    the state lock only while replacing the recorded GateState.
    Both are thread locks, so coroutine and thread callers can share a gate.
    """

    def __init__(
        self,
        userAgent: str,
        *,
        session: t.Optional[requests.Session] = None,
        clock: t.Callable[[], float] = time.time,
        timeout: t.Optional[float] = None,
    ) -> None:
        """Constructs a gate that identifies itself with the given user agent.

        session can be provided to customize the transport,
        clock must return epoch seconds,
        and timeout is passed on to each GET (None leaves it to the transport).
        """
        if not userAgent:
            raise ValueError("A user agent is required by the NS API rules")

        self.headers = {"User-Agent": userAgent}
        self.session = session if session is not None else requests.Session()
        self.clock = clock
        self.timeout = timeout

        self._state = GateState()
        self._stateLock = threading.Lock()
        self._transmissionLock = threading.Lock()

    def __enter__(self) -> RequestGate:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Closes the underlying session."""
        self.session.close()

    # Sending

    async def send(self, target: Target) -> requests.Response:
        """Sends a GET request for the target through the gate.

        Raises RateLimitedError without sending if a cool-down is in effect,
        TransportError if the request fails, and HeaderError if the response
        lacks valid rate-limit headers (the response is attached to the error).
        Any received response is returned, whatever its status code.
        """
        url = resolve_url(target)
        self._check()
        abandoned = threading.Event()
        # An exchange already sending finishes its bookkeeping in the worker
        # thread if this task is cancelled; one still queued is never sent
        try:
            response = await asyncio.to_thread(self._exchange, url, abandoned)
        except asyncio.CancelledError:
            abandoned.set()
            raise
        # Only abandoned exchanges give None
        return t.cast(requests.Response, response)

    def send_blocking(self, target: Target) -> requests.Response:
        """Synchronous version of send, for threaded callers."""
        url = resolve_url(target)
        self._check()
        return t.cast(requests.Response, self._exchange(url))

    def _check(self) -> None:
        """Raises RateLimitedError if the current time is before the deadline."""
        state = self._state
        if state.cooling(self.clock()):
            # Checked by cooling
            deadline = t.cast(float, state.sendNotBefore)
            logger.warning("Refusing to send, rate limited until %s", deadline)
            raise RateLimitedError(deadline)

    def _exchange(
        self, url: str, abandoned: t.Optional[threading.Event] = None
    ) -> t.Optional[requests.Response]:
        """Transmits the request and records the response's rate limits.

        Returns None without sending if the caller abandoned the request
        while it waited for the transmission lock.
        """
        try:
            with self._transmissionLock:
                if abandoned is not None and abandoned.is_set():
                    logger.debug("Dropping abandoned request %s", url)
                    return None
                logger.info("Requesting %s", url)
                response = self.session.get(
                    url, headers=self.headers, timeout=self.timeout
                )
                sentAt = self.clock()
        except requests.RequestException as error:
            raise TransportError(f"Request to <{url}> failed: {error}") from error

        try:
            snapshot = RateLimitSnapshot.from_headers(response.headers)
        except HeaderError as error:
            error.response = response
            raise

        self._record(snapshot, sentAt)
        return response

    def _record(self, snapshot: RateLimitSnapshot, sentAt: float) -> None:
        """Replaces the gate state with one derived from the snapshot.

        sentAt is read under the transmission lock, so it follows send order.
        A snapshot from an earlier send than the recorded one is ignored.
        """
        with self._stateLock:
            previous = self._state.lastSentAt
            if previous is not None and sentAt < previous:
                logger.debug("Ignoring %s, older than the recorded state", snapshot)
                return
            self._state = GateState.after(snapshot, sentAt)
            state = self._state
        logger.debug(
            "Recorded %s, send not before %s", snapshot, state.sendNotBefore
        )

    # Waiting, for callers that want to honour a deadline

    def ready(self) -> bool:
        """Whether a send attempted now would pass the deadline check."""
        return not self._state.cooling(self.clock())

    def delay(self) -> float:
        """Seconds until the current deadline passes, 0 if none is in effect."""
        deadline = self._state.sendNotBefore
        if deadline is None:
            return 0.0
        return max(0.0, deadline - self.clock())

    async def wait(self) -> None:
        """Sleeps until the current deadline, if any, has passed."""
        delay = self.delay()
        if delay > 0:
            logger.debug("Waiting %ss to avoid ratelimit", delay)
            await asyncio.sleep(delay)

    def wait_blocking(self) -> None:
        """Blocking version of wait."""
        delay = self.delay()
        if delay > 0:
            logger.debug("Waiting %ss to avoid ratelimit", delay)
            time.sleep(delay)

    # Read only queries

    def state(self) -> GateState:
        """The current gate state."""
        return self._state

    def last_snapshot(self) -> t.Optional[RateLimitSnapshot]:
        """Rate limits reported by the latest response, if any."""
        return self._state.lastSnapshot

    def last_sent_at(self) -> t.Optional[float]:
        """Timestamp at which the latest response was recorded, if any."""
        return self._state.lastSentAt

    def send_not_before(self) -> t.Optional[float]:
        """The current deadline, if any. It may already have passed."""
        return self._state.sendNotBefore

    def estimated_wait_fraction(self) -> t.Optional[float]:
        """Advisory remaining / reset ratio of the latest snapshot.

        Not a duration, and not used by the gate itself.
        """
        snapshot = self._state.lastSnapshot
        if snapshot is None:
            return None
        return snapshot.wait_fraction()
