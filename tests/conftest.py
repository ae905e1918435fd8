"""Shared fakes for the HTTP transport and the clock."""

import dataclasses
import threading
import time
import typing as t

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from nsclient.gate import RequestGate

OK_HEADERS = {"RateLimit-Remaining": "40", "RateLimit-Reset": "30"}


def make_response(
    status: int = 200,
    headers: t.Optional[t.Mapping[str, str]] = None,
    body: t.Union[str, bytes] = b"<NATION id=\"testlandia\"></NATION>",
) -> requests.Response:
    """Builds a requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.headers = CaseInsensitiveDict(OK_HEADERS if headers is None else headers)
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    return response


@dataclasses.dataclass()
class Call:
    """One recorded GET."""

    url: str
    headers: t.Mapping[str, str]
    timeout: t.Optional[float]
    start: float
    end: float


class FakeSession:
    """Stands in for requests.Session, replaying queued responses.

    Queued exceptions are raised instead of returned.
    Once the queue is empty, a 200 response with OK_HEADERS is returned.
    """

    def __init__(
        self,
        responses: t.Iterable[t.Union[requests.Response, Exception]] = (),
        delay: float = 0.0,
    ) -> None:
        self.responses = list(responses)
        self.delay = delay
        self.calls: t.List[Call] = []
        self.closed = False
        self._lock = threading.Lock()

    def get(
        self,
        url: str,
        headers: t.Optional[t.Mapping[str, str]] = None,
        timeout: t.Optional[float] = None,
    ) -> requests.Response:
        start = time.monotonic()
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            item = self.responses.pop(0) if self.responses else make_response()
            self.calls.append(Call(url, dict(headers or {}), timeout, start, time.monotonic()))
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def gate(session: FakeSession, clock: FakeClock) -> RequestGate:
    return RequestGate("nsclient tests", session=session, clock=clock)
