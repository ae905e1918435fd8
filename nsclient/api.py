"""Typed, asynchronous access to the NS API.

Every request goes through the RequestGate given to the NSClient,
so any number of API objects can be used concurrently.
"""

from __future__ import annotations

import itertools
import logging
import typing as t
from typing import Dict, Iterable, Optional, Sequence

import xml.etree.ElementTree as etree
import requests

from nsclient.core import Name
from nsclient.exceptions import APIError, RateLimitedError, ResourceError
from nsclient.gate import RequestGate
from nsclient.models import (
    Event,
    NationRecord,
    RegionRecord,
    Resolution,
    WARecord,
    WorldRecord,
)
from nsclient.parser import as_xml
from nsclient.shards import (
    NationRequest,
    NationShard,
    RegionRequest,
    RegionShard,
    Request,
    ShardLike,
    WACouncil,
    WARequest,
    WAShard,
    WorldRequest,
    WorldShard,
    as_shard,
    happenings,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Maximum number of happenings returned by the happenings shard in one response
HAPPENINGS_RESPONSE_LIMIT = 100


class NSClient:
    """Class to manage making requests from the NS API"""

    def __init__(self, gate: RequestGate, *, patient: bool = False) -> None:
        """Wraps the gate every request will be sent through.

        If patient, each request first waits out any cool-down the gate
        knows about, instead of failing with RateLimitedError.
        A request that still fails is never retried.
        """
        self.gate = gate
        self.patient = patient

    async def request(self, request: Request) -> requests.Response:
        """Sends the request and returns the successful response.

        Raises ResourceError if the nation or region does not exist,
        RateLimitedError if the server throttled the request,
        and APIError for any other error status.
        """
        if self.patient:
            await self.gate.wait()
        response = await self.gate.send(request)
        # The gate has already recorded the Retry-After of a throttled response
        if response.status_code == 429:
            deadline = self.gate.send_not_before()
            raise RateLimitedError(deadline if deadline is not None else self.gate.clock())
        if response.status_code == 404:
            raise ResourceError(f"{request!r} does not exist.")
        # response.ok is true iff status_code < 400
        if not response.ok:
            raise APIError(
                f"Error with retrieving {request!r}: HTTP {response.status_code}"
            )
        return response

    async def xml(self, request: Request) -> etree.Element:
        """Sends the request and returns the root of the XML response."""
        response = await self.request(request)
        return as_xml(response.content)

    def nation(self, nation: str) -> Nation:
        """Returns a Nation object using this client"""
        return Nation(self, nation)

    def region(self, region: str) -> Region:
        """Returns a Region object using this client"""
        return Region(self, region)

    def world(self) -> World:
        """Returns a World object using this client"""
        return World(self)

    def wa(self, council: WACouncil = WACouncil.GENERAL_ASSEMBLY) -> WA:
        """Returns a WA object using this client"""
        return WA(self, council)


class API:
    """Represents a live connection to one of the APIs of NS."""

    def __init__(self, client: NSClient) -> None:
        self.client = client

    def build(self, *shards: ShardLike) -> Request:
        """Returns the request for the given shards."""
        raise NotImplementedError

    async def shards_response(self, *shards: ShardLike) -> requests.Response:
        """Returns the response to a request for the given shards."""
        return await self.client.request(self.build(*shards))

    async def shards_xml(self, *shards: ShardLike) -> Dict[str, etree.Element]:
        """Returns a mapping from lowercase tag to the XML node returned for each shard."""
        root = await self.client.xml(self.build(*shards))
        return {node.tag.lower(): node for node in root}

    async def shards(self, *shards: ShardLike) -> Dict[str, str]:
        """Naively returns a mapping from lowercase tag to the text of that node.

        Shards that are not one level deep will only give the empty string,
        with no warning.
        """
        return {
            name: node.text if node.text else ""
            for name, node in (await self.shards_xml(*shards)).items()
        }

    async def shard(self, shard: ShardLike) -> str:
        """Naively returns the text of the node returned for a single shard.

        Some shards come back under another tag (e.g. wa as UNSTATUS),
        so a lone node is returned whatever its tag.
        """
        values = await self.shards(shard)
        name = as_shard(shard).name.lower()
        if name in values:
            return values[name]
        if len(values) == 1:
            return next(iter(values.values()))
        raise APIError(f"Response did not contain the {name} shard")


class Nation(API):
    """Represents a live connection to the API of a Nation on NS"""

    def __init__(self, client: NSClient, name: str) -> None:
        super().__init__(client)
        self.name = name

    def build(self, *shards: ShardLike) -> NationRequest:
        return NationRequest(self.name, *shards)

    async def record(self, *shards: ShardLike) -> NationRecord:
        """Returns the typed data of the given shards, or the standard data if none."""
        return NationRecord.from_xml(await self.client.xml(self.build(*shards)))

    async def wa(self) -> str:
        """Returns the WA status of this Nation"""
        return await self.shard(NationShard.WA)

    async def endorsements(self) -> Sequence[Name]:
        """Returns the nations endorsing this Nation."""
        record = await self.record(NationShard.ENDORSEMENTS)
        return record.endorsements or []


class Region(API):
    """Represents a live connection to the API of a Region on NS"""

    def __init__(self, client: NSClient, name: str) -> None:
        super().__init__(client)
        self.name = name

    def build(self, *shards: ShardLike) -> RegionRequest:
        return RegionRequest(self.name, *shards)

    async def record(self, *shards: ShardLike) -> RegionRecord:
        """Returns the typed data of the given shards, or the standard data if none."""
        return RegionRecord.from_xml(await self.client.xml(self.build(*shards)))

    async def nations(self) -> Sequence[Name]:
        """Returns the member nations of this region."""
        record = await self.record(RegionShard.NATIONS)
        return record.nations or []

    async def wa_nations(self) -> Sequence[Name]:
        """Returns the World Assembly members of this region."""
        record = await self.record(RegionShard.WA_NATIONS)
        return record.WANations or []


class World(API):
    """Represents a live connection to the API of the World on NS"""

    def build(self, *shards: ShardLike) -> WorldRequest:
        return WorldRequest(*shards)

    async def record(self, *shards: ShardLike) -> WorldRecord:
        """Returns the typed data of the given shards."""
        return WorldRecord.from_xml(await self.client.xml(self.build(*shards)))

    async def happenings(
        self, safe: bool = True, **parameters: t.Any
    ) -> Iterable[Event]:
        """Queries the happenings shard, passing any parameters to shards.happenings.

        If `safe` is true, at most one response (100 happenings) is retrieved.
        If `safe` is false, it keeps requesting older happenings until a response
        has fewer than 100, which can take a very large number of requests
        with poorly bounded parameters.
        """
        page = await self._happenings_page(**parameters)
        pages = [page]
        while not safe and len(page) == HAPPENINGS_RESPONSE_LIMIT:
            oldest = page[-1].id
            if oldest is None:
                break
            page = await self._happenings_page(**{**parameters, "beforeid": oldest})
            pages.append(page)
        return list(itertools.chain.from_iterable(pages))

    async def _happenings_page(self, **parameters: t.Any) -> Sequence[Event]:
        record = await self.record(happenings(**parameters))
        return record.happenings or []

    async def nations(self) -> Sequence[Name]:
        """Returns every nation in the world."""
        record = await self.record(WorldShard.NATIONS)
        return record.nations or []


class WA(API):
    """Represents a live connection to the API of a WA Council on NS
    Defaults to General Assembly
    """

    def __init__(
        self, client: NSClient, council: WACouncil = WACouncil.GENERAL_ASSEMBLY
    ) -> None:
        super().__init__(client)
        self.council = WACouncil(council)

    def build(self, *shards: ShardLike) -> WARequest:
        return WARequest(self.council, *shards)

    async def record(self, *shards: ShardLike) -> WARecord:
        """Returns the typed data of the given shards."""
        return WARecord.from_xml(await self.client.xml(self.build(*shards)))

    async def members(self) -> Sequence[Name]:
        """Returns every member of the World Assembly."""
        record = await self.record(WAShard.MEMBERS)
        return record.members or []

    async def delegates(self) -> Sequence[Name]:
        """Returns every World Assembly delegate."""
        record = await self.record(WAShard.DELEGATES)
        return record.delegates or []

    async def at_vote(self) -> Optional[Resolution]:
        """Returns the resolution at vote in this council, if any."""
        record = await self.record(WAShard.RESOLUTION)
        return record.resolution
