"""Models of object structures returned from the NationStates API.

A response only contains the shards that were requested,
so the fields of the response records are optional.
"""

from __future__ import annotations

import dataclasses
import typing as t
from typing import Callable, Generic, Mapping, Optional, Sequence

import xml.etree.ElementTree as etree

from nsclient.core import Name
from nsclient.parser import NodeParse, content, expect_root

T = t.TypeVar("T")


def name_list(values: Optional[Sequence[str]]) -> Optional[Sequence[Name]]:
    """Wraps each string of an optional list in Name."""
    return None if values is None else [Name(value) for value in values]


@dataclasses.dataclass(frozen=True)
class Event:
    """A happening, as returned by the happenings and history shards.

    Nations and regions mentioned in the text (@@nation@@ and %%region%%)
    can be read from the nations and regions properties.
    """

    id: Optional[int]
    timestamp: int
    text: str

    @property
    def nations(self) -> Sequence[str]:
        """Nations mentioned by this event."""
        return self.text.split("@@")[1::2]

    @property
    def regions(self) -> Sequence[str]:
        """Regions mentioned by this event."""
        return self.text.split("%%")[1::2]

    @classmethod
    def from_xml(cls, node: etree.Element) -> Event:
        """Parses an EVENT node.
        (See https://www.nationstates.net/cgi-bin/api.cgi?q=happenings)
        """
        data = NodeParse(node)
        return cls(
            id=int(node.attrib["id"]) if "id" in node.attrib else None,
            timestamp=int(data.simple("TIMESTAMP")),
            text=data.simple("TEXT"),
        )


@dataclasses.dataclass(frozen=True)
class Census:
    """A World Census scale of a nation, region, or the world.

    Only the requested modes are filled in; history mode gives
    one Census per point, each with a timestamp and score.
    """

    id: int
    score: Optional[float] = None
    rank: Optional[int] = None
    regionalRank: Optional[int] = None
    percentage: Optional[float] = None
    regionalPercentage: Optional[float] = None
    timestamp: Optional[int] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> Census:
        """Creates a Census from an XML SCALE node
        (See https://www.nationstates.net/cgi-bin/api.cgi?nation=testlandia&q=census&mode=score+rank+rrank+prank+prrank&scale=all)
        """  # noqa pylint: disable=line-too-long
        data = NodeParse(node)
        return cls(
            id=int(node.attrib["id"]),
            score=data.optional_float("SCORE"),
            rank=data.optional_int("RANK"),
            regionalRank=data.optional_int("RRANK"),
            percentage=data.optional_float("PRANK"),
            regionalPercentage=data.optional_float("PRRANK"),
            timestamp=data.optional_int("TIMESTAMP"),
        )

    @staticmethod
    def many_from_xml(node: etree.Element) -> Sequence[Census]:
        """Parses a CENSUS node holding SCALE nodes.

        History mode nests POINT nodes in each SCALE,
        which are flattened into one Census per point.
        """
        scales = []
        for scale in node:
            points = [child for child in scale if child.tag == "POINT"]
            if not points:
                scales.append(Census.from_xml(scale))
                continue
            for point in points:
                data = NodeParse(point)
                scales.append(
                    Census(
                        id=int(scale.attrib["id"]),
                        score=data.optional_float("SCORE"),
                        timestamp=data.optional_int("TIMESTAMP"),
                    )
                )
        return scales


@dataclasses.dataclass(frozen=True)
class Freedoms(Generic[T]):
    """Dataclass that contains info on freedoms"""

    civilRights: T
    economy: T
    politicalFreedom: T

    @classmethod
    def from_xml(
        cls, node: etree.Element, converter: Callable[[str], T]
    ) -> Freedoms[T]:
        """Constructs a Freedoms object using the given node.
        Casts the content of each subnode using the converter.
        """
        data = NodeParse(node)
        return cls(
            civilRights=converter(data.simple("CIVILRIGHTS")),
            economy=converter(data.simple("ECONOMY")),
            politicalFreedom=converter(data.simple("POLITICALFREEDOM")),
        )


@dataclasses.dataclass(frozen=True)
class DeathCause:
    """Dataclass of the type of death and percentage"""

    cause: str
    percentage: float

    @classmethod
    def from_xml(cls, node: etree.Element) -> DeathCause:
        """Constructs a DeathCause from a CAUSE node, as contained in the deaths shard
        (https://www.nationstates.net/cgi-bin/api.cgi?nation=testlandia&q=deaths).
        """
        return cls(cause=node.attrib["type"], percentage=float(content(node)))


@dataclasses.dataclass(frozen=True)
class Dispatch:
    """Summary of a dispatch, from the dispatchlist and factbooklist shards."""

    id: int
    title: str
    author: str
    category: str
    subcategory: str
    created: int
    edited: Optional[int]
    views: int
    score: int
    text: Optional[str] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> Dispatch:
        """Parses a DISPATCH or FACTBOOK node.

        text is only present when requesting a single dispatch.
        """
        data = NodeParse(node)
        edited = data.optional_int("EDITED")
        return cls(
            id=int(node.attrib["id"]),
            title=data.simple("TITLE"),
            author=data.simple("AUTHOR"),
            category=data.simple("CATEGORY"),
            subcategory=data.simple("SUBCATEGORY"),
            created=int(data.simple("CREATED")),
            # NS reports 0 for dispatches that were never edited
            edited=edited if edited else None,
            views=int(data.simple("VIEWS")),
            score=int(data.simple("SCORE")),
            text=data.optional("TEXT"),
        )


@dataclasses.dataclass(frozen=True)
class Officer:
    """Class that represents a Officer for a region,
    and the related available data.
    """

    nation: str  # Name of officer
    office: str  # Name of office
    authority: str  # Authority permissions (each letter is a perm)
    time: int  # Timestamp they were appointed at
    by: str  # Who appointed the officer
    order: int  # Position in officer list on NS

    @classmethod
    def from_xml(cls, node: etree.Element) -> Officer:
        """Parses an OFFICER node, as contained by the OFFICERS shard."""
        data = NodeParse(node)
        return cls(
            nation=data.simple("NATION"),
            office=data.simple("OFFICE"),
            authority=data.simple("AUTHORITY"),
            time=int(data.simple("TIME")),
            by=data.simple("BY"),
            order=int(data.simple("ORDER")),
        )


@dataclasses.dataclass(frozen=True)
class Embassy:
    """Class that represents the data of an embassy for a Region."""

    region: str
    status: str

    @classmethod
    def from_xml(cls, node: etree.Element) -> Embassy:
        """Parses an EMBASSY node; established embassies have no type."""
        return cls(region=content(node), status=node.attrib.get("type", "established"))


@dataclasses.dataclass(frozen=True)
class Message:
    """A post on a regional message board.

    status is 0 (visible), 1 (suppressed), 2 (deleted) or 9 (suppressed by a moderator).
    """

    id: int
    timestamp: int
    nation: str
    status: int
    message: str
    likes: int
    likers: Sequence[str]
    suppressor: Optional[str] = None
    edited: Optional[int] = None
    embassy: Optional[str] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> Message:
        """Parses a POST node from the messages shard."""
        data = NodeParse(node)
        return cls(
            id=int(node.attrib["id"]),
            timestamp=int(data.simple("TIMESTAMP")),
            nation=data.simple("NATION"),
            status=int(data.simple("STATUS")),
            message=data.simple("MESSAGE"),
            likes=data.optional_int("LIKES") or 0,
            likers=data.optional_list("LIKERS", ":") or [],
            suppressor=data.optional("SUPPRESSOR"),
            edited=data.optional_int("EDITED"),
            embassy=data.optional("EMBASSY"),
        )


@dataclasses.dataclass(frozen=True)
class Vote:
    """Votes for and against a World Assembly resolution."""

    votesFor: int
    votesAgainst: int

    @classmethod
    def from_xml(cls, node: etree.Element) -> Vote:
        """Parses a GAVOTE or SCVOTE node of a region."""
        data = NodeParse(node)
        return cls(
            votesFor=int(data.simple("FOR")), votesAgainst=int(data.simple("AGAINST"))
        )


@dataclasses.dataclass(frozen=True)
class Resolution:
    """A World Assembly resolution, at vote or passed."""

    name: str
    category: str
    proposedBy: str
    created: Optional[int]
    promoted: Optional[int]
    implemented: Optional[int]
    votesFor: Optional[int]
    votesAgainst: Optional[int]
    resolutionId: Optional[int]
    option: Optional[str]
    description: Optional[str]
    votersFor: Optional[Sequence[str]] = None
    votersAgainst: Optional[Sequence[str]] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> Resolution:
        """Parses a RESOLUTION node (https://www.nationstates.net/cgi-bin/api.cgi?wa=1&q=resolution)."""
        data = NodeParse(node)
        return cls(
            name=data.simple("NAME"),
            category=data.simple("CATEGORY"),
            proposedBy=data.simple("PROPOSED_BY"),
            created=data.optional_int("CREATED"),
            promoted=data.optional_int("PROMOTED"),
            implemented=data.optional_int("IMPLEMENTED"),
            votesFor=data.optional_int("TOTAL_VOTES_FOR"),
            votesAgainst=data.optional_int("TOTAL_VOTES_AGAINST"),
            resolutionId=data.optional_int("RESID"),
            option=data.optional("OPTION"),
            description=data.optional("DESC"),
            votersFor=data.optional_sequence("VOTES_FOR", content),
            votersAgainst=data.optional_sequence("VOTES_AGAINST", content),
        )


@dataclasses.dataclass(frozen=True)
class NationRecord:
    """The data returned by a nation request.

    The standard request (no shards) fills in the standard fields;
    any field whose shard was not requested is None.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    classification: Optional[str] = None
    fullName: Optional[str] = None
    motto: Optional[str] = None
    governmentCategory: Optional[str] = None
    WAStatus: Optional[str] = None
    endorsements: Optional[Sequence[Name]] = None
    issuesAnswered: Optional[int] = None
    freedom: Optional[Freedoms[str]] = None
    region: Optional[str] = None
    population: Optional[int] = None
    tax: Optional[float] = None
    animal: Optional[str] = None
    animalTrait: Optional[str] = None
    currency: Optional[str] = None
    demonym: Optional[str] = None
    demonym2: Optional[str] = None
    demonym2Plural: Optional[str] = None
    flag: Optional[str] = None
    majorIndustry: Optional[str] = None
    governmentPriority: Optional[str] = None
    government: Optional[Mapping[str, float]] = None
    governmentDescription: Optional[str] = None
    founded: Optional[str] = None
    foundedTime: Optional[int] = None
    firstLogin: Optional[int] = None
    lastLogin: Optional[int] = None
    lastActivity: Optional[str] = None
    influence: Optional[str] = None
    freedomScores: Optional[Freedoms[int]] = None
    publicSector: Optional[float] = None
    deaths: Optional[Sequence[DeathCause]] = None
    leader: Optional[str] = None
    capital: Optional[str] = None
    religion: Optional[str] = None
    factbooks: Optional[int] = None
    dispatches: Optional[int] = None
    dbid: Optional[int] = None
    admirable: Optional[str] = None
    admirables: Optional[Sequence[str]] = None
    banner: Optional[str] = None
    banners: Optional[Sequence[str]] = None
    census: Optional[Sequence[Census]] = None
    crime: Optional[str] = None
    dispatchList: Optional[Sequence[Dispatch]] = None
    factbookList: Optional[Sequence[Dispatch]] = None
    GAVote: Optional[str] = None
    SCVote: Optional[str] = None
    gdp: Optional[int] = None
    happenings: Optional[Sequence[Event]] = None
    income: Optional[int] = None
    industryDescription: Optional[str] = None
    legislation: Optional[Sequence[str]] = None
    notable: Optional[str] = None
    notables: Optional[Sequence[str]] = None
    policies: Optional[Sequence[str]] = None
    poorest: Optional[int] = None
    richest: Optional[int] = None
    regionalCensus: Optional[int] = None
    worldCensus: Optional[int] = None
    sensibilities: Optional[Sequence[str]] = None
    canRecruit: Optional[bool] = None
    canCampaign: Optional[bool] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> NationRecord:
        """Constructs a NationRecord from a NATION node."""
        data = NodeParse(expect_root(node, "NATION"))
        freedom = data.optional_node("FREEDOM")
        freedomScores = data.optional_node("FREEDOMSCORES")
        government = data.optional_node("GOVT")
        census = data.optional_node("CENSUS")
        sensibilities = data.optional_list("SENSIBILITIES", ", ")
        return cls(
            id=node.attrib.get("id"),
            name=data.optional("NAME"),
            classification=data.optional("TYPE"),
            fullName=data.optional("FULLNAME"),
            motto=data.optional("MOTTO"),
            governmentCategory=data.optional("CATEGORY"),
            WAStatus=data.optional("UNSTATUS"),
            endorsements=name_list(data.optional_list("ENDORSEMENTS", ",")),
            issuesAnswered=data.optional_int("ISSUES_ANSWERED"),
            freedom=None if freedom is None else Freedoms.from_xml(freedom, str),
            region=data.optional("REGION"),
            population=data.optional_int("POPULATION"),
            tax=data.optional_float("TAX"),
            animal=data.optional("ANIMAL"),
            animalTrait=data.optional("ANIMALTRAIT"),
            currency=data.optional("CURRENCY"),
            demonym=data.optional("DEMONYM"),
            demonym2=data.optional("DEMONYM2"),
            demonym2Plural=data.optional("DEMONYM2PLURAL"),
            flag=data.optional("FLAG"),
            majorIndustry=data.optional("MAJORINDUSTRY"),
            governmentPriority=data.optional("GOVTPRIORITY"),
            government=None
            if government is None
            else {child.tag: float(content(child)) for child in government},
            governmentDescription=data.optional("GOVTDESC"),
            founded=data.optional("FOUNDED"),
            foundedTime=data.optional_int("FOUNDEDTIME"),
            firstLogin=data.optional_int("FIRSTLOGIN"),
            lastLogin=data.optional_int("LASTLOGIN"),
            lastActivity=data.optional("LASTACTIVITY"),
            influence=data.optional("INFLUENCE"),
            freedomScores=None
            if freedomScores is None
            else Freedoms.from_xml(freedomScores, int),
            publicSector=data.optional_float("PUBLICSECTOR"),
            deaths=data.optional_sequence("DEATHS", DeathCause.from_xml),
            leader=data.optional("LEADER"),
            capital=data.optional("CAPITAL"),
            religion=data.optional("RELIGION"),
            factbooks=data.optional_int("FACTBOOKS"),
            dispatches=data.optional_int("DISPATCHES"),
            dbid=data.optional_int("DBID"),
            admirable=data.optional("ADMIRABLE"),
            admirables=data.optional_sequence("ADMIRABLES", content),
            banner=data.optional("BANNER"),
            banners=data.optional_sequence("BANNERS", content),
            census=None if census is None else Census.many_from_xml(census),
            crime=data.optional("CRIME"),
            dispatchList=data.optional_sequence("DISPATCHLIST", Dispatch.from_xml),
            factbookList=data.optional_sequence("FACTBOOKLIST", Dispatch.from_xml),
            GAVote=data.optional("GAVOTE"),
            SCVote=data.optional("SCVOTE"),
            gdp=data.optional_int("GDP"),
            happenings=data.optional_sequence("HAPPENINGS", Event.from_xml),
            income=data.optional_int("INCOME"),
            industryDescription=data.optional("INDUSTRYDESC"),
            legislation=data.optional_sequence("LEGISLATION", content),
            notable=data.optional("NOTABLE"),
            notables=data.optional_sequence("NOTABLES", content),
            policies=data.optional_sequence(
                "POLICIES", lambda policy: NodeParse(policy).simple("NAME")
            ),
            poorest=data.optional_int("POOREST"),
            richest=data.optional_int("RICHEST"),
            regionalCensus=data.optional_int("RCENSUS"),
            worldCensus=data.optional_int("WCENSUS"),
            sensibilities=sensibilities,
            canRecruit=data.convert("TGCANRECRUIT", lambda text: text == "1"),
            canCampaign=data.convert("TGCANCAMPAIGN", lambda text: text == "1"),
        )


@dataclasses.dataclass(frozen=True)
class RegionRecord:
    """The data returned by a region request.

    Any field whose shard was not requested is None.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    factbook: Optional[str] = None
    numNations: Optional[int] = None
    nations: Optional[Sequence[Name]] = None
    delegate: Optional[str] = None
    delegateVotes: Optional[int] = None
    delegateAuth: Optional[str] = None
    founder: Optional[str] = None
    founderAuth: Optional[str] = None
    officers: Optional[Sequence[Officer]] = None
    power: Optional[str] = None
    flag: Optional[str] = None
    banner: Optional[str] = None
    bannerBy: Optional[str] = None
    bannerURL: Optional[str] = None
    embassies: Optional[Sequence[Embassy]] = None
    embassyRMB: Optional[str] = None
    banList: Optional[Sequence[str]] = None
    census: Optional[Sequence[Census]] = None
    dbid: Optional[int] = None
    dispatches: Optional[Sequence[int]] = None
    founded: Optional[str] = None
    foundedTime: Optional[int] = None
    frontier: Optional[bool] = None
    GAVote: Optional[Vote] = None
    SCVote: Optional[Vote] = None
    happenings: Optional[Sequence[Event]] = None
    history: Optional[Sequence[Event]] = None
    lastUpdate: Optional[int] = None
    lastMajorUpdate: Optional[int] = None
    lastMinorUpdate: Optional[int] = None
    messages: Optional[Sequence[Message]] = None
    numWANations: Optional[int] = None
    WANations: Optional[Sequence[Name]] = None
    tags: Optional[Sequence[str]] = None
    WABadges: Optional[Sequence[str]] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> RegionRecord:
        """Constructs a RegionRecord from a REGION node."""
        data = NodeParse(expect_root(node, "REGION"))
        dispatches = data.optional_list("DISPATCHES", ",")
        census = data.optional_node("CENSUS")
        gaVote = data.optional_node("GAVOTE")
        scVote = data.optional_node("SCVOTE")
        return cls(
            id=node.attrib.get("id"),
            name=data.optional("NAME"),
            factbook=data.optional("FACTBOOK"),
            numNations=data.optional_int("NUMNATIONS"),
            nations=name_list(data.optional_list("NATIONS", ":")),
            delegate=data.optional("DELEGATE"),
            delegateVotes=data.optional_int("DELEGATEVOTES"),
            delegateAuth=data.optional("DELEGATEAUTH"),
            founder=data.optional("FOUNDER"),
            founderAuth=data.optional("FOUNDERAUTH"),
            officers=data.optional_sequence("OFFICERS", Officer.from_xml),
            power=data.optional("POWER"),
            flag=data.optional("FLAG"),
            banner=data.optional("BANNER"),
            bannerBy=data.optional("BANNERBY"),
            bannerURL=data.optional("BANNERURL"),
            embassies=data.optional_sequence("EMBASSIES", Embassy.from_xml),
            embassyRMB=data.optional("EMBASSYRMB"),
            banList=data.optional_list("BANNED", ":"),
            census=None if census is None else Census.many_from_xml(census),
            dbid=data.optional_int("DBID"),
            dispatches=None
            if dispatches is None
            else [int(dispatch) for dispatch in dispatches],
            founded=data.optional("FOUNDED"),
            foundedTime=data.optional_int("FOUNDEDTIME"),
            frontier=data.convert("FRONTIER", lambda text: text == "1"),
            GAVote=None if gaVote is None else Vote.from_xml(gaVote),
            SCVote=None if scVote is None else Vote.from_xml(scVote),
            happenings=data.optional_sequence("HAPPENINGS", Event.from_xml),
            history=data.optional_sequence("HISTORY", Event.from_xml),
            lastUpdate=data.optional_int("LASTUPDATE"),
            lastMajorUpdate=data.optional_int("LASTMAJORUPDATE"),
            lastMinorUpdate=data.optional_int("LASTMINORUPDATE"),
            messages=data.optional_sequence("MESSAGES", Message.from_xml),
            numWANations=data.optional_int("NUMUNNATIONS"),
            WANations=name_list(data.optional_list("UNNATIONS", ",")),
            tags=data.optional_sequence("TAGS", content),
            WABadges=data.optional_sequence("WABADGES", content),
        )


@dataclasses.dataclass(frozen=True)
class WorldRecord:
    """The data returned by a world request."""

    census: Optional[Sequence[Census]] = None
    censusId: Optional[int] = None
    censusName: Optional[str] = None
    censusDescription: Optional[str] = None
    censusScale: Optional[str] = None
    censusTitle: Optional[str] = None
    dispatch: Optional[Dispatch] = None
    dispatchList: Optional[Sequence[Dispatch]] = None
    featuredRegion: Optional[str] = None
    happenings: Optional[Sequence[Event]] = None
    lastEventId: Optional[int] = None
    nations: Optional[Sequence[Name]] = None
    newNations: Optional[Sequence[Name]] = None
    numNations: Optional[int] = None
    numRegions: Optional[int] = None
    regions: Optional[Sequence[Name]] = None
    telegramQueue: Optional[Mapping[str, int]] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> WorldRecord:
        """Constructs a WorldRecord from a WORLD node."""
        data = NodeParse(expect_root(node, "WORLD"))
        census = data.optional_node("CENSUS")
        dispatch = data.optional_node("DISPATCH")
        description = data.optional_node("CENSUSDESC")
        queue = data.optional_node("TGQUEUE")
        return cls(
            census=Census.many_from_xml(census)
            if census is not None and len(census)
            else None,
            censusId=data.optional_int("CENSUSID"),
            # The censusname shard reuses the CENSUS tag, holding only text
            censusName=content(census)
            if census is not None and not len(census)
            else None,
            censusDescription=None
            if description is None
            else NodeParse(description).optional("NDESC"),
            censusScale=data.optional("CENSUSSCALE"),
            censusTitle=data.optional("CENSUSTITLE"),
            dispatch=None if dispatch is None else Dispatch.from_xml(dispatch),
            dispatchList=data.optional_sequence("DISPATCHLIST", Dispatch.from_xml),
            featuredRegion=data.optional("FEATUREDREGION"),
            happenings=data.optional_sequence("HAPPENINGS", Event.from_xml),
            lastEventId=data.optional_int("LASTEVENTID"),
            nations=name_list(data.optional_list("NATIONS", ",")),
            newNations=name_list(data.optional_list("NEWNATIONS", ",")),
            numNations=data.optional_int("NUMNATIONS"),
            numRegions=data.optional_int("NUMREGIONS"),
            regions=name_list(data.optional_list("REGIONS", ",")),
            telegramQueue=None
            if queue is None
            else {child.tag.lower(): int(content(child)) for child in queue},
        )


@dataclasses.dataclass(frozen=True)
class WARecord:
    """The data returned by a World Assembly request."""

    council: Optional[int] = None
    numNations: Optional[int] = None
    numDelegates: Optional[int] = None
    delegates: Optional[Sequence[Name]] = None
    members: Optional[Sequence[Name]] = None
    happenings: Optional[Sequence[Event]] = None
    proposals: Optional[Sequence[str]] = None
    resolution: Optional[Resolution] = None
    lastResolution: Optional[str] = None

    @classmethod
    def from_xml(cls, node: etree.Element) -> WARecord:
        """Constructs a WARecord from a WA node."""
        data = NodeParse(expect_root(node, "WA"))
        resolution = data.optional_node("RESOLUTION")
        return cls(
            council=int(node.attrib["council"]) if "council" in node.attrib else None,
            numNations=data.optional_int("NUMNATIONS"),
            numDelegates=data.optional_int("NUMDELEGATES"),
            delegates=name_list(data.optional_list("DELEGATES", ",")),
            members=name_list(data.optional_list("MEMBERS", ",")),
            happenings=data.optional_sequence("HAPPENINGS", Event.from_xml),
            proposals=data.optional_sequence(
                "PROPOSALS", lambda proposal: NodeParse(proposal).simple("NAME")
            ),
            # An empty RESOLUTION node means nothing is at vote
            resolution=Resolution.from_xml(resolution)
            if resolution is not None and len(resolution)
            else None,
            lastResolution=data.optional("LASTRESOLUTION"),
        )

