"""Building NS API requests out of shards.

A shard asks the API to include one piece of information in its response.
Shards can only be combined within one request if they target the same
nation, the same region, the same WA council, or the world.
See https://www.nationstates.net/pages/api.html for the shard lists.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import typing as t
import urllib.parse

from nsclient.core import safe_name
from nsclient.exceptions import ShardError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

BASE_URL = "https://www.nationstates.net/cgi-bin/api.cgi"

# Characters the API expects unescaped inside parameter values
SAFE_CHARACTERS = "+,.:"


@dataclasses.dataclass(frozen=True)
class Shard:
    """A shard name along with the extra parameters it needs."""

    name: str
    parameters: t.Tuple[t.Tuple[str, str], ...] = ()

    @classmethod
    def of(cls, name: str, **parameters: t.Optional[object]) -> Shard:
        """Constructs a Shard, dropping parameters that are None."""
        return cls(
            name,
            tuple(
                (key, str(value))
                for key, value in parameters.items()
                if value is not None
            ),
        )


class ShardEnum(enum.Enum):
    """Base for enumerations of shards that take no parameters."""

    def shard(self) -> Shard:
        """Returns the Shard this member stands for."""
        return Shard(self.value)


ShardLike = t.Union[Shard, ShardEnum]


def as_shard(shard: ShardLike) -> Shard:
    """Converts an enumeration member to a Shard, leaving Shards unchanged."""
    if isinstance(shard, ShardEnum):
        return shard.shard()
    return shard


class NationShard(ShardEnum):
    """Public nation shards."""

    ADMIRABLE = "admirable"
    ADMIRABLES = "admirables"
    ANIMAL = "animal"
    ANIMAL_TRAIT = "animaltrait"
    ANSWERED = "answered"
    BANNER = "banner"
    BANNERS = "banners"
    CAPITAL = "customcapital"
    CATEGORY = "category"
    CENSUS = "census"
    CRIME = "crime"
    CURRENCY = "currency"
    DBID = "dbid"
    DEATHS = "deaths"
    DEMONYM = "demonym"
    DEMONYM2 = "demonym2"
    DEMONYM2_PLURAL = "demonym2plural"
    DISPATCHES = "dispatches"
    DISPATCH_LIST = "dispatchlist"
    ENDORSEMENTS = "endorsements"
    FACTBOOKS = "factbooks"
    FACTBOOK_LIST = "factbooklist"
    FIRST_LOGIN = "firstlogin"
    FLAG = "flag"
    FOUNDED = "founded"
    FOUNDED_TIME = "foundedtime"
    FREEDOM = "freedom"
    FREEDOM_SCORES = "freedomscores"
    FULL_NAME = "fullname"
    GA_VOTE = "gavote"
    GDP = "gdp"
    GOVT = "govt"
    GOVT_DESC = "govtdesc"
    GOVT_PRIORITY = "govtpriority"
    HAPPENINGS = "happenings"
    INCOME = "income"
    INDUSTRY_DESC = "industrydesc"
    INFLUENCE = "influence"
    LAST_ACTIVITY = "lastactivity"
    LAST_LOGIN = "lastlogin"
    LEADER = "customleader"
    LEGISLATION = "legislation"
    MAJOR_INDUSTRY = "majorindustry"
    MOTTO = "motto"
    NAME = "name"
    NOTABLE = "notable"
    NOTABLES = "notables"
    POLICIES = "policies"
    POOREST = "poorest"
    POPULATION = "population"
    PUBLIC_SECTOR = "publicsector"
    RCENSUS = "rcensus"
    REGION = "region"
    RELIGION = "customreligion"
    RICHEST = "richest"
    SC_VOTE = "scvote"
    SECTORS = "sectors"
    SENSIBILITIES = "sensibilities"
    TAX = "tax"
    TG_CAN_RECRUIT = "tgcanrecruit"
    TG_CAN_CAMPAIGN = "tgcancampaign"
    TYPE = "type"
    WA = "wa"
    WA_BADGES = "wabadges"
    WCENSUS = "wcensus"


class RegionShard(ShardEnum):
    """Region shards."""

    BAN_LIST = "banlist"
    BANNER = "banner"
    BANNER_BY = "bannerby"
    BANNER_URL = "bannerurl"
    CENSUS = "census"
    CENSUS_RANKS = "censusranks"
    DBID = "dbid"
    DELEGATE = "delegate"
    DELEGATE_AUTH = "delegateauth"
    DELEGATE_VOTES = "delegatevotes"
    DISPATCHES = "dispatches"
    EMBASSIES = "embassies"
    EMBASSY_RMB = "embassyrmb"
    FACTBOOK = "factbook"
    FLAG = "flag"
    FOUNDED = "founded"
    FOUNDED_TIME = "foundedtime"
    FOUNDER = "founder"
    FRONTIER = "frontier"
    GA_VOTE = "gavote"
    HAPPENINGS = "happenings"
    HISTORY = "history"
    LAST_UPDATE = "lastupdate"
    LAST_MAJOR_UPDATE = "lastmajorupdate"
    LAST_MINOR_UPDATE = "lastminorupdate"
    MESSAGES = "messages"
    NAME = "name"
    NATIONS = "nations"
    NUM_NATIONS = "numnations"
    NUM_WA_NATIONS = "numwanations"
    OFFICERS = "officers"
    POLL = "poll"
    POWER = "power"
    SC_VOTE = "scvote"
    TAGS = "tags"
    WA_BADGES = "wabadges"
    WA_NATIONS = "wanations"


class WorldShard(ShardEnum):
    """World shards."""

    CENSUS = "census"
    CENSUS_ID = "censusid"
    CENSUS_DESC = "censusdesc"
    CENSUS_NAME = "censusname"
    CENSUS_RANKS = "censusranks"
    CENSUS_SCALE = "censusscale"
    CENSUS_TITLE = "censustitle"
    FEATURED_REGION = "featuredregion"
    HAPPENINGS = "happenings"
    LAST_EVENT_ID = "lasteventid"
    NATIONS = "nations"
    NEW_NATIONS = "newnations"
    NUM_NATIONS = "numnations"
    NUM_REGIONS = "numregions"
    REGIONS = "regions"
    TG_QUEUE = "tgqueue"


class WAShard(ShardEnum):
    """World Assembly shards."""

    NUM_NATIONS = "numnations"
    NUM_DELEGATES = "numdelegates"
    DELEGATES = "delegates"
    MEMBERS = "members"
    HAPPENINGS = "happenings"
    PROPOSALS = "proposals"
    RESOLUTION = "resolution"
    LAST_RESOLUTION = "lastresolution"


class ResolutionShard(ShardEnum):
    """Extra information about the resolution at vote."""

    VOTERS = "voters"
    VOTE_TRACK = "votetrack"
    DEL_LOG = "dellog"
    DEL_VOTES = "delvotes"


class CensusMode(ShardEnum):
    """Current World Census data that can be requested with the census shard."""

    SCORE = "score"
    RANK = "rank"
    REGION_RANK = "rrank"
    PERCENT_RANK = "prank"
    PERCENT_REGION_RANK = "prrank"


class WACouncil(enum.IntEnum):
    """The two World Assembly councils."""

    GENERAL_ASSEMBLY = 1
    SECURITY_COUNCIL = 2


def joined_parameter(*values: object) -> str:
    """Formats the given values into a single string to be passed as a parameter"""
    return "+".join(str(value) for value in values)


def census_scale(scale: t.Union[int, t.Iterable[int], str, None]) -> t.Optional[str]:
    """Formats a census scale parameter.

    Accepts a single id, an iterable of ids, or 'all'.
    """
    if scale is None:
        return None
    if isinstance(scale, str):
        if scale != "all":
            raise ShardError(f"Census scale must be an id or 'all', got '{scale}'")
        return scale
    if isinstance(scale, int):
        return str(scale)
    scales = list(scale)
    if not scales:
        raise ShardError("At least one census scale must be given")
    return joined_parameter(*scales)


def census(
    scale: t.Union[int, t.Iterable[int], str, None] = None,
    modes: t.Iterable[CensusMode] = (),
    *,
    history: bool = False,
    since: t.Optional[int] = None,
    until: t.Optional[int] = None,
) -> Shard:
    """The census shard, for nations, regions and the world.

    Without arguments it returns the featured scale of the day.
    History mode only has scores, so it cannot be combined with other modes;
    since and until (epoch timestamps) bound the history window.
    """
    modeList = list(modes)
    if history:
        if modeList:
            raise ShardError("History mode can not be combined with other modes")
        mode: t.Optional[str] = "history"
    else:
        if since is not None or until is not None:
            raise ShardError("A time window is only valid in history mode")
        mode = joined_parameter(*(m.value for m in modeList)) if modeList else None
    return Shard.of(
        "census",
        scale=census_scale(scale),
        mode=mode,
        **{"from": since, "to": until},
    )


def census_ranks(scale: t.Optional[int] = None, start: t.Optional[int] = None) -> Shard:
    """The censusranks shard, starting at the given rank."""
    return Shard.of("censusranks", scale=scale, start=start)


def scaled(shard: WorldShard, scale: int) -> Shard:
    """A census description shard of the world for a specific scale."""
    if shard not in (
        WorldShard.CENSUS_DESC,
        WorldShard.CENSUS_NAME,
        WorldShard.CENSUS_SCALE,
        WorldShard.CENSUS_TITLE,
    ):
        raise ShardError(f"{shard.name} does not take a census scale")
    return Shard.of(shard.value, scale=scale)


def messages(
    limit: t.Optional[int] = None,
    offset: t.Optional[int] = None,
    fromid: t.Optional[int] = None,
) -> Shard:
    """The region messages shard.

    limit must be between 1 and 100; the API defaults to 10.
    """
    if limit is not None and not 1 <= limit <= 100:
        raise ShardError(f"Message limit must be between 1 and 100, got {limit}")
    return Shard.of("messages", limit=limit, offset=offset, fromid=fromid)


def happenings(
    *,
    nations: t.Iterable[str] = (),
    regions: t.Iterable[str] = (),
    filters: t.Iterable[str] = (),
    limit: t.Optional[int] = None,
    sinceid: t.Optional[int] = None,
    beforeid: t.Optional[int] = None,
    sincetime: t.Optional[int] = None,
    beforetime: t.Optional[int] = None,
) -> Shard:
    """The world happenings shard, viewed from some nations or some regions."""
    nationList = [safe_name(nation) for nation in nations]
    regionList = [safe_name(region) for region in regions]
    if nationList and regionList:
        raise ShardError("Happenings can be viewed by nations or regions, not both")
    if nationList:
        view: t.Optional[str] = "nation." + ",".join(nationList)
    elif regionList:
        view = "region." + ",".join(regionList)
    else:
        view = None
    filterList = list(filters)
    return Shard.of(
        "happenings",
        view=view,
        filter=joined_parameter(*filterList) if filterList else None,
        limit=limit,
        sinceid=sinceid,
        beforeid=beforeid,
        sincetime=sincetime,
        beforetime=beforetime,
    )


def dispatch(dispatchid: int) -> Shard:
    """The world dispatch shard, for one dispatch."""
    return Shard.of("dispatch", dispatchid=dispatchid)


def dispatchlist(
    author: t.Optional[str] = None,
    category: t.Optional[str] = None,
    sort: t.Optional[str] = None,
) -> Shard:
    """The world dispatchlist shard.

    category is either a main category ('Factbook') or 'Main:Sub';
    sort is 'new' (default) or 'best'.
    """
    if sort is not None and sort not in ("new", "best"):
        raise ShardError(f"Dispatch sort must be 'new' or 'best', got '{sort}'")
    return Shard.of(
        "dispatchlist",
        dispatchauthor=safe_name(author) if author else None,
        dispatchcategory=category,
        dispatchsort=sort,
    )


def tgcanrecruit(from_region: t.Optional[str] = None) -> Shard:
    """Whether the nation accepts recruitment telegrams, optionally from a region."""
    return Shard.of(
        "tgcanrecruit", **{"from": safe_name(from_region) if from_region else None}
    )


def tgcancampaign(from_region: t.Optional[str] = None) -> Shard:
    """Whether the nation accepts campaign telegrams, optionally from a region."""
    return Shard.of(
        "tgcancampaign", **{"from": safe_name(from_region) if from_region else None}
    )


def resolution(*extras: ResolutionShard) -> Shard:
    """The at-vote resolution of a council, with extra information."""
    return Shard(joined_parameter("resolution", *(extra.value for extra in extras)))


def previous_resolution(resolutionid: int) -> Shard:
    """A passed resolution of a council, by id."""
    if resolutionid < 1:
        raise ShardError(f"Resolution ids start at 1, got {resolutionid}")
    return Shard.of("resolution", id=resolutionid)


class Request:
    """A request to the NS API, made of a key and shards."""

    # Shard enumeration accepted by this kind of request
    shardType: t.Optional[t.Type[ShardEnum]] = None

    def __init__(self, *shards: ShardLike) -> None:
        for shard in shards:
            if (
                isinstance(shard, ShardEnum)
                and self.shardType is not None
                and not isinstance(shard, self.shardType)
            ):
                raise ShardError(
                    f"{shard!r} can not be used in a {type(self).__name__}"
                )
        self.shards: t.Tuple[Shard, ...] = tuple(as_shard(shard) for shard in shards)

    def key(self) -> t.Dict[str, str]:
        """The parameters identifying what is being requested."""
        return {}

    def parameters(self) -> t.Dict[str, str]:
        """All query parameters, in order: key, q, then shard parameters.

        If two shards give the same parameter, the later one wins.
        """
        parameters = self.key()
        if self.shards:
            parameters["q"] = joined_parameter(*(shard.name for shard in self.shards))
        for shard in self.shards:
            for name, value in shard.parameters:
                if name in parameters and parameters[name] != value:
                    logger.debug(
                        "Parameter %s=%s overridden by %s", name, parameters[name], value
                    )
                parameters[name] = value
        return parameters

    def query(self) -> str:
        """The encoded query string."""
        return urllib.parse.urlencode(
            self.parameters(), safe=SAFE_CHARACTERS, quote_via=urllib.parse.quote
        )

    def url(self) -> str:
        """The full URL of this request."""
        return f"{BASE_URL}?{self.query()}"

    def __str__(self) -> str:
        return self.query()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.query()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Request):
            return NotImplemented
        return self.url() == other.url()

    def __hash__(self) -> int:
        return hash(self.url())


def required_name(kind: str, name: str) -> str:
    """Returns the safe form of a name, raising ShardError if it is empty."""
    safe = safe_name(name)
    if not safe:
        raise ShardError(f"A {kind} name is required")
    return safe


class NationRequest(Request):
    """A request for public shards of one nation.

    With no shards, the API returns the standard nation data.
    """

    shardType = NationShard

    def __init__(self, nation: str, *shards: ShardLike) -> None:
        super().__init__(*shards)
        self.nation = required_name("nation", nation)

    def key(self) -> t.Dict[str, str]:
        return {"nation": self.nation}


class RegionRequest(Request):
    """A request for shards of one region.

    With no shards, the API returns the standard region data.
    """

    shardType = RegionShard

    def __init__(self, region: str, *shards: ShardLike) -> None:
        super().__init__(*shards)
        self.region = required_name("region", region)

    def key(self) -> t.Dict[str, str]:
        return {"region": self.region}


class WorldRequest(Request):
    """A request for world shards. The world has no standard data."""

    shardType = WorldShard

    def __init__(self, *shards: ShardLike) -> None:
        if not shards:
            raise ShardError("A world request needs at least one shard")
        super().__init__(*shards)


class WARequest(Request):
    """A request for shards of a World Assembly council."""

    shardType = WAShard

    def __init__(
        self, council: WACouncil = WACouncil.GENERAL_ASSEMBLY, *shards: ShardLike
    ) -> None:
        super().__init__(*shards)
        self.council = WACouncil(council)

    def key(self) -> t.Dict[str, str]:
        return {"wa": str(int(self.council))}
