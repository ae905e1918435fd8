"""Tests for building requests from shards."""

import pytest

from nsclient.exceptions import ShardError
from nsclient.shards import (
    BASE_URL,
    CensusMode,
    NationRequest,
    NationShard,
    RegionRequest,
    RegionShard,
    ResolutionShard,
    Shard,
    WACouncil,
    WARequest,
    WAShard,
    WorldRequest,
    WorldShard,
    census,
    census_ranks,
    dispatch,
    dispatchlist,
    happenings,
    messages,
    previous_resolution,
    resolution,
    scaled,
    tgcanrecruit,
)


class TestNationRequest:
    """Tests for nation requests."""

    def test_standard(self):
        assert NationRequest("Testlandia").url() == f"{BASE_URL}?nation=testlandia"

    def test_name_is_made_safe(self):
        assert NationRequest("  Big Nation ").query() == "nation=big_nation"

    def test_shards_joined_with_plus(self):
        request = NationRequest("testlandia", NationShard.NAME, NationShard.REGION)
        assert str(request) == "nation=testlandia&q=name+region"

    def test_custom_shards(self):
        request = NationRequest(
            "testlandia", NationShard.CAPITAL, NationShard.LEADER, NationShard.RELIGION
        )
        assert request.query() == (
            "nation=testlandia&q=customcapital+customleader+customreligion"
        )

    def test_census_parameters(self):
        request = NationRequest(
            "testlandia",
            census(scale=[1, 2], modes=[CensusMode.SCORE, CensusMode.RANK]),
        )
        assert request.query() == "nation=testlandia&q=census&scale=1+2&mode=score+rank"

    def test_census_history(self):
        request = NationRequest(
            "testlandia", census(scale="all", history=True, since=100, until=200)
        )
        assert request.query() == (
            "nation=testlandia&q=census&scale=all&mode=history&from=100&to=200"
        )

    def test_telegram_shard_parameter(self):
        request = NationRequest("testlandia", tgcanrecruit(from_region="The Pacific"))
        assert request.query() == "nation=testlandia&q=tgcanrecruit&from=the_pacific"

    def test_rejects_other_shard_kinds(self):
        with pytest.raises(ShardError):
            NationRequest("testlandia", RegionShard.DELEGATE)

    def test_requires_name(self):
        with pytest.raises(ShardError):
            NationRequest("   ")

    def test_equality(self):
        assert NationRequest("Testlandia", NationShard.NAME) == NationRequest(
            "testlandia", NationShard.NAME
        )


class TestRegionRequest:
    """Tests for region requests."""

    def test_shards(self):
        request = RegionRequest("The North Pacific", RegionShard.DELEGATE)
        assert request.query() == "region=the_north_pacific&q=delegate"

    def test_messages(self):
        request = RegionRequest("testregionia", messages(limit=5, fromid=10))
        assert request.query() == "region=testregionia&q=messages&limit=5&fromid=10"

    @pytest.mark.parametrize("limit", [0, 101])
    def test_message_limit_bounds(self, limit):
        with pytest.raises(ShardError):
            messages(limit=limit)

    def test_census_ranks(self):
        request = RegionRequest("testregionia", census_ranks(scale=65, start=20))
        assert request.query() == "region=testregionia&q=censusranks&scale=65&start=20"

    def test_special_characters_are_escaped(self):
        assert RegionRequest("a&b").query() == "region=a%26b"


class TestWorldRequest:
    """Tests for world requests."""

    def test_requires_shard(self):
        with pytest.raises(ShardError):
            WorldRequest()

    def test_happenings(self):
        request = WorldRequest(
            happenings(nations=["Test Nation"], filters=["law", "change"], limit=5)
        )
        assert request.query() == (
            "q=happenings&view=nation.test_nation&filter=law+change&limit=5"
        )

    def test_happenings_regions(self):
        request = WorldRequest(happenings(regions=["a", "b"], beforeid=9))
        assert request.query() == "q=happenings&view=region.a,b&beforeid=9"

    def test_happenings_view_is_exclusive(self):
        with pytest.raises(ShardError):
            happenings(nations=["a"], regions=["b"])

    def test_dispatch(self):
        assert WorldRequest(dispatch(1)).query() == "q=dispatch&dispatchid=1"

    def test_dispatchlist(self):
        request = WorldRequest(
            dispatchlist(author="Testlandia", category="Factbook:Overview", sort="best")
        )
        assert request.query() == (
            "q=dispatchlist&dispatchauthor=testlandia"
            "&dispatchcategory=Factbook:Overview&dispatchsort=best"
        )

    def test_dispatchlist_sort(self):
        with pytest.raises(ShardError):
            dispatchlist(sort="worst")

    def test_scaled(self):
        request = WorldRequest(scaled(WorldShard.CENSUS_NAME, 12))
        assert request.query() == "q=censusname&scale=12"

    def test_scaled_requires_census_shard(self):
        with pytest.raises(ShardError):
            scaled(WorldShard.NATIONS, 12)

    def test_later_parameters_override(self):
        request = WorldRequest(Shard.of("a", scale=1), Shard.of("b", scale=2))
        assert request.parameters() == {"q": "a+b", "scale": "2"}


class TestWARequest:
    """Tests for World Assembly requests."""

    def test_default_council(self):
        assert WARequest().query() == "wa=1"

    def test_council_and_shards(self):
        request = WARequest(WACouncil.SECURITY_COUNCIL, WAShard.MEMBERS, WAShard.DELEGATES)
        assert request.query() == "wa=2&q=members+delegates"

    def test_resolution_extras(self):
        request = WARequest(
            WACouncil.GENERAL_ASSEMBLY,
            resolution(ResolutionShard.VOTERS, ResolutionShard.DEL_VOTES),
        )
        assert request.query() == "wa=1&q=resolution+voters+delvotes"

    def test_previous_resolution(self):
        request = WARequest(WACouncil.GENERAL_ASSEMBLY, previous_resolution(5))
        assert request.query() == "wa=1&q=resolution&id=5"

    def test_previous_resolution_id(self):
        with pytest.raises(ShardError):
            previous_resolution(0)

    def test_rejects_resolution_extras_as_shards(self):
        with pytest.raises(ShardError):
            WARequest(WACouncil.GENERAL_ASSEMBLY, ResolutionShard.VOTERS)


class TestCensus:
    """Tests for the census shard."""

    def test_default(self):
        assert census() == Shard("census")

    def test_single_scale(self):
        assert census(scale=46).parameters == (("scale", "46"),)

    def test_history_excludes_modes(self):
        with pytest.raises(ShardError):
            census(modes=[CensusMode.SCORE], history=True)

    def test_window_requires_history(self):
        with pytest.raises(ShardError):
            census(since=10)

    def test_invalid_scale(self):
        with pytest.raises(ShardError):
            census(scale="some")

    def test_empty_scales(self):
        with pytest.raises(ShardError):
            census(scale=[])
