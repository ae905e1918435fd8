"""Tests for parsing XML responses into records."""

import pytest

from nsclient.core import Name
from nsclient.exceptions import XMLError
from nsclient.models import (
    Census,
    Embassy,
    Event,
    Freedoms,
    NationRecord,
    RegionRecord,
    Vote,
    WARecord,
    WorldRecord,
)
from nsclient.parser import NodeParse, as_xml

NATION_XML = """<NATION id="testlandia">
<NAME>Testlandia</NAME>
<TYPE>Hive Mind</TYPE>
<FULLNAME>The Hive Mind of Testlandia</FULLNAME>
<UNSTATUS>WA Delegate</UNSTATUS>
<ENDORSEMENTS>nation_one,Nation Two</ENDORSEMENTS>
<ISSUES_ANSWERED>1200</ISSUES_ANSWERED>
<FREEDOM>
<CIVILRIGHTS>Excellent</CIVILRIGHTS>
<ECONOMY>Strong</ECONOMY>
<POLITICALFREEDOM>Superb</POLITICALFREEDOM>
</FREEDOM>
<REGION>Testregionia</REGION>
<POPULATION>38011</POPULATION>
<TAX>84.7</TAX>
<GOVT>
<ADMINISTRATION>5.5</ADMINISTRATION>
<DEFENCE>10.0</DEFENCE>
</GOVT>
<FREEDOMSCORES>
<CIVILRIGHTS>73</CIVILRIGHTS>
<ECONOMY>60</ECONOMY>
<POLITICALFREEDOM>80</POLITICALFREEDOM>
</FREEDOMSCORES>
<DEATHS>
<CAUSE type="Old Age">90.5</CAUSE>
<CAUSE type="Lost in Wilderness">9.5</CAUSE>
</DEATHS>
<LEADER></LEADER>
<DBID>1</DBID>
<TGCANRECRUIT>0</TGCANRECRUIT>
</NATION>"""

REGION_XML = """<REGION id="testregionia">
<NAME>Testregionia</NAME>
<NUMNATIONS>3</NUMNATIONS>
<NATIONS>testlandia:other_nation:Third Nation</NATIONS>
<DELEGATE>testlandia</DELEGATE>
<DELEGATEVOTES>2</DELEGATEVOTES>
<OFFICERS>
<OFFICER>
<NATION>other_nation</NATION>
<OFFICE>Minister</OFFICE>
<AUTHORITY>AC</AUTHORITY>
<TIME>1600000000</TIME>
<BY>testlandia</BY>
<ORDER>1</ORDER>
</OFFICER>
</OFFICERS>
<EMBASSIES>
<EMBASSY>Lazarus</EMBASSY>
<EMBASSY type="pending">Osiris</EMBASSY>
</EMBASSIES>
<DISPATCHES>12,34</DISPATCHES>
<FRONTIER>1</FRONTIER>
<GAVOTE><FOR>10</FOR><AGAINST>4</AGAINST></GAVOTE>
<MESSAGES>
<POST id="77">
<TIMESTAMP>1700000000</TIMESTAMP>
<NATION>testlandia</NATION>
<STATUS>0</STATUS>
<LIKES>2</LIKES>
<LIKERS>a:b</LIKERS>
<MESSAGE>Hello</MESSAGE>
</POST>
</MESSAGES>
</REGION>"""

HAPPENINGS_XML = """<WORLD>
<HAPPENINGS>
<EVENT id="2">
<TIMESTAMP>1700000100</TIMESTAMP>
<TEXT>@@testlandia@@ relocated from %%lazarus%% to %%testregionia%%.</TEXT>
</EVENT>
<EVENT id="1">
<TIMESTAMP>1700000000</TIMESTAMP>
<TEXT>@@a@@ endorsed @@b@@.</TEXT>
</EVENT>
</HAPPENINGS>
<NUMNATIONS>250000</NUMNATIONS>
</WORLD>"""

WA_XML = """<WA council="1">
<NUMNATIONS>30000</NUMNATIONS>
<MEMBERS>a,b,c</MEMBERS>
<RESOLUTION>
<CATEGORY>Health</CATEGORY>
<CREATED>1700000000</CREATED>
<NAME>Repeal Something</NAME>
<PROPOSED_BY>testlandia</PROPOSED_BY>
<TOTAL_VOTES_FOR>1000</TOTAL_VOTES_FOR>
<TOTAL_VOTES_AGAINST>200</TOTAL_VOTES_AGAINST>
</RESOLUTION>
</WA>"""


class TestNationRecord:
    """Tests for parsing nations."""

    @pytest.fixture
    def nation(self):
        return NationRecord.from_xml(as_xml(NATION_XML))

    def test_simple_fields(self, nation):
        assert nation.id == "testlandia"
        assert nation.name == "Testlandia"
        assert nation.classification == "Hive Mind"
        assert nation.WAStatus == "WA Delegate"
        assert nation.issuesAnswered == 1200
        assert nation.population == 38011
        assert nation.tax == pytest.approx(84.7)
        assert nation.dbid == 1

    def test_structured_fields(self, nation):
        assert nation.freedom == Freedoms("Excellent", "Strong", "Superb")
        assert nation.freedomScores == Freedoms(73, 60, 80)
        assert nation.government == {"ADMINISTRATION": 5.5, "DEFENCE": 10.0}
        assert [death.cause for death in nation.deaths] == ["Old Age", "Lost in Wilderness"]
        assert nation.canRecruit is False

    def test_endorsements_are_names(self, nation):
        assert nation.endorsements == ["nation_one", "nation_two"]
        assert Name("Nation One") in nation.endorsements

    def test_unrequested_fields_are_none(self, nation):
        assert nation.motto is None
        assert nation.census is None
        assert nation.happenings is None

    def test_empty_text_is_none_for_numbers_but_kept_for_text(self, nation):
        assert nation.leader == ""

    def test_wrong_root(self):
        with pytest.raises(XMLError):
            NationRecord.from_xml(as_xml("<REGION id='x'/>"))

    def test_bad_number(self):
        with pytest.raises(XMLError):
            NationRecord.from_xml(as_xml("<NATION><POPULATION>many</POPULATION></NATION>"))

    def test_census(self):
        node = as_xml(
            """<NATION id="t"><CENSUS>
            <SCALE id="0"><SCORE>12.5</SCORE><RANK>3</RANK><PRANK>1.0</PRANK></SCALE>
            </CENSUS></NATION>"""
        )
        record = NationRecord.from_xml(node)
        assert record.census == [Census(id=0, score=12.5, rank=3, percentage=1.0)]


class TestRegionRecord:
    """Tests for parsing regions."""

    @pytest.fixture
    def region(self):
        return RegionRecord.from_xml(as_xml(REGION_XML))

    def test_nations(self, region):
        assert region.numNations == 3
        assert region.nations == ["testlandia", "other_nation", "third_nation"]

    def test_officers(self, region):
        (officer,) = region.officers
        assert officer.nation == "other_nation"
        assert officer.authority == "AC"
        assert officer.order == 1

    def test_embassies(self, region):
        assert region.embassies == [
            Embassy("Lazarus", "established"),
            Embassy("Osiris", "pending"),
        ]

    def test_misc(self, region):
        assert region.dispatches == [12, 34]
        assert region.frontier is True
        assert region.GAVote == Vote(10, 4)
        assert region.SCVote is None

    def test_messages(self, region):
        (post,) = region.messages
        assert post.id == 77
        assert post.likers == ["a", "b"]
        assert post.suppressor is None


class TestWorldRecord:
    """Tests for parsing world responses."""

    def test_happenings(self):
        world = WorldRecord.from_xml(as_xml(HAPPENINGS_XML))
        assert world.numNations == 250000
        first, second = world.happenings
        assert first.id == 2
        assert first.nations == ["testlandia"]
        assert first.regions == ["lazarus", "testregionia"]
        assert second.nations == ["a", "b"]

    def test_census_name(self):
        world = WorldRecord.from_xml(as_xml('<WORLD><CENSUS id="1">Economy</CENSUS></WORLD>'))
        assert world.censusName == "Economy"
        assert world.census is None

    def test_census_history(self):
        world = WorldRecord.from_xml(
            as_xml(
                """<WORLD><CENSUS><SCALE id="1">
                <POINT><TIMESTAMP>10</TIMESTAMP><SCORE>1.5</SCORE></POINT>
                <POINT><TIMESTAMP>20</TIMESTAMP><SCORE>2.5</SCORE></POINT>
                </SCALE></CENSUS></WORLD>"""
            )
        )
        assert world.census == [
            Census(id=1, score=1.5, timestamp=10),
            Census(id=1, score=2.5, timestamp=20),
        ]


class TestWARecord:
    """Tests for parsing World Assembly responses."""

    def test_resolution(self):
        wa = WARecord.from_xml(as_xml(WA_XML))
        assert wa.council == 1
        assert wa.members == ["a", "b", "c"]
        assert wa.resolution.name == "Repeal Something"
        assert wa.resolution.votesFor == 1000
        assert wa.resolution.votersFor is None

    def test_nothing_at_vote(self):
        wa = WARecord.from_xml(as_xml('<WA council="2"><RESOLUTION></RESOLUTION></WA>'))
        assert wa.resolution is None


class TestParser:
    """Tests for the XML helpers."""

    def test_malformed(self):
        with pytest.raises(XMLError):
            as_xml("<NATION>")

    def test_bytes(self):
        assert as_xml(b"<WA/>").tag == "WA"

    def test_node_parse(self):
        data = NodeParse(as_xml("<A><B>1</B><B>2</B><C/></A>"))
        assert [node.text for node in data.from_name("B")] == ["1", "2"]
        assert data.simple("C") == ""
        assert data.optional("D") is None
        assert data.optional_int("C") is None
        assert data.optional_list("C", ",") == []

    def test_event_without_id(self):
        event = Event.from_xml(as_xml("<EVENT><TIMESTAMP>5</TIMESTAMP><TEXT>x</TEXT></EVENT>"))
        assert event.id is None
        assert event.timestamp == 5
