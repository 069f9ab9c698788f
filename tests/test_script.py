"""Tests for the agent script encoder/decoder."""

import pytest

from terragen.agents import (
    AgentRegistry,
    BeachAgent,
    CoastLineAgent,
    MountainAgent,
    RiverAgent,
    SmoothAgent,
    default_registry,
)
from terragen.core.script import (
    ScriptFormatError,
    decode_agent,
    dump_script,
    encode_agent,
    format_value,
    parse_script,
    split_fields,
)


class TestFields:
    def test_empty_fields_skipped(self):
        assert split_fields("CoastLine!!count=2!") == ["CoastLine", "count=2"]

    def test_format_integer_value(self):
        assert format_value(3.0) == "3"

    def test_format_fraction_roundtrips(self):
        v = 0.1 + 0.2
        assert float(format_value(v)) == v


class TestDecode:
    def test_decode_known_type(self):
        agent = decode_agent("CoastLine!count=3!life=50")
        assert isinstance(agent, CoastLineAgent)
        assert agent.get_value("count") == 3
        assert agent.get_value("life") == 50

    def test_missing_fields_keep_defaults(self):
        agent = decode_agent("Mountain!count=2")
        assert agent.get_value("height") == MountainAgent.DEFAULTS["height"]

    def test_unknown_type_returns_none(self):
        assert decode_agent("Volcano!count=1") is None

    def test_tag_is_case_sensitive(self):
        assert decode_agent("coastline!count=1") is None

    def test_unknown_parameter_ignored(self):
        agent = decode_agent("Smooth!count=1!lava=3")
        assert "lava" not in agent.values

    def test_field_without_equals_raises(self):
        with pytest.raises(ScriptFormatError):
            decode_agent("River!count")

    def test_non_numeric_value_raises(self):
        with pytest.raises(ScriptFormatError, match="non-numeric"):
            decode_agent("River!count=many")

    def test_custom_registry(self):
        registry = AgentRegistry()
        registry.register(BeachAgent)
        assert decode_agent("CoastLine!count=1", registry) is None
        assert isinstance(decode_agent("Beach!count=1", registry), BeachAgent)


class TestParseScript:
    def test_single_phase(self):
        phases = parse_script("CoastLine!count=1\n")
        assert len(phases) == 1
        assert len(phases[0]) == 1

    def test_new_phase_separator(self):
        phases = parse_script("CoastLine!count=1\nnewPhase\nMountain!count=2\n")
        assert [len(p) for p in phases] == [1, 1]
        assert isinstance(phases[1][0], MountainAgent)

    def test_empty_script_has_one_phase(self):
        assert parse_script("") == [[]]

    def test_unrecognized_line_dropped(self):
        phases = parse_script("CoastLine!count=1\nVolcano!count=1\nBeach!count=1\n")
        assert len(phases) == 1
        assert [a.type_name for a in phases[0]] == ["CoastLine", "Beach"]

    def test_malformed_line_skipped(self):
        phases = parse_script("River!count=x\nSmooth!count=2\n")
        assert [a.type_name for a in phases[0]] == ["Smooth"]

    @pytest.mark.parametrize("line", [
        "CoastLine!count=inf",
        "Smooth!life=nan",
        "Mountain!life=-inf",
    ])
    def test_non_finite_value_skipped(self, line):
        phases = parse_script(line + "\nBeach!count=1\n")
        assert [a.type_name for a in phases[0]] == ["Beach"]

    def test_non_finite_value_raises_on_decode(self):
        with pytest.raises(ScriptFormatError, match="non-finite"):
            decode_agent("CoastLine!count=inf")

    def test_blank_lines_and_crlf(self):
        phases = parse_script("\r\nCoastLine!count=1\r\n\r\nnewPhase\r\nRiver!count=1\r\n")
        assert [len(p) for p in phases] == [1, 1]


class TestDumpScript:
    def test_new_phase_between_not_before(self):
        phases = [[CoastLineAgent()], [MountainAgent(), RiverAgent()]]
        lines = dump_script(phases).splitlines()
        assert lines[0].startswith("CoastLine!")
        assert lines[1] == "newPhase"
        assert lines[2].startswith("Mountain!")
        assert lines[3].startswith("River!")

    def test_script_roundtrip(self):
        text = (
            "CoastLine!count=2!life=120!vertexLimit=300!branchInterval=10!inland=1!height=0.45\n"
            "newPhase\n"
            "Smooth!count=3!life=50!radius=2\n"
        )
        phases = parse_script(text)
        again = parse_script(dump_script(phases))
        assert [[a.values for a in p] for p in again] == [[a.values for a in p] for p in phases]


class TestAgentRoundTrip:
    @pytest.mark.parametrize("agent_cls", [
        CoastLineAgent, MountainAgent, SmoothAgent, RiverAgent, BeachAgent,
    ])
    def test_encode_decode_preserves_values(self, agent_cls):
        agent = agent_cls()
        for i, name in enumerate(agent.get_properties()):
            agent.set_value(name, i + 0.375)
        clone = decode_agent(encode_agent(agent), default_registry())
        assert type(clone) is agent_cls
        assert clone.values == agent.values

    def test_from_string_method(self):
        agent = CoastLineAgent()
        agent.from_string("CoastLine!count=4!height=0.9")
        assert agent.get_value("count") == 4
        assert agent.get_value("height") == 0.9

    def test_from_string_wrong_tag(self):
        with pytest.raises(ScriptFormatError):
            MountainAgent().from_string("River!count=1")

    def test_to_string_leads_with_tag(self):
        assert RiverAgent(count=2).to_string().startswith("River!count=2!")
