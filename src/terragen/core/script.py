"""
Encoder/decoder for the line-oriented agent script format.

A script is a sequence of lines. The literal line ``newPhase`` starts a
new phase (the first phase is implicit). Every other non-empty line
describes one template agent::

    CoastLine!count=2!life=300!inland=0

Fields are ``!``-delimited and empty fields are skipped. Field 0 is the
agent type tag; the remaining fields are ``name=value`` pairs with
numeric values. Lines whose tag is not registered are dropped.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from terragen.agents.base import TerrainAgent
    from terragen.agents.registry import AgentRegistry

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "!"
NEW_PHASE = "newPhase"


class ScriptFormatError(ValueError):
    """A script line could not be decoded."""


def split_fields(line: str) -> list[str]:
    """Split a line on ``!``, dropping empty fields."""
    return [f for f in line.strip().split(FIELD_SEPARATOR) if f]


def format_value(value: float) -> str:
    """Shortest text that parses back to exactly ``value``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def encode_agent(agent: TerrainAgent) -> str:
    """Serialize an agent's type tag and parameters to one line."""
    fields = [agent.type_name]
    fields.extend(
        f"{name}={format_value(value)}" for name, value in agent.values.items()
    )
    return FIELD_SEPARATOR.join(fields)


def apply_fields(agent: TerrainAgent, fields: list[str]) -> None:
    """Apply ``name=value`` fields to an agent's parameter bag.

    Unknown parameter names are ignored so scripts written for newer
    agent versions still load.
    """
    for item in fields:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ScriptFormatError(f"Expected 'name=value', got {item!r}")
        try:
            value = float(raw)
        except ValueError:
            raise ScriptFormatError(
                f"Parameter '{name}' has non-numeric value {raw!r}"
            ) from None
        if not math.isfinite(value):
            raise ScriptFormatError(f"Parameter '{name}' has non-finite value {raw!r}")
        if name not in agent.values:
            logger.debug("%s: ignoring unknown parameter '%s'", agent.type_name, name)
            continue
        agent.values[name] = value


def decode_agent(line: str, registry: AgentRegistry | None = None) -> TerrainAgent | None:
    """Build a template agent from one script line.

    Returns None when the type tag is not registered. Raises
    ``ScriptFormatError`` on an empty line or malformed field.
    """
    if registry is None:
        from terragen.agents import default_registry
        registry = default_registry()

    fields = split_fields(line)
    if not fields:
        raise ScriptFormatError("Empty agent line")
    tag = fields[0]
    if tag not in registry:
        return None
    agent = registry.create(tag)
    apply_fields(agent, fields[1:])
    return agent


def parse_script(text: str, registry: AgentRegistry | None = None) -> list[list[TerrainAgent]]:
    """Parse a whole script into phases of template agents.

    Unrecognized and malformed lines are skipped; the rest of the
    script still loads.
    """
    if registry is None:
        from terragen.agents import default_registry
        registry = default_registry()

    phases: list[list[TerrainAgent]] = [[]]
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line == NEW_PHASE:
            phases.append([])
            continue
        try:
            agent = decode_agent(line, registry)
        except ScriptFormatError as exc:
            logger.warning("Skipping malformed script line %d: %s", lineno, exc)
            continue
        if agent is None:
            logger.debug("Dropping line %d with unknown agent type: %r", lineno, line)
            continue
        phases[-1].append(agent)
    return phases


def dump_script(phases: list[list[TerrainAgent]]) -> str:
    """Serialize phases back to script text.

    ``newPhase`` is written between phases, never before the first.
    """
    lines: list[str] = []
    for i, phase in enumerate(phases):
        if i != 0:
            lines.append(NEW_PHASE)
        lines.extend(encode_agent(agent) for agent in phase)
    return "".join(line + "\n" for line in lines)
