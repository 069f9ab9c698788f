"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any


# === Sessions ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    preset: str | None = None
    script: str | None = None
    name: str | None = None


class StepRequest(BaseModel):
    n: int = Field(default=1, ge=1)


class ScriptRequest(BaseModel):
    script: str


class SessionSummary(BaseModel):
    id: str
    name: str
    status: str
    tick_count: int
    current_phase: int
    phases_count: int
    live_agents: int


class SessionResponse(SessionSummary):
    is_started: bool
    is_over: bool
    grid_size: int
    config: dict[str, Any]


# === Script / agents ===

class ScriptResponse(BaseModel):
    script: str


class AgentTemplateResponse(BaseModel):
    type_name: str
    values: dict[str, float]
    line: str


class PhaseResponse(BaseModel):
    phase: int
    agents: list[AgentTemplateResponse]


class PhaseRecordResponse(BaseModel):
    phase: int
    agents_spawned: int
    started_tick: int
    finished_tick: int | None
    type_counts: dict[str, int]


class AgentTypeResponse(BaseModel):
    type_name: str
    properties: dict[str, float]


# === Height map ===

class HeightMapResponse(BaseModel):
    size: int
    heights: list[list[float]]
    min_height: float
    max_height: float


class PresetResponse(BaseModel):
    name: str
    description: str
    script: str
