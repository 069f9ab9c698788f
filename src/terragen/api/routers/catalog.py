"""Agent type and preset catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from terragen.agents import default_registry
from terragen.api.schemas import AgentTypeResponse, PresetResponse
from terragen.experiment.presets import get_preset, list_presets

router = APIRouter()


@router.get("/agent-types", response_model=list[AgentTypeResponse])
def list_agent_types():
    registry = default_registry()
    return [
        {"type_name": name, "properties": dict(registry.create(name).values)}
        for name in registry.registered_names
    ]


@router.get("/presets", response_model=list[str])
def presets():
    return list_presets()


@router.get("/presets/{name}", response_model=PresetResponse)
def preset_detail(name: str):
    try:
        preset = get_preset(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Preset '{name}' not found")
    return {"name": preset.name, "description": preset.description, "script": preset.script}
