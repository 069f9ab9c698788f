"""Generation session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from terragen.api.schemas import (
    CreateSessionRequest,
    HeightMapResponse,
    PhaseRecordResponse,
    PhaseResponse,
    ScriptRequest,
    ScriptResponse,
    SessionResponse,
    SessionSummary,
    StepRequest,
)
from terragen.core.config import GeneratorConfig
from terragen.experiment.presets import get_preset

router = APIRouter()


def _get(mgr, session_id: str):
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.post("/sessions", response_model=SessionResponse)
def create_session(req: CreateSessionRequest, request: Request):
    mgr = request.app.state.session_manager

    config = None
    script = req.script
    if req.preset:
        try:
            preset = get_preset(req.preset)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0]))
        config = preset.config
        if script is None:
            script = preset.script
    if req.config:
        try:
            config = GeneratorConfig.from_dict(req.config)
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=422, detail=f"Invalid config: {exc}")

    session = mgr.create_session(config=config, script=script, name=req.name)
    return mgr.describe(session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(request: Request):
    mgr = request.app.state.session_manager
    return mgr.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    return mgr.describe(_get(mgr, session_id))


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Cannot delete while running")
    mgr.delete_session(session_id)
    return {"deleted": True}


@router.post("/sessions/{session_id}/step", response_model=SessionResponse)
def step_session(session_id: str, req: StepRequest, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Cannot step while running")
    return mgr.describe(mgr.step(session_id, req.n))


@router.post("/sessions/{session_id}/run", response_model=SessionResponse)
def run_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Session is already running")
    return mgr.describe(mgr.run_full(session_id))


@router.post("/sessions/{session_id}/run_async", response_model=SessionResponse)
def run_session_async(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    return mgr.describe(mgr.run_full_async(session_id))


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Cannot reset while running")
    return mgr.describe(mgr.reset_session(session_id))


@router.get("/sessions/{session_id}/script", response_model=ScriptResponse)
def get_script(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    session = _get(mgr, session_id)
    return {"script": session.generator.dumps()}


@router.put("/sessions/{session_id}/script", response_model=SessionResponse)
def put_script(session_id: str, req: ScriptRequest, request: Request):
    mgr = request.app.state.session_manager
    _get(mgr, session_id)
    if mgr.is_running(session_id):
        raise HTTPException(status_code=409, detail="Cannot load a script while running")
    return mgr.describe(mgr.load_script(session_id, req.script))


@router.get("/sessions/{session_id}/phases", response_model=list[PhaseResponse])
def list_phases(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    gen = _get(mgr, session_id).generator
    return [
        {
            "phase": i,
            "agents": [
                {"type_name": a.type_name, "values": dict(a.values), "line": a.to_string()}
                for a in gen.get_agents(i)
            ],
        }
        for i in range(gen.phases_count)
    ]


@router.get("/sessions/{session_id}/history", response_model=list[PhaseRecordResponse])
def phase_history(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    gen = _get(mgr, session_id).generator
    return [
        {
            "phase": r.phase,
            "agents_spawned": r.agents_spawned,
            "started_tick": r.started_tick,
            "finished_tick": r.finished_tick,
            "type_counts": dict(r.type_counts),
        }
        for r in gen.history
    ]


@router.get("/sessions/{session_id}/heightmap", response_model=HeightMapResponse)
def get_heightmap(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    gen = _get(mgr, session_id).generator
    return gen.heightmap.to_dict()
