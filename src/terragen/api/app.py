"""
FastAPI application factory for the terragen API.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from terragen.api.sessions import SessionManager
from terragen.api.routers import catalog, generator

# Load .env from the project root, then CWD
_project_root = Path(__file__).resolve().parents[3]  # src/terragen/api/app.py → project root
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="terragen API",
        description="REST API for the agent-driven terrain generator",
        version="0.1.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=os.environ.get("TERRAGEN_CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    max_batch = int(os.environ.get("TERRAGEN_MAX_TICK_BATCH", "100000"))
    application.state.session_manager = SessionManager(max_tick_batch=max_batch)

    application.include_router(generator.router, prefix="/api/generator", tags=["generator"])
    application.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
