"""
FastAPI Service Bus
-------------------
Local HTTP surface for the script engine.
Lets a UI shell submit inputs, read reports and ask for a shortcut.

This is NOT an external-facing API - bind it to localhost.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from core.context import AppContext

API_VERSION = "0.3.0"


# Request/Response Models

class RunRequest(BaseModel):
    """Raw script or natural-language input."""
    text: str = Field(..., description="Plan JSON or a natural-language command")
    log_usage: bool = Field(True, description="Count this input for shortcut suggestions")


class EntryModel(BaseModel):
    """One command outcome."""
    verb: str
    text: str
    status: str
    skill: Optional[str] = None
    execution_time_ms: float = 0.0


class RunResponse(BaseModel):
    """Report for one input."""
    run_id: str
    ok: bool
    lines: List[str]
    entries: List[EntryModel]
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class SkillInfo(BaseModel):
    """Registered skill."""
    name: str
    verbs: List[str]


class ShortcutResponse(BaseModel):
    """Suggested shortcut, if any input was used often enough."""
    shortcut: Optional[str] = None
    threshold: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str = API_VERSION
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


# Service Bus

class ServiceBus:
    """
    Service bus for the script engine.

    Provides REST API for:
    - Running inputs
    - Listing skills
    - Shortcut suggestions
    """

    def __init__(self, context: Optional["AppContext"] = None):
        self._context = context
        self._logger = logging.getLogger("megh.infra.service_bus")
        self._app: Optional[FastAPI] = None

    def set_context(self, context: "AppContext") -> None:
        """Set the application context."""
        self._context = context

    def _require_context(self) -> "AppContext":
        if self._context is None:
            raise HTTPException(status_code=503, detail="Engine not initialized")
        return self._context

    def create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            self._logger.info("Service bus starting...")
            yield
            self._logger.info("Service bus shutting down...")

        app = FastAPI(
            title="MeghAIna Script Engine",
            description="Local API for running MeghScript plans",
            version=API_VERSION,
            lifespan=lifespan
        )

        # CORS for a local UI shell
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._register_routes(app)

        self._app = app
        return app

    def _register_routes(self, app: FastAPI) -> None:
        """Register all API routes."""

        @app.get("/health", response_model=HealthResponse, tags=["System"])
        async def health_check():
            """Health check endpoint."""
            return HealthResponse(status="healthy")

        @app.get("/skills", response_model=List[SkillInfo], tags=["Skills"])
        async def list_skills():
            """List registered skills and the verbs they currently own."""
            context = self._require_context()
            owned = context.registry.verbs()
            return [
                SkillInfo(
                    name=skill.name,
                    verbs=sorted(v for v, owner in owned.items() if owner == skill.name),
                )
                for skill in context.registry.list_skills()
            ]

        @app.post("/run", response_model=RunResponse, tags=["Engine"])
        async def run(request: RunRequest):
            """Run one input and return its report."""
            context = self._require_context()

            if request.log_usage:
                report = await context.submit(request.text)
            else:
                report = await context.engine.run(request.text)

            return RunResponse(
                run_id=report.run_id,
                ok=report.ok,
                lines=report.lines(),
                entries=[
                    EntryModel(
                        verb=entry.verb,
                        text=entry.text,
                        status=entry.status.value,
                        skill=entry.skill,
                        execution_time_ms=entry.execution_time_ms,
                    )
                    for entry in report
                ],
            )

        @app.get("/shortcut", response_model=ShortcutResponse, tags=["Usage"])
        async def shortcut():
            """Most used input, once it was run often enough."""
            context = self._require_context()
            return ShortcutResponse(
                shortcut=context.usage.recommend_shortcut(),
                threshold=context.usage.threshold,
            )

        @app.delete("/shortcut", tags=["Usage"])
        async def reset_usage():
            """Forget usage counts."""
            context = self._require_context()
            context.usage.reset()
            return {"reset": True}


def create_app(context: Optional["AppContext"] = None) -> FastAPI:
    """Create the FastAPI application."""
    bus = ServiceBus(context)
    return bus.create_app()
