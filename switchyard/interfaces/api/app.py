"""FastAPI application exposing the dispatch layer.

Routes:
    GET  /health
    POST /classify
    POST /gate
    GET  /pending
    GET  /approvals/export
    GET  /approvals/{id}
    POST /resolve/{id}
    POST /orchestrator/run
    POST /orchestrator/plan
    GET  /agents
    GET  /logs
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ... import __version__
from ...container import Container
from ...core.errors import RequestValidationError, SwitchyardError
from .schemas import ClassifyRequest, GateRequest, PlanRequest, ResolveRequest, RunRequest

logger = logging.getLogger(__name__)


class DispatchApp:
    """HTTP application over a wired Container."""

    def __init__(self, container: Container):
        self.container = container
        self.app = self._create_app()
        self._setup_middleware()
        self._setup_exception_handlers()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        return FastAPI(
            title="Switchyard",
            description="Intent routing, approval gating and task orchestration",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

    def _setup_middleware(self) -> None:
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_exception_handlers(self) -> None:

        @self.app.exception_handler(RequestValidationError)
        async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
            return JSONResponse(status_code=400, content={"error": str(exc)})

        @self.app.exception_handler(SwitchyardError)
        async def dispatch_error(request: Request, exc: SwitchyardError) -> JSONResponse:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
            return JSONResponse(status_code=500, content={"error": str(exc)})

        @self.app.exception_handler(Exception)
        async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
            logger.exception(f"{request.method} {request.url.path} raised: {exc}")
            return JSONResponse(
                status_code=500,
                content={"error": str(exc) or exc.__class__.__name__},
            )

    def _setup_routes(self) -> None:
        container = self.container

        @self.app.get("/health")
        async def health_check() -> dict[str, Any]:
            """Health check endpoint."""
            return {
                "status": "healthy",
                "timestamp": datetime.utcnow().isoformat(),
                "version": __version__,
                "environment": container.settings.environment,
            }

        @self.app.post("/classify")
        async def classify(body: ClassifyRequest) -> dict[str, Any]:
            decision = await container.classifier.classify(
                source=body.source,
                requester_role=body.user_role,
                message=body.message,
                context=body.context,
            )
            return decision.to_response()

        @self.app.post("/gate")
        async def gate(body: GateRequest) -> dict[str, Any]:
            result = await container.gate.gate(
                requesting_handler=body.requesting_agent or "unknown",
                action=body.action,
                requester_role=body.user_role or "AGENT",
                payload=body.payload,
                reason=body.reason,
            )
            return result.model_dump(mode="json")

        @self.app.get("/pending")
        async def pending() -> list[dict[str, Any]]:
            return [item.model_dump(mode="json") for item in container.gate.get_pending()]

        @self.app.get("/approvals/export", response_class=PlainTextResponse)
        async def export_approvals() -> str:
            """Read-only Markdown rendering of the approval queue."""
            return container.gate.export_markdown()

        @self.app.get("/approvals/{approval_id}")
        async def get_approval(approval_id: str) -> JSONResponse:
            item = container.gate.get(approval_id)
            if item is None:
                return JSONResponse(status_code=404, content={"error": "Not found."})
            return JSONResponse(content=item.model_dump(mode="json"))

        @self.app.post("/resolve/{approval_id}")
        async def resolve(approval_id: str, body: ResolveRequest) -> JSONResponse:
            result = container.gate.resolve(
                approval_id,
                body.decision,
                resolved_by=body.resolved_by or "OWNER",
                note=body.note,
            )
            return JSONResponse(
                status_code=200 if result.ok else 400,
                content=result.to_response(),
            )

        @self.app.post("/orchestrator/run")
        async def run(body: RunRequest) -> dict[str, Any]:
            result = await container.orchestrator.run(
                body.task,
                context=body.context,
                forced_workers=body.workers,
                dry_run=body.dry_run,
                requester_role=body.user_role,
            )
            return result.to_response()

        @self.app.post("/orchestrator/plan")
        async def plan(body: PlanRequest) -> dict[str, Any]:
            result = await container.orchestrator.plan(body.task, context=body.context)
            subtasks = [s.model_dump(mode="json") for s in result.subtasks]
            return {"task": result.task, "subtasks": subtasks, "worker_count": len(subtasks)}

        @self.app.get("/agents")
        async def agents() -> list[dict[str, Any]]:
            return [s.model_dump(mode="json") for s in container.status.snapshot()]

        @self.app.get("/logs")
        async def logs(limit: int = Query(default=50, ge=1, le=500)) -> list[dict[str, Any]]:
            entries = container.audit.recent(limit)
            return [{**e.model_dump(mode="json"), "line": e.to_line()} for e in entries]


def create_app(container: Container) -> FastAPI:
    """Build the FastAPI app for a wired container."""
    return DispatchApp(container).app
