from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.registry import FitnessRegistry
from .routes import mount_users_api


def create_api_app(registry: FitnessRegistry) -> FastAPI:
    app = FastAPI(title="fittrack", version="0.1.0")
    app.state.registry = registry

    mount_users_api(app, registry)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Unparsable JSON and bad query/path values share the 400 shape used by the routes.
        reasons = "; ".join(str(e.get("msg", "invalid")) for e in exc.errors())
        return JSONResponse(status_code=400, content={"detail": {"message": f"Invalid request: {reasons}"}})

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict[str, int]:
        # Minimal polling endpoint.
        return {"globalRevision": registry.global_revision()}

    return app


__all__ = ["create_api_app"]
