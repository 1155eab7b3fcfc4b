"""Optional FastAPI server for Workbook Studio endpoints."""

from __future__ import annotations

import logging
import os
from typing import Any

from workbook_studio import __version__
from workbook_studio.api_models import (
    ChatRequest,
    GenerateRequest,
    PreviewRequest,
    PreviewResponse,
    ResourceResolutionResponse,
    TemplateListResponse,
)
from workbook_studio.api_service import (
    run_generate,
    run_list_templates,
    run_preview,
    run_resolve_resources,
)
from workbook_studio.config import XLSX_MEDIA_TYPE
from workbook_studio.exceptions import (
    ConfigValidationError,
    ProviderTimeoutError,
    UnknownTemplateError,
    UpstreamModelError,
)

logger = logging.getLogger(__name__)


def error_status(exc: Exception) -> int:
    """HTTP status for an exception raised by a service handler."""
    if isinstance(exc, UnknownTemplateError):
        return 404
    if isinstance(exc, ProviderTimeoutError):
        return 504
    if isinstance(exc, UpstreamModelError):
        return 502
    if isinstance(exc, ValueError):
        return 400
    return 500


def error_detail(exc: Exception) -> Any:
    if isinstance(exc, ConfigValidationError):
        return {"message": str(exc), "errors": exc.errors}
    return str(exc)


def create_app():
    """Create FastAPI app lazily so base package has no hard FastAPI dependency."""
    try:
        from fastapi import FastAPI, HTTPException, Request, Response
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError(
            "FastAPI is not installed. Install with: "
            "pip install 'fastapi>=0.110,<1.0' 'uvicorn>=0.30,<1.0'"
        ) from exc

    app = FastAPI(title="Workbook Studio API", version=__version__)

    origins_raw = os.getenv("WORKBOOK_STUDIO_CORS_ORIGINS", "*")
    allow_origins = [origin.strip() for origin in origins_raw.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": {"message": "Invalid request", "errors": errors}})

    def fail(exc: Exception, action: str) -> HTTPException:
        status = error_status(exc)
        if status >= 500:
            logger.warning("%s failed (%d): %s", action, status, exc)
        return HTTPException(status_code=status, detail=error_detail(exc))

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/templates", response_model=TemplateListResponse)
    def list_templates() -> TemplateListResponse:
        return run_list_templates()

    @app.post("/api/generate", response_model=None)
    def generate(payload: GenerateRequest) -> Response:
        try:
            result = run_generate(payload)
        except Exception as exc:  # noqa: BLE001
            raise fail(exc, "Workbook generation") from exc

        headers = {
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "Cache-Control": "no-store",
        }
        return Response(content=result.content, media_type=XLSX_MEDIA_TYPE, headers=headers)

    @app.post("/api/chat/{template_id}", response_model=ResourceResolutionResponse)
    def chat(template_id: str, payload: ChatRequest) -> ResourceResolutionResponse:
        try:
            return run_resolve_resources(template_id, payload)
        except Exception as exc:  # noqa: BLE001
            raise fail(exc, "Resource resolution") from exc

    @app.post("/api/preview", response_model=PreviewResponse)
    def preview(payload: PreviewRequest) -> PreviewResponse:
        try:
            return run_preview(payload)
        except Exception as exc:  # noqa: BLE001
            raise fail(exc, "Preview") from exc

    return app
