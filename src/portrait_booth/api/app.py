"""FastAPI application factory."""

import base64
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from portrait_booth.api.admin import router as admin_router
from portrait_booth.api.models import (
    ComposeRequest,
    ComposeResponse,
    RemoveBackgroundRequest,
    RetakeRequest,
    RetakeResponse,
)
from portrait_booth.app_logging import configure_logging
from portrait_booth.containers import AppContainer
from portrait_booth.domain.errors import (
    BackgroundRemovalError,
    CleanupError,
    DecodeError,
    InvalidDimensionsError,
    LayoutNotFoundError,
    PortraitBoothError,
)
from portrait_booth.domain.placement import Frame
from portrait_booth.domain.sessions import SubjectIdentity
from portrait_booth.services import codec

_ERROR_STATUS: dict[type[PortraitBoothError], int] = {
    DecodeError: status.HTTP_400_BAD_REQUEST,
    InvalidDimensionsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    LayoutNotFoundError: status.HTTP_404_NOT_FOUND,
    BackgroundRemovalError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    output_dir = container.settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/final-images", StaticFiles(directory=output_dir), name="final-images")

    @app.exception_handler(PortraitBoothError)
    async def handle_domain_error(
        request: Request, exc: PortraitBoothError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"success": False, "message": exc.reason, "stage": exc.stage},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/remove-bg")
    async def remove_background(
        payload: RemoveBackgroundRequest, request: Request
    ) -> dict[str, object]:
        """Strip the background of a capture and return it as base64 PNG."""
        state_container: AppContainer = request.app.state.container
        image_bytes = codec.decode_transport_bytes(payload.image)
        result = await state_container.composition_service.remove_background(
            image_bytes
        )
        return {
            "success": True,
            "data": {"result_b64": base64.b64encode(result).decode("utf-8")},
        }

    @app.post("/compose-final")
    async def compose_final(
        payload: ComposeRequest, request: Request
    ) -> ComposeResponse:
        """Compose the subject onto a layout and persist the result."""
        state_container: AppContainer = request.app.state.container
        frame = None
        if payload.frame_width and payload.frame_height:
            frame = Frame(width=payload.frame_width, height=payload.frame_height)
        result = await state_container.composition_service.submit(
            payload.user_image,
            payload.layout_id,
            SubjectIdentity(name=payload.name, email=payload.email),
            payload.consent,
            frame=frame,
            fit_mode=payload.fit_mode,
        )
        return ComposeResponse(
            final_image_data=result.data_uri,
            local_path=str(result.local_path),
            storage_url=result.storage_url,
            storage_id=result.storage_id,
            placement=result.placement.as_dict(),
        )

    @app.post("/retake")
    async def retake(payload: RetakeRequest, request: Request) -> RetakeResponse:
        """Discard a stored composition so the subject can capture again."""
        state_container: AppContainer = request.app.state.container
        try:
            report = await state_container.retake_service.cleanup(payload.storage_id)
        except CleanupError as exc:
            logger.warning("Retake cleanup incomplete: %s", exc.reason)
            report = exc.report
            return RetakeResponse(
                success=False,
                message="Previous photo could not be fully removed, please continue",
                asset_deleted=bool(report and report.asset_deleted),
                record_deleted=bool(report and report.record_deleted),
                errors=report.errors if report else [exc.reason],
            )
        return RetakeResponse(
            success=True,
            message="Last photo deleted, please capture a new one",
            asset_deleted=report.asset_deleted,
            record_deleted=report.record_deleted,
        )

    return app


def _status_for(exc: PortraitBoothError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
