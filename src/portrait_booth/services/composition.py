"""Composition orchestrator: subject in, branded print image out."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from uuid import UUID

from portrait_booth.domain.composition import (
    CompositionResult,
    CompositionStage,
    StoredObject,
)
from portrait_booth.domain.errors import (
    ArtifactWriteError,
    BackgroundRemovalError,
    PortraitBoothError,
)
from portrait_booth.domain.imaging import RasterBuffer
from portrait_booth.domain.layouts import Layout
from portrait_booth.domain.placement import (
    FitMode,
    Frame,
    PlacementPolicy,
    PlacementResult,
)
from portrait_booth.domain.sessions import SubjectIdentity
from portrait_booth.services import codec, compositor, placement
from portrait_booth.services.layouts import LayoutService
from portrait_booth.services.sessions import SessionRepository

_logger = logging.getLogger(__name__)


class BackgroundRemover(Protocol):
    """Remote service that makes the background of a portrait transparent."""

    async def remove_background(self, image_bytes: bytes, size: str = "auto") -> bytes:
        """Return encoded image bytes with a transparent background."""


class ObjectStorage(Protocol):
    """Durable remote storage for composed images."""

    async def upload(self, data: bytes, folder: str, key: str) -> StoredObject:
        """Store bytes and return their public URL and storage id."""

    async def destroy(self, storage_id: str) -> bool:
        """Delete an object; return False if it was already absent."""


class ArtifactStore(Protocol):
    """Local durable storage for composed images."""

    def save(self, filename: str, data: bytes) -> Path:
        """Write bytes under a collision-free name and return the path."""


@dataclass
class CompositionService:
    """Runs one composition request from transport image to stored artifact."""

    layout_service: LayoutService
    background_remover: BackgroundRemover
    object_storage: ObjectStorage
    artifact_store: ArtifactStore
    session_repository: SessionRepository
    default_policy: PlacementPolicy = field(default_factory=PlacementPolicy)
    storage_folder: str = "final-images"
    removal_size: str = "auto"
    removal_timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 15.0
    flatten_color: str = "#ffffff"
    _background_tasks: set["asyncio.Future[object]"] = field(
        default_factory=set, init=False, repr=False
    )

    async def remove_background(self, image_bytes: bytes) -> bytes:
        """Call the removal collaborator under a bounded timeout."""
        try:
            return await asyncio.wait_for(
                self.background_remover.remove_background(
                    image_bytes, size=self.removal_size
                ),
                timeout=self.removal_timeout_seconds,
            )
        except TimeoutError as exc:
            raise BackgroundRemovalError(
                "Background removal timed out after "
                f"{self.removal_timeout_seconds:g}s"
            ) from exc
        except BackgroundRemovalError:
            raise
        except Exception as exc:
            raise BackgroundRemovalError(f"Background removal failed: {exc}") from exc

    async def submit(  # noqa: PLR0913
        self,
        subject_image: str,
        layout_id: str,
        identity: SubjectIdentity,
        consent: bool,
        *,
        frame: Frame | None = None,
        fit_mode: FitMode | None = None,
    ) -> CompositionResult:
        """Compose a captured subject onto a layout and persist the result.

        Failures up to the local write abort the request. Upload and session
        write failures only drop the remote metadata from the result.
        """
        stage = CompositionStage.RECEIVED
        try:
            subject_bytes = codec.decode_transport_bytes(subject_image)
            codec.decode_bytes(subject_bytes)
            layout = self.layout_service.get_layout(layout_id)
            masked_bytes = await self.remove_background(subject_bytes)
            stage = CompositionStage.BACKGROUND_REMOVED

            composed, placed = self._compose(layout, masked_bytes, frame, fit_mode)
            encoded = compositor.export_jpeg(composed, self.flatten_color)
            stage = CompositionStage.COMPOSITED

            local_path = self._write_local(
                f"final_{layout_id}_{_epoch_millis()}.jpg", encoded
            )
            stage = CompositionStage.PERSISTED_LOCAL
        except PortraitBoothError as exc:
            exc.stage = stage.value
            _logger.warning(
                "Composition %s: layout=%s stage=%s reason=%s",
                CompositionStage.FAILED.value,
                layout_id,
                stage.value,
                exc.reason,
            )
            raise

        data_uri = codec.to_data_uri(encoded, "image/jpeg")
        stored = await self._upload(local_path.stem, encoded)
        session_id: UUID | None = None
        if stored is not None:
            stage = CompositionStage.PERSISTED_REMOTE
            session_id = self._record_session(
                identity, layout_id, consent, stored
            )
            if session_id is not None:
                stage = CompositionStage.RECORD_WRITTEN

        _logger.info(
            "Composition %s: layout=%s last_stage=%s local=%s storage_id=%s",
            CompositionStage.DONE.value,
            layout_id,
            stage.value,
            local_path,
            stored.id if stored else None,
        )
        return CompositionResult(
            encoded=encoded,
            data_uri=data_uri,
            local_path=local_path,
            placement=placed,
            storage_url=stored.url if stored else None,
            storage_id=stored.id if stored else None,
            session_id=session_id,
            last_stage=stage,
        )

    async def aclose(self) -> None:
        """Wait for timed-out uploads to finish and be removed again."""
        while self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    def resolve_policy(
        self, layout: Layout, fit_mode: FitMode | None = None
    ) -> PlacementPolicy:
        """Call override beats layout override beats the deployment default."""
        policy = layout.policy or self.default_policy
        if fit_mode is not None:
            policy = policy.with_mode(fit_mode)
        return policy

    def _compose(
        self,
        layout: Layout,
        masked_bytes: bytes,
        frame: Frame | None,
        fit_mode: FitMode | None,
    ) -> tuple[RasterBuffer, PlacementResult]:
        canvas = layout.frame
        if frame is not None and frame != canvas:
            _logger.info(
                "Caller frame %sx%s ignored; layout %s is %sx%s",
                frame.width,
                frame.height,
                layout.layout_id,
                canvas.width,
                canvas.height,
            )
        subject = compositor.load_layer("subject", masked_bytes)
        placed = placement.solve(
            subject.width,
            subject.height,
            canvas.width,
            canvas.height,
            self.resolve_policy(layout, fit_mode),
        )
        composed = compositor.compose(
            layout.background,
            [
                compositor.PositionedLayer("subject", subject, placed),
                compositor.full_frame_layer("overlay", layout.overlay, canvas),
            ],
            canvas,
        )
        return composed, placed

    def _write_local(self, filename: str, encoded: bytes) -> Path:
        try:
            return self.artifact_store.save(filename, encoded)
        except OSError as exc:
            raise ArtifactWriteError(f"Could not save {filename}: {exc}") from exc

    async def _upload(self, key: str, encoded: bytes) -> StoredObject | None:
        upload = asyncio.ensure_future(
            self.object_storage.upload(encoded, self.storage_folder, key)
        )
        self._track(upload)
        done, _ = await asyncio.wait({upload}, timeout=self.upload_timeout_seconds)
        if not done:
            # The storage call may still land; remove it once it does.
            upload.add_done_callback(self._discard_late_upload)
            _logger.warning(
                "Upload of %s timed out after %gs; keeping local artifact only",
                key,
                self.upload_timeout_seconds,
            )
            return None
        try:
            return upload.result()
        except Exception:
            _logger.warning(
                "Upload of %s failed; keeping local artifact only",
                key,
                exc_info=True,
            )
        return None

    def _discard_late_upload(self, upload: "asyncio.Future[StoredObject]") -> None:
        if upload.cancelled() or upload.exception() is not None:
            return
        self._track(asyncio.ensure_future(self._destroy_late_upload(upload.result())))

    async def _destroy_late_upload(self, stored: StoredObject) -> None:
        try:
            await asyncio.wait_for(
                self.object_storage.destroy(stored.id),
                timeout=self.upload_timeout_seconds,
            )
        except Exception:
            _logger.warning(
                "Could not remove late upload %s", stored.id, exc_info=True
            )
            return
        _logger.info("Removed late upload %s", stored.id)

    def _track(self, task: "asyncio.Future[object]") -> None:
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def _record_session(
        self,
        identity: SubjectIdentity,
        layout_id: str,
        consent: bool,
        stored: StoredObject,
    ) -> UUID | None:
        try:
            record = self.session_repository.create_session(
                identity=identity,
                layout_id=layout_id,
                consent=consent,
                storage_url=stored.url,
                storage_id=stored.id,
            )
        except Exception:
            _logger.exception("Failed to record session for %s", stored.id)
            return None
        return record.id


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000
