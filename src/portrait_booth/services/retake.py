"""Retake cleanup: discard a stored composition and its session."""

import asyncio
import logging
from dataclasses import dataclass

from portrait_booth.domain.composition import CleanupReport
from portrait_booth.domain.errors import CleanupError
from portrait_booth.services.composition import ObjectStorage
from portrait_booth.services.sessions import SessionRepository

_logger = logging.getLogger(__name__)


@dataclass
class RetakeService:
    """Deletes the remote asset and the session record independently."""

    object_storage: ObjectStorage
    session_repository: SessionRepository
    timeout_seconds: float = 15.0

    async def cleanup(self, storage_id: str) -> CleanupReport:
        """Attempt both deletions; raise CleanupError if either raised.

        Finding nothing to delete is not an error, so repeated calls for the
        same storage id succeed.
        """
        if not storage_id or not storage_id.strip():
            raise CleanupError("A storage id is required for retake")
        report = CleanupReport(storage_id=storage_id)

        try:
            report.asset_deleted = await asyncio.wait_for(
                self.object_storage.destroy(storage_id),
                timeout=self.timeout_seconds,
            )
            if not report.asset_deleted:
                _logger.info("Retake: no remote asset for %s", storage_id)
        except TimeoutError:
            _logger.warning("Retake: asset delete timed out for %s", storage_id)
            report.errors.append(
                f"asset: delete timed out after {self.timeout_seconds:g}s"
            )
        except Exception as exc:
            _logger.warning(
                "Retake: asset delete failed for %s", storage_id, exc_info=True
            )
            report.errors.append(f"asset: {exc}")

        try:
            record = self.session_repository.delete_by_storage_id(storage_id)
            report.record_deleted = record is not None
            if record is None:
                _logger.info("Retake: no session recorded for %s", storage_id)
        except Exception as exc:
            _logger.warning(
                "Retake: session delete failed for %s", storage_id, exc_info=True
            )
            report.errors.append(f"session: {exc}")

        if not report.success:
            raise CleanupError(
                f"Retake cleanup incomplete for {storage_id}: "
                + "; ".join(report.errors),
                report=report,
            )
        return report
