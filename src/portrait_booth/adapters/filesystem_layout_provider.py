"""Template assets stored as files under one directory per layout."""

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from portrait_booth.domain.errors import LayoutNotFoundError
from portrait_booth.domain.layouts import LayoutAssets
from portrait_booth.domain.placement import PlacementPolicy
from portrait_booth.services.layouts import LayoutProvider, validate_layout_id

_logger = logging.getLogger(__name__)

BACKGROUND_FILENAME = "layout-img.png"
OVERLAY_FILENAME = "layer-img.png"
POLICY_FILENAME = "layout.json"


@dataclass
class FilesystemLayoutProvider(LayoutProvider):
    """Reads ``<root>/<layout_id>/layout-img.png`` and ``layer-img.png``.

    An optional ``layout.json`` next to them holds a placement policy
    override for that layout.
    """

    root: Path

    def asset_version(self, layout_id: str) -> str | None:
        """Fingerprint asset files by mtime and size; None if either is absent."""
        parts: list[str] = []
        for path in self._asset_paths(layout_id):
            try:
                stat = path.stat()
            except FileNotFoundError:
                if path.name == POLICY_FILENAME:
                    continue
                return None
            parts.append(f"{path.name}:{stat.st_mtime_ns}:{stat.st_size}")
        return "|".join(parts)

    def load_assets(self, layout_id: str) -> LayoutAssets:
        """Read both template images and the optional policy file."""
        version = self.asset_version(layout_id)
        if version is None:
            raise LayoutNotFoundError(layout_id)
        folder = self._folder(layout_id)
        try:
            background = (folder / BACKGROUND_FILENAME).read_bytes()
            overlay = (folder / OVERLAY_FILENAME).read_bytes()
        except FileNotFoundError as exc:
            raise LayoutNotFoundError(layout_id) from exc
        return LayoutAssets(
            layout_id=layout_id,
            background=background,
            overlay=overlay,
            version=version,
            policy=self._load_policy(layout_id, folder / POLICY_FILENAME),
        )

    def _folder(self, layout_id: str) -> Path:
        return self.root / validate_layout_id(layout_id)

    def _asset_paths(self, layout_id: str) -> list[Path]:
        folder = self._folder(layout_id)
        return [
            folder / BACKGROUND_FILENAME,
            folder / OVERLAY_FILENAME,
            folder / POLICY_FILENAME,
        ]

    def _load_policy(self, layout_id: str, path: Path) -> PlacementPolicy | None:
        if not path.is_file():
            return None
        try:
            return PlacementPolicy.model_validate_json(path.read_bytes())
        except ValidationError:
            _logger.warning(
                "Ignoring invalid placement policy for layout %s",
                layout_id,
                exc_info=True,
            )
            return None
