"""Template resolution with a version-checked read-through cache."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from portrait_booth.domain.errors import LayoutNotFoundError
from portrait_booth.domain.layouts import Layout, LayoutAssets
from portrait_booth.services import compositor
from portrait_booth.services.cache import Cache

_logger = logging.getLogger(__name__)

_LAYOUT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class LayoutProvider(Protocol):
    """Read-only source of template assets addressed by layout id."""

    def asset_version(self, layout_id: str) -> str | None:
        """Return a token that changes whenever the assets change, or None."""

    def load_assets(self, layout_id: str) -> LayoutAssets:
        """Return raw template bytes; raise LayoutNotFoundError if absent."""


def validate_layout_id(layout_id: str) -> str:
    """Reject ids that could escape the asset namespace."""
    if not layout_id or not _LAYOUT_ID_PATTERN.match(layout_id):
        raise LayoutNotFoundError(layout_id, f"Invalid layout id: {layout_id!r}")
    return layout_id


@dataclass
class LayoutService:
    """Resolves layout ids into decoded template rasters."""

    provider: LayoutProvider
    cache: Cache
    ttl_seconds: int = 300

    def get_layout(self, layout_id: str) -> Layout:
        """Return the decoded layout, reloading when its assets changed."""
        validate_layout_id(layout_id)
        version = self.provider.asset_version(layout_id)
        if version is None:
            self.cache.delete(layout_id)
            raise LayoutNotFoundError(layout_id)

        cached = self.cache.get(layout_id)
        if isinstance(cached, Layout) and cached.version == version:
            return cached

        assets = self.provider.load_assets(layout_id)
        layout = Layout(
            layout_id=layout_id,
            background=compositor.load_layer("background", assets.background),
            overlay=compositor.load_layer("overlay", assets.overlay),
            version=assets.version,
            policy=assets.policy,
        )
        if (layout.background.width, layout.background.height) != (
            layout.overlay.width,
            layout.overlay.height,
        ):
            _logger.warning(
                "Layout %s overlay size %sx%s differs from background %sx%s",
                layout_id,
                layout.overlay.width,
                layout.overlay.height,
                layout.background.width,
                layout.background.height,
            )
        self.cache.set(layout_id, layout, self.ttl_seconds)
        _logger.info("Loaded layout %s (version %s)", layout_id, layout.version)
        return layout
