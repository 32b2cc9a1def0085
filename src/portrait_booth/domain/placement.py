"""Geometry models for placing a subject inside a frame."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field


class FitMode(str, Enum):
    """Named placement strategies."""

    STRETCH_FILL = "stretch_fill"
    CONTAIN_CENTER_BOTTOM = "contain_center_bottom"
    TARGET_HEIGHT_FRACTION = "target_height_fraction"
    BOUNDED_UPSCALE_CENTER = "bounded_upscale_center"


class PlacementPolicy(BaseModel):
    """Fit mode plus the tunables each mode reads."""

    mode: FitMode = FitMode.TARGET_HEIGHT_FRACTION
    bottom_margin: float = Field(default=0.02, ge=0.0, lt=1.0)
    max_scale: float | None = Field(default=None, gt=0.0)
    height_fraction: float = Field(default=0.9, gt=0.0)
    max_width_fraction: float = Field(default=0.95, gt=0.0)
    upscale_factor: float = Field(default=1.7, gt=0.0)
    max_height_fraction: float = Field(default=0.95, gt=0.0)
    vertical_bias: float = Field(default=0.35, ge=0.0)

    def with_mode(self, mode: FitMode) -> "PlacementPolicy":
        """Return a copy of this policy using another fit mode."""
        return self.model_copy(update={"mode": mode})


@dataclass(frozen=True)
class Frame:
    """Output canvas size in pixels."""

    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class PlacementResult:
    """Rectangle, in frame coordinates, the scaled subject is drawn into."""

    target_width: int
    target_height: int
    left: int
    top: int

    def as_dict(self) -> dict[str, int]:
        return {
            "target_width": self.target_width,
            "target_height": self.target_height,
            "left": self.left,
            "top": self.top,
        }
