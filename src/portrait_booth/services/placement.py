"""Placement solver: where and how large the subject appears in a frame.

Pure geometry, no pixel data. Every mode scales in floats and rounds the
target size to whole pixels (half up) once, at the end; offsets are then
derived from the rounded size so the rectangle stays exact. Offsets that
would go negative are clamped to 0; the rectangle itself may still run
past the right or bottom edge, which the compositor clips.
"""

import math

from portrait_booth.domain.errors import InvalidDimensionsError
from portrait_booth.domain.placement import FitMode, PlacementPolicy, PlacementResult


def solve(
    subject_width: int,
    subject_height: int,
    frame_width: int,
    frame_height: int,
    policy: PlacementPolicy,
) -> PlacementResult:
    """Compute target size and anchor offset for the configured fit mode."""
    _require_positive("subject", subject_width, subject_height)
    _require_positive("frame", frame_width, frame_height)

    if policy.mode is FitMode.STRETCH_FILL:
        return PlacementResult(
            target_width=frame_width, target_height=frame_height, left=0, top=0
        )
    if policy.mode is FitMode.CONTAIN_CENTER_BOTTOM:
        scale = min(frame_width / subject_width, frame_height / subject_height)
        if policy.max_scale is not None:
            scale = min(scale, policy.max_scale)
        return _center_bottom(
            subject_width * scale,
            subject_height * scale,
            frame_width,
            frame_height,
            policy.bottom_margin,
        )
    if policy.mode is FitMode.TARGET_HEIGHT_FRACTION:
        target_height = frame_height * policy.height_fraction
        target_width = target_height * subject_width / subject_height
        return _center_bottom(
            target_width,
            target_height,
            frame_width,
            frame_height,
            policy.bottom_margin,
        )
    if policy.mode is FitMode.BOUNDED_UPSCALE_CENTER:
        return _bounded_upscale(
            subject_width, subject_height, frame_width, frame_height, policy
        )
    raise ValueError(f"Unsupported fit mode: {policy.mode}")


def _center_bottom(
    target_width: float,
    target_height: float,
    frame_width: int,
    frame_height: int,
    bottom_margin: float,
) -> PlacementResult:
    width, height = _round_size(target_width, target_height)
    left = (frame_width - width) / 2
    top = frame_height - height - bottom_margin * frame_height
    return _place(width, height, left, top)


def _bounded_upscale(
    subject_width: int,
    subject_height: int,
    frame_width: int,
    frame_height: int,
    policy: PlacementPolicy,
) -> PlacementResult:
    aspect = subject_width / subject_height
    target_width = min(
        policy.max_width_fraction * frame_width,
        subject_width * policy.upscale_factor,
    )
    target_height = target_width / aspect
    max_height = policy.max_height_fraction * frame_height
    if target_height > max_height:
        target_height = max_height
        target_width = target_height * aspect
    width, height = _round_size(target_width, target_height)
    left = (frame_width - width) / 2
    top = frame_height / 2 - height * policy.vertical_bias
    return _place(width, height, left, top)


def _round_size(target_width: float, target_height: float) -> tuple[int, int]:
    return max(1, _round_px(target_width)), max(1, _round_px(target_height))


def _place(width: int, height: int, left: float, top: float) -> PlacementResult:
    return PlacementResult(
        target_width=width,
        target_height=height,
        left=max(0, _round_px(left)),
        top=max(0, _round_px(top)),
    )


def _round_px(value: float) -> int:
    return math.floor(value + 0.5)


def _require_positive(label: str, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"Invalid {label} dimensions: {width}x{height}"
        )
