"""Tests for the placement solver."""

import pytest

from portrait_booth.domain.errors import InvalidDimensionsError
from portrait_booth.domain.placement import FitMode, PlacementPolicy, PlacementResult
from portrait_booth.services.placement import solve

DIMENSIONS = [
    (400, 800, 720, 1280),
    (1920, 1080, 720, 1280),
    (101, 333, 720, 1280),
    (3000, 4000, 1200, 1800),
    (50, 50, 720, 1280),
    (799, 801, 1080, 1080),
]


def test_target_height_fraction_reference_scenario() -> None:
    policy = PlacementPolicy(mode=FitMode.TARGET_HEIGHT_FRACTION)

    result = solve(400, 800, 720, 1280, policy)

    assert result == PlacementResult(
        target_width=576, target_height=1152, left=72, top=102
    )


@pytest.mark.parametrize(("sw", "sh", "fw", "fh"), DIMENSIONS)
def test_stretch_fill_covers_frame(sw: int, sh: int, fw: int, fh: int) -> None:
    result = solve(sw, sh, fw, fh, PlacementPolicy(mode=FitMode.STRETCH_FILL))

    assert result == PlacementResult(target_width=fw, target_height=fh, left=0, top=0)


@pytest.mark.parametrize(("sw", "sh", "fw", "fh"), DIMENSIONS)
def test_contain_preserves_aspect_and_fits(sw: int, sh: int, fw: int, fh: int) -> None:
    policy = PlacementPolicy(mode=FitMode.CONTAIN_CENTER_BOTTOM, bottom_margin=0.0)

    result = solve(sw, sh, fw, fh, policy)

    aspect = sw / sh
    assert abs(result.target_width - result.target_height * aspect) <= (
        0.5 + 0.5 * aspect
    )
    assert result.top + result.target_height <= fh
    assert result.target_width <= fw
    assert result.left >= 0
    assert result.top >= 0


def test_contain_is_centered_and_bottom_anchored() -> None:
    policy = PlacementPolicy(mode=FitMode.CONTAIN_CENTER_BOTTOM, bottom_margin=0.0)

    result = solve(1000, 1000, 720, 1280, policy)

    assert (result.target_width, result.target_height) == (720, 720)
    assert result.left == 0
    assert result.top == 1280 - 720


def test_contain_max_scale_prevents_upscaling() -> None:
    policy = PlacementPolicy(
        mode=FitMode.CONTAIN_CENTER_BOTTOM, bottom_margin=0.0, max_scale=1.0
    )

    result = solve(100, 200, 720, 1280, policy)

    assert (result.target_width, result.target_height) == (100, 200)
    assert result.left == 310
    assert result.top == 1080


def test_contain_bottom_margin_lifts_subject() -> None:
    policy = PlacementPolicy(mode=FitMode.CONTAIN_CENTER_BOTTOM, max_scale=0.5)

    result = solve(400, 800, 720, 1280, policy)

    assert result.target_height == 400
    assert result.top == round(1280 - 400 - 0.02 * 1280)


@pytest.mark.parametrize(("sw", "sh", "fw", "fh"), DIMENSIONS)
def test_bounded_upscale_respects_height_clamp(
    sw: int, sh: int, fw: int, fh: int
) -> None:
    policy = PlacementPolicy(mode=FitMode.BOUNDED_UPSCALE_CENTER)

    result = solve(sw, sh, fw, fh, policy)

    aspect = sw / sh
    max_height = policy.max_height_fraction * fh
    assert result.target_height <= max_height + 0.5
    assert result.target_width <= max_height * aspect + 0.5
    assert result.target_width <= policy.max_width_fraction * fw + 0.5
    assert result.left >= 0
    assert result.top >= 0


def test_bounded_upscale_caps_upscale_factor() -> None:
    policy = PlacementPolicy(mode=FitMode.BOUNDED_UPSCALE_CENTER)

    result = solve(200, 200, 720, 1280, policy)

    assert (result.target_width, result.target_height) == (340, 340)
    assert result.left == 190
    assert result.top == 521


def test_bounded_upscale_clamps_tall_subject() -> None:
    policy = PlacementPolicy(mode=FitMode.BOUNDED_UPSCALE_CENTER)

    result = solve(400, 1600, 720, 1280, policy)

    assert result.target_height == 1216
    assert result.target_width == 304
    assert result.top == 214


def test_wide_subject_clamps_left_to_zero() -> None:
    policy = PlacementPolicy(mode=FitMode.TARGET_HEIGHT_FRACTION)

    result = solve(2000, 1000, 720, 1280, policy)

    assert result.target_width > 720
    assert result.left == 0


@pytest.mark.parametrize(
    ("sw", "sh", "fw", "fh"),
    [
        (0, 800, 720, 1280),
        (400, 0, 720, 1280),
        (400, 800, 0, 1280),
        (400, 800, 720, -1),
    ],
)
def test_zero_dimensions_are_rejected(sw: int, sh: int, fw: int, fh: int) -> None:
    with pytest.raises(InvalidDimensionsError):
        solve(sw, sh, fw, fh, PlacementPolicy())
