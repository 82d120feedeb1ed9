import itertools

import pytest

from batch_compressor.core.models import TransformConfig
from batch_compressor.core.planner import plan_dimensions, round_half_up

BOX_800 = TransformConfig(max_width=800, max_height=800, maintain_aspect_ratio=True)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        ((2000, 1000), (800, 400)),
        ((1000, 2000), (400, 800)),
        ((500, 500), (500, 500)),
        ((800, 800), (800, 800)),
        ((1600, 1600), (800, 800)),
    ],
)
def test_aspect_clamp_examples(size, expected):
    assert plan_dimensions(*size, BOX_800) == expected


def test_preserve_dimensions_ignores_bounds():
    config = TransformConfig(max_width=10, max_height=10, preserve_dimensions=True)
    assert plan_dimensions(4000, 3000, config) == (4000, 3000)
    assert plan_dimensions(1, 1, config) == (1, 1)


def test_independent_clamp_may_distort():
    config = TransformConfig(max_width=800, max_height=600, maintain_aspect_ratio=False)
    assert plan_dimensions(2000, 1000, config) == (800, 600)
    assert plan_dimensions(700, 1000, config) == (700, 600)
    assert plan_dimensions(300, 200, config) == (300, 200)


def test_landscape_second_pass_reclamps_height():
    config = TransformConfig(max_width=800, max_height=400)
    # 800 wide would need 720 rows, so height binds instead
    assert plan_dimensions(1000, 900, config) == (444, 400)


def test_portrait_second_pass_reclamps_width():
    config = TransformConfig(max_width=400, max_height=800)
    assert plan_dimensions(900, 1000, config) == (400, 444)


def test_extreme_ratio_never_reaches_zero():
    config = TransformConfig(max_width=100, max_height=100)
    assert plan_dimensions(10000, 1, config) == (100, 1)
    assert plan_dimensions(1, 10000, config) == (1, 100)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2


def test_aspect_clamp_properties():
    sizes = [1, 3, 17, 250, 799, 800, 801, 1333, 4096]
    boxes = [(1, 1), (100, 300), (640, 480), (800, 800), (1920, 1080)]
    for (width, height), (max_width, max_height) in itertools.product(itertools.product(sizes, sizes), boxes):
        config = TransformConfig(max_width=max_width, max_height=max_height)
        new_width, new_height = plan_dimensions(width, height, config)

        assert 1 <= new_width <= max(1, min(width, max_width))
        assert 1 <= new_height <= max(1, min(height, max_height))

        if width <= max_width and height <= max_height:
            assert (new_width, new_height) == (width, height)
        elif min(new_width, new_height) >= 10:
            # one pixel of rounding on the shorter side bounds the ratio drift
            tolerance = (width / height) * (1 / min(new_width, new_height)) * 1.5
            assert abs(new_width / new_height - width / height) <= tolerance
