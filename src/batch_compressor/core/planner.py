from __future__ import annotations

import math

from batch_compressor.core.models import TransformConfig


def round_half_up(value: float) -> int:
    """Round a non-negative pixel count, halves going up."""
    return int(math.floor(value + 0.5))


def plan_dimensions(original_width: int, original_height: int, config: TransformConfig) -> tuple[int, int]:
    """Return the target size for an image of the given size.

    Never upscales. With ``preserve_dimensions`` the max bounds are not consulted at all.
    When the aspect ratio is kept, the longer side is clamped first and the other side
    re-clamped if it still overshoots its bound.
    """
    if config.preserve_dimensions:
        return original_width, original_height

    max_width = config.max_width
    max_height = config.max_height

    if not config.maintain_aspect_ratio:
        return min(original_width, max_width), min(original_height, max_height)

    if original_width <= max_width and original_height <= max_height:
        return original_width, original_height

    aspect_ratio = original_width / original_height

    if original_width > original_height:
        new_width = min(original_width, max_width)
        new_height = round_half_up(new_width / aspect_ratio)
        if new_height > max_height:
            new_height = max_height
            new_width = round_half_up(new_height * aspect_ratio)
    else:
        new_height = min(original_height, max_height)
        new_width = round_half_up(new_height * aspect_ratio)
        if new_width > max_width:
            new_width = max_width
            new_height = round_half_up(new_width / aspect_ratio)

    return max(1, new_width), max(1, new_height)
