from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from numbers import Real
from typing import Iterable

from batch_compressor.core.models import OutputFormat, TransformConfig
from batch_compressor.errors import InvalidConfig


@dataclass(slots=True)
class NameConflicts:
    duplicate_names: list[str]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.duplicate_names)


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: TransformConfig) -> TransformConfig:
    if not isinstance(config, TransformConfig):
        raise InvalidConfig(f"Expected TransformConfig, got {type(config).__name__}")

    if not isinstance(config.format, OutputFormat):
        raise InvalidConfig(f"Unsupported format: {config.format!r}")

    quality = config.quality
    if isinstance(quality, bool) or not isinstance(quality, Real) or not 0 <= quality <= 1:
        raise InvalidConfig(f"quality must be within [0, 1], got {quality!r}")

    if not isinstance(config.maintain_aspect_ratio, bool) or not isinstance(config.preserve_dimensions, bool):
        raise InvalidConfig("maintain_aspect_ratio and preserve_dimensions must be booleans")

    if not config.preserve_dimensions:
        if not _is_positive_int(config.max_width):
            raise InvalidConfig(f"max_width must be a positive integer, got {config.max_width!r}")
        if not _is_positive_int(config.max_height):
            raise InvalidConfig(f"max_height must be a positive integer, got {config.max_height!r}")

    return config


def detect_name_conflicts(names: Iterable[str]) -> NameConflicts:
    counts = Counter(names)
    return NameConflicts(duplicate_names=[name for name, count in counts.items() if count > 1])
