from __future__ import annotations

from types import MappingProxyType

from batch_compressor.core.models import OutputFormat, TransformConfig
from batch_compressor.errors import InvalidConfig

CUSTOM = "custom"

LOW = TransformConfig(max_width=400, max_height=400, quality=0.6, format=OutputFormat.JPEG)
MEDIUM = TransformConfig(max_width=800, max_height=800, quality=0.7, format=OutputFormat.JPEG)
HIGH = TransformConfig(max_width=1200, max_height=1200, quality=0.85, format=OutputFormat.JPEG)
WEBP = TransformConfig(max_width=1000, max_height=1000, quality=0.8, format=OutputFormat.WEBP)
PNG = TransformConfig(max_width=1200, max_height=1200, quality=0.9, format=OutputFormat.PNG)

PRESETS = MappingProxyType(
    {
        "low": LOW,
        "medium": MEDIUM,
        "high": HIGH,
        "webp": WEBP,
        "png": PNG,
    }
)

DEFAULT_PRESET = "medium"


def get_preset(name: str) -> TransformConfig:
    try:
        return PRESETS[name.strip().lower()]
    except KeyError:
        raise InvalidConfig(f"Unknown preset: {name!r} (expected one of {', '.join(PRESETS)})") from None


def match_preset(config: TransformConfig) -> str:
    for name, preset in PRESETS.items():
        if (
            preset.max_width == config.max_width
            and preset.max_height == config.max_height
            and preset.quality == config.quality
            and preset.format is config.format
        ):
            return name
    return CUSTOM
