from __future__ import annotations

import base64
import struct
from io import BytesIO
from typing import Any

from PIL import Image, ImageOps

from batch_compressor.core.models import OutputFormat, SourceImage, Stats, TransformConfig, TransformResult
from batch_compressor.core.naming import derive_output_name
from batch_compressor.core.planner import plan_dimensions, round_half_up
from batch_compressor.core.validation import validate_config
from batch_compressor.errors import DecodeError, EncodeError
from batch_compressor.logger import get_logger

log = get_logger("transformer")

RESAMPLE_FILTER = Image.Resampling.LANCZOS
JPEG_BACKGROUND = (255, 255, 255)
WEBP_METHOD = 6

# Malformed EXIF surfaces from exif_transpose as KeyError, TypeError or struct.error
_DECODE_ERRORS = (
    OSError,
    ValueError,
    SyntaxError,
    KeyError,
    TypeError,
    struct.error,
    Image.DecompressionBombError,
)
_ENCODE_ERRORS = (OSError, ValueError, KeyError)


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA", "RGBa", "La") or "transparency" in image.info


class ImageTransformer:
    def transform(self, image: SourceImage, config: TransformConfig, position: int = 1) -> TransformResult:
        validate_config(config)

        try:
            decoded = self._decode(image.data)
        except DecodeError as error:
            log.debug("Decode failed for %s: %s", image.identifier, error.__cause__ or error)
            return TransformResult.failed(image.identifier, "decode failed")

        original_size = decoded.size
        target_size = plan_dimensions(original_size[0], original_size[1], config)

        try:
            surface = self._resample(decoded, target_size)
            output_bytes = self._encode(surface, config)
        except EncodeError as error:
            log.debug("Encode failed for %s: %s", image.identifier, error)
            return TransformResult.failed(image.identifier, f"encode failed: {error}")
        finally:
            decoded.close()

        stats = Stats.compute(
            original_size=original_size,
            target_size=target_size,
            original_byte_size=image.original_byte_size,
            output_byte_size=len(output_bytes),
            config=config,
        )
        output_name = derive_output_name(image.identifier, config.format, position)
        log.debug(
            "%s: %dx%d -> %dx%d, %d -> %d bytes",
            image.identifier,
            original_size[0],
            original_size[1],
            target_size[0],
            target_size[1],
            stats.original_byte_size,
            stats.output_byte_size,
        )
        return TransformResult.ok(image.identifier, output_bytes, output_name, stats)

    def _decode(self, data: bytes) -> Image.Image:
        try:
            with Image.open(BytesIO(data)) as opened:
                opened.load()
                return ImageOps.exif_transpose(opened)
        except _DECODE_ERRORS as error:
            raise DecodeError("decode failed") from error

    def _normalize_mode(self, image: Image.Image) -> Image.Image:
        # Palette and bilevel images would fall back to nearest-neighbour resampling
        if _has_alpha(image):
            return image.convert("RGBA") if image.mode != "RGBA" else image
        if image.mode in ("RGB", "L"):
            return image
        return image.convert("RGB")

    def _resample(self, image: Image.Image, target_size: tuple[int, int]) -> Image.Image:
        try:
            surface = self._normalize_mode(image)
            if surface.size == target_size:
                return surface
            return surface.resize(target_size, RESAMPLE_FILTER)
        except (OSError, ValueError) as error:
            raise EncodeError(f"resample to {target_size[0]}x{target_size[1]}: {error}") from error

    def _encode(self, image: Image.Image, config: TransformConfig) -> bytes:
        output_format = config.format
        params: dict[str, Any] = {"format": output_format.pillow_format}

        if output_format is OutputFormat.JPEG:
            image = self._flatten(image)
        if output_format.is_lossy:
            params["quality"] = round_half_up(config.quality * 100)
        if output_format is OutputFormat.WEBP:
            params["method"] = WEBP_METHOD
        if output_format is OutputFormat.PNG:
            params["optimize"] = True

        buffer = BytesIO()
        try:
            image.save(buffer, **params)
        except _ENCODE_ERRORS as error:
            raise EncodeError(f"{output_format.name}: {error}") from error
        return buffer.getvalue()

    def _flatten(self, image: Image.Image) -> Image.Image:
        if image.mode == "RGBA":
            base = Image.new("RGB", image.size, JPEG_BACKGROUND)
            base.paste(image, mask=image.getchannel("A"))
            return base
        return image


def to_data_url(result: TransformResult) -> str:
    if not result.success or result.output_bytes is None or result.stats is None:
        raise ValueError(f"No output for {result.source_name}: {result.error}")
    payload = base64.b64encode(result.output_bytes).decode("ascii")
    return f"data:{result.stats.format.mime_type};base64,{payload}"
