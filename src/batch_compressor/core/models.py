from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from pathlib import Path
from typing import Iterator


class OutputFormat(Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def pillow_format(self) -> str:
        return self.name

    @property
    def is_lossy(self) -> bool:
        return self is not OutputFormat.PNG

    @classmethod
    def parse(cls, value: OutputFormat | str) -> OutputFormat:
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower(), member.extension):
                return member
        raise ValueError(f"Unsupported output format: {value!r}")


_EXTENSIONS = {
    OutputFormat.JPEG: "jpg",
    OutputFormat.PNG: "png",
    OutputFormat.WEBP: "webp",
}


@dataclass(slots=True, frozen=True)
class TransformConfig:
    max_width: int = 800
    max_height: int = 800
    quality: float = 0.8
    format: OutputFormat = OutputFormat.JPEG
    maintain_aspect_ratio: bool = True
    preserve_dimensions: bool = False


@dataclass(slots=True, frozen=True)
class SourceImage:
    identifier: str
    data: bytes = field(repr=False)
    original_byte_size: int
    original_width: int | None = None
    original_height: int | None = None

    @classmethod
    def from_bytes(cls, identifier: str, data: bytes) -> SourceImage:
        return cls(identifier=identifier, data=bytes(data), original_byte_size=len(data))

    @classmethod
    def from_path(cls, path: Path | str) -> SourceImage:
        source_path = Path(path)
        return cls.from_bytes(source_path.name, source_path.read_bytes())


def compression_ratio_percent(original_byte_size: int, output_byte_size: int) -> float:
    """Percent saved relative to the original, one decimal, negative when the output grew."""
    if original_byte_size <= 0:
        return 0.0
    ratio = (1 - output_byte_size / original_byte_size) * 100
    return float(Decimal(repr(ratio)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(slots=True, frozen=True)
class Stats:
    original_width: int
    original_height: int
    width: int
    height: int
    original_byte_size: int
    output_byte_size: int
    format: OutputFormat
    quality: float
    compression_ratio_percent: float

    @classmethod
    def compute(
        cls,
        original_size: tuple[int, int],
        target_size: tuple[int, int],
        original_byte_size: int,
        output_byte_size: int,
        config: TransformConfig,
    ) -> Stats:
        return cls(
            original_width=original_size[0],
            original_height=original_size[1],
            width=target_size[0],
            height=target_size[1],
            original_byte_size=original_byte_size,
            output_byte_size=output_byte_size,
            format=config.format,
            quality=config.quality,
            compression_ratio_percent=compression_ratio_percent(original_byte_size, output_byte_size),
        )

    @property
    def bytes_saved(self) -> int:
        return self.original_byte_size - self.output_byte_size


@dataclass(slots=True, frozen=True)
class TransformResult:
    success: bool
    source_name: str
    output_bytes: bytes | None = field(default=None, repr=False)
    output_name: str | None = None
    stats: Stats | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success:
            if self.output_bytes is None or self.stats is None or self.error is not None:
                raise ValueError("successful result needs output bytes and stats and no error")
        elif self.error is None or self.output_bytes is not None or self.stats is not None:
            raise ValueError("failed result needs an error and no output")

    @classmethod
    def ok(cls, source_name: str, output_bytes: bytes, output_name: str, stats: Stats) -> TransformResult:
        return cls(
            success=True,
            source_name=source_name,
            output_bytes=output_bytes,
            output_name=output_name,
            stats=stats,
        )

    @classmethod
    def failed(cls, source_name: str, error: str) -> TransformResult:
        return cls(success=False, source_name=source_name, error=error)


@dataclass(slots=True, frozen=True)
class BatchReport:
    results: tuple[TransformResult, ...]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[TransformResult]:
        return iter(self.results)

    def __getitem__(self, index: int) -> TransformResult:
        return self.results[index]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successes(self) -> list[TransformResult]:
        return [result for result in self.results if result.success]

    @property
    def failures(self) -> list[TransformResult]:
        return [result for result in self.results if not result.success]

    @property
    def succeeded(self) -> int:
        return len(self.successes)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def input_total_bytes(self) -> int:
        return sum(result.stats.original_byte_size for result in self.results if result.stats)

    @property
    def output_total_bytes(self) -> int:
        return sum(result.stats.output_byte_size for result in self.results if result.stats)

    @property
    def bytes_saved(self) -> int:
        return self.input_total_bytes - self.output_total_bytes

    @property
    def compression_rate_percent(self) -> float:
        if self.input_total_bytes <= 0:
            return 0.0
        return (self.bytes_saved / self.input_total_bytes) * 100
