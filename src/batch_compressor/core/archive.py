from __future__ import annotations

import time
import zipfile
from io import BytesIO

from batch_compressor.core.models import BatchReport, TransformResult
from batch_compressor.core.naming import dedupe_names
from batch_compressor.core.validation import detect_name_conflicts
from batch_compressor.errors import EmptyArchive
from batch_compressor.logger import get_logger

ARCHIVE_COMPRESSION = zipfile.ZIP_DEFLATED
# Fixed deflate level for every archive entry
ARCHIVE_COMPRESSION_LEVEL = 6
ARCHIVE_PREFIX = "compressed_images"

log = get_logger("archive")


def _qualifying(report: BatchReport) -> list[TransformResult]:
    return [result for result in report if result.success and result.output_bytes is not None]


def unique_entry_names(results: list[TransformResult]) -> list[str]:
    names = [result.output_name or result.source_name for result in results]
    conflicts = detect_name_conflicts(names)
    if conflicts.has_conflicts:
        log.info("Renaming duplicate archive entries: %s", ", ".join(conflicts.duplicate_names))
    return dedupe_names(names)


def build_archive(report: BatchReport) -> bytes:
    entries = _qualifying(report)
    if not entries:
        raise EmptyArchive("nothing to archive: no successfully transformed images")

    buffer = BytesIO()
    with zipfile.ZipFile(
        buffer,
        "w",
        compression=ARCHIVE_COMPRESSION,
        compresslevel=ARCHIVE_COMPRESSION_LEVEL,
    ) as archive:
        for name, result in zip(unique_entry_names(entries), entries):
            archive.writestr(name, result.output_bytes)

    log.info("Archived %d of %d result(s)", len(entries), len(report))
    return buffer.getvalue()


def default_archive_name(now: float | None = None) -> str:
    timestamp = time.time() if now is None else now
    return f"{ARCHIVE_PREFIX}_{int(timestamp * 1000)}.zip"


def deliver(report: BatchReport, now: float | None = None) -> tuple[str, bytes]:
    """Pick the download payload: the raw output for a single success, otherwise a zip."""
    entries = _qualifying(report)
    if not entries:
        raise EmptyArchive("nothing to archive: no successfully transformed images")
    if len(entries) == 1:
        single = entries[0]
        return single.output_name or single.source_name, single.output_bytes or b""
    return default_archive_name(now), build_archive(report)
