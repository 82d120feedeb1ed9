from __future__ import annotations

from typing import Iterable

from batch_compressor.core.models import OutputFormat


def split_extension(name: str) -> tuple[str, str]:
    """Split ``name`` into stem and ``.ext``; only the last path segment is considered."""
    head, slash, tail = name.rpartition("/")
    stem, dot, extension = tail.rpartition(".")
    if not dot or not stem or not extension:
        return name, ""
    return f"{head}{slash}{stem}", f".{extension}"


def derive_output_name(identifier: str | None, output_format: OutputFormat, position: int) -> str:
    """Swap the identifier's extension for the one implied by ``output_format``.

    Blank identifiers fall back to ``image_<position>``.
    """
    name = (identifier or "").strip()
    stem = split_extension(name)[0] if name else f"image_{position}"
    return f"{stem}.{output_format.extension}"


def dedupe_names(names: Iterable[str]) -> list[str]:
    """Suffix repeated names with ``-1``, ``-2``… before the extension, in first-seen order."""
    taken: set[str] = set()
    unique: list[str] = []
    for name in names:
        candidate = name
        if candidate in taken:
            stem, extension = split_extension(name)
            counter = 1
            while True:
                candidate = f"{stem}-{counter}{extension}"
                if candidate not in taken:
                    break
                counter += 1
        taken.add(candidate)
        unique.append(candidate)
    return unique
