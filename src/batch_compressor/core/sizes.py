from __future__ import annotations

_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(byte_count: int) -> str:
    if byte_count < 0:
        raise ValueError("byte_count must be non-negative")
    if byte_count == 0:
        return "0 Bytes"

    value = float(byte_count)
    unit_index = 0

    while value >= 1024 and unit_index < len(_UNITS) - 1:
        value /= 1024
        unit_index += 1

    return f"{round(value, 2):g} {_UNITS[unit_index]}"
