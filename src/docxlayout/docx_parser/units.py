"""Length conversions from OOXML units to display pixels."""

from __future__ import annotations

from typing import Optional, Union

PX_PER_INCH = 96
TWIPS_PER_INCH = 1440
EMU_PER_INCH = 914400

Number = Union[int, float]


def twips_to_px(twips: Number) -> float:
    """Convert twips (1/20 pt) to pixels at 96 DPI."""
    return twips * PX_PER_INCH / TWIPS_PER_INCH


def emu_to_px(emu: Number) -> float:
    """Convert English Metric Units to pixels at 96 DPI."""
    return emu / EMU_PER_INCH * PX_PER_INCH


def parse_length(value: Optional[str]) -> Optional[int]:
    """Parse an integer length attribute, tolerating a trailing unit-less float.

    Returns None for missing, unparseable or non-finite values.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        # non-finite, e.g. "inf" or "1e999"
        return None
