"""Rectangle normalisation and point/millimetre conversion."""

from __future__ import annotations

import math
from typing import Sequence

from .models import FieldGeometry

MM_PER_POINT = 0.352777778


def round2(value: float) -> float:
    """Round half-up to 2 decimals.

    Matches ``Math.round(v * 100) / 100`` so catalogs produced by older tooling
    compare equal.
    """
    return math.floor(value * 100 + 0.5) / 100


def pt_to_mm(value: float) -> float:
    return round2(value * MM_PER_POINT)


def normalize_rect(rect: Sequence[float]) -> tuple[float, float, float, float]:
    """Return ``(x, y, width, height)`` for a PDF rectangle given in any corner order."""
    if len(rect) != 4:
        raise ValueError(f"Expected 4 coordinates, got {len(rect)}")
    x0, y0, x1, y1 = (float(v) for v in rect)
    return min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0)


def geometry_from_rect(rect: Sequence[float]) -> FieldGeometry:
    x, y, width, height = normalize_rect(rect)
    return FieldGeometry(
        x_pt=round2(x),
        y_pt=round2(y),
        w_pt=round2(width),
        h_pt=round2(height),
        rect_pt=(round2(x), round2(y), round2(x + width), round2(y + height)),
        x_mm=pt_to_mm(x),
        y_mm=pt_to_mm(y),
        w_mm=pt_to_mm(width),
        h_mm=pt_to_mm(height),
    )


__all__ = ["MM_PER_POINT", "geometry_from_rect", "normalize_rect", "pt_to_mm", "round2"]
