"""
3D vector helpers, the LineSegment model and endpoint quantization.

Points are plain (x, y, z) float tuples. 2D drawings carry z = 0.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .pairing_constants import FALLBACK_PRECISION

Point3 = Tuple[float, float, float]
PointKey = Tuple[float, float, float]


def _add3(a: Point3, b: Point3) -> Point3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _sub3(a: Point3, b: Point3) -> Point3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale3(a: Point3, k: float) -> Point3:
    return (a[0] * k, a[1] * k, a[2] * k)


def _dot3(a: Point3, b: Point3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross3(a: Point3, b: Point3) -> Point3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length3(a: Point3) -> float:
    return math.sqrt(_dot3(a, a))


def _normalize3(a: Point3) -> Point3:
    """Normalize 3D vector; returns (0,0,0) if length is zero."""
    length = _length3(a)
    if length <= 0:
        return (0.0, 0.0, 0.0)
    return (a[0] / length, a[1] / length, a[2] / length)


def _midpoint3(a: Point3, b: Point3) -> Point3:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0, (a[2] + b[2]) / 2.0)


def points_distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points."""
    return _length3(_sub3(a, b))


def is_finite_point(point: Point3) -> bool:
    return all(math.isfinite(c) for c in point)


def key_precision(tolerance: float) -> int:
    """Decimal places used to quantize points for a given tolerance."""
    if tolerance <= 0:
        return FALLBACK_PRECISION
    return max(0, int(round(-math.log10(tolerance))))


def key_cell_size(tolerance: float) -> float:
    """Edge length of the rounding cell behind quantize()."""
    return 10.0 ** -key_precision(tolerance)


def quantize(point: Point3, tolerance: float) -> PointKey:
    """
    Round a point to a grouping key.

    Keys are only ever compared for equality; -0.0 is folded into 0.0 so a
    point nudged just below zero still lands on the same key.
    """
    precision = key_precision(tolerance)
    return (
        round(point[0], precision) + 0.0,
        round(point[1], precision) + 0.0,
        round(point[2], precision) + 0.0,
    )


@dataclass(frozen=True)
class LineSegment:
    """Bounded straight line with its unit direction and length."""

    start: Point3
    end: Point3
    direction: Point3
    length: float

    @classmethod
    def from_points(cls, start: Point3, end: Point3,
                    min_length: float = 0.0) -> Optional["LineSegment"]:
        """Build a segment; returns None for non-finite or too-short input."""
        start = (float(start[0]), float(start[1]), float(start[2]))
        end = (float(end[0]), float(end[1]), float(end[2]))
        if not (is_finite_point(start) and is_finite_point(end)):
            return None
        vec = _sub3(end, start)
        length = _length3(vec)
        if length <= 0 or length < min_length:
            return None
        return cls(start=start, end=end, direction=_scale3(vec, 1.0 / length), length=length)

    def point_at(self, t: float) -> Point3:
        """Point at parameter t, where t=0 is start and t=1 is end."""
        return _add3(self.start, _scale3(_sub3(self.end, self.start), t))

    def with_endpoints(self, start: Point3, end: Point3) -> "LineSegment":
        """Rebuild the segment from moved endpoints."""
        segment = LineSegment.from_points(start, end)
        if segment is None:
            raise ValueError(f"Degenerate segment {start} -> {end}")
        return segment
