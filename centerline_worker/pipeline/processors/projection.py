"""
Scalar projection onto a bounded line and overlap length between segments.
"""

from typing import Tuple

from .geometry import LineSegment, Point3, _add3, _dot3, _scale3, _sub3, points_distance
from .pairing_constants import (
    COINCIDENT_OVERLAP_M,
    COINCIDENT_THRESHOLD_M,
    OVERLAP_FLOOR_M,
    PROJECTION_EPS,
)


def project(point: Point3, line_start: Point3, line_end: Point3) -> Tuple[float, Point3]:
    """
    Project point onto the line through line_start and line_end.

    Returns (t, projected_point) with t clamped to [0, 1], t=0 at line_start.
    A zero-length basis yields (0.0, line_start).
    """
    line_vec = _sub3(line_end, line_start)
    len_sq = _dot3(line_vec, line_vec)
    if len_sq < PROJECTION_EPS:
        return 0.0, line_start
    t = _dot3(_sub3(point, line_start), line_vec) / len_sq
    t = max(0.0, min(1.0, t))
    return t, _add3(line_start, _scale3(line_vec, t))


def overlap_range(line1: LineSegment, line2: LineSegment) -> Tuple[float, float]:
    """Parameter range [s, e] of line1 covered by the projection of line2."""
    t_a, _ = project(line2.start, line1.start, line1.end)
    t_b, _ = project(line2.end, line1.start, line1.end)
    s = max(0.0, min(t_a, t_b))
    e = min(1.0, max(t_a, t_b))
    return s, e


def overlap_length(
    line1: LineSegment,
    line2: LineSegment,
    coincident_threshold: float = COINCIDENT_THRESHOLD_M,
    overlap_floor: float = OVERLAP_FLOOR_M,
    coincident_overlap: float = COINCIDENT_OVERLAP_M,
) -> float:
    """
    Length of line1 covered by line2, measured in line1's parameter space.

    When the true overlap is below overlap_floor but the segments touch end
    to start (either way round, within coincident_threshold), the nominal
    coincident_overlap is returned instead so touching runs are not rejected.
    """
    s, e = overlap_range(line1, line2)
    overlap = (e - s) * points_distance(line1.end, line1.start)

    if overlap < overlap_floor:
        if (points_distance(line1.end, line2.start) < coincident_threshold
                or points_distance(line2.end, line1.start) < coincident_threshold):
            return coincident_overlap

    return max(0.0, overlap)
