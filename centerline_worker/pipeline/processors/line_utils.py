"""
Shared line-building utilities for pipeline processors.

Turns extracted LINE and POLYLINE entities into LineSegments. This is the
ingestion boundary: malformed or too-short geometry is counted and dropped
here so later stages only ever see well-formed segments.
"""

from typing import Any, Dict, List, Optional, Tuple

from .geometry import LineSegment, Point3, is_finite_point


def _point_from_dict(point: Any) -> Optional[Point3]:
    """Read {'X','Y','Z'} into a tuple; Z defaults to 0. None when malformed."""
    if not isinstance(point, dict) or "X" not in point or "Y" not in point:
        return None
    try:
        return (float(point["X"]), float(point["Y"]), float(point.get("Z", 0.0)))
    except (TypeError, ValueError, OverflowError):
        return None


def _entity_endpoint_pairs(entity: Dict[str, Any]) -> List[Tuple[Any, Any]]:
    """Raw (start, end) pairs of an entity: one for a LINE, one per edge for a POLYLINE."""
    etype = entity.get("entity_type")
    if etype not in ("LINE", "POLYLINE"):
        return []
    data = entity.get("data", {})
    if not isinstance(data, dict):
        # Counted as one invalid segment
        return [(None, None)]
    if etype == "LINE":
        return [(data.get("Start"), data.get("End"))]
    vertices = data.get("Vertices", [])
    if not isinstance(vertices, (list, tuple)):
        return [(None, None)]
    pairs = [(vertices[i], vertices[i + 1]) for i in range(len(vertices) - 1)]
    if data.get("IsClosed", False) and len(vertices) > 2:
        pairs.append((vertices[-1], vertices[0]))
    return pairs


def build_line_segments(
    entities: List[Dict[str, Any]], min_length: float
) -> Tuple[List[LineSegment], Dict[str, int]]:
    """Build segments from LINEs plus each polyline edge; returns (segments, stats)."""
    segments: List[LineSegment] = []
    stats = {"rejected_invalid": 0, "rejected_short": 0}

    for entity in entities:
        for raw_start, raw_end in _entity_endpoint_pairs(entity):
            start = _point_from_dict(raw_start)
            end = _point_from_dict(raw_end)
            if start is None or end is None:
                stats["rejected_invalid"] += 1
                continue
            if not (is_finite_point(start) and is_finite_point(end)):
                stats["rejected_invalid"] += 1
                continue
            segment = LineSegment.from_points(start, end, min_length)
            if segment is None:
                # Zero-length artifacts and stray short strokes
                stats["rejected_short"] += 1
                continue
            segments.append(segment)

    return segments, stats
