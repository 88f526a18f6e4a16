"""
Records passed between pipeline stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple

from .geometry import LineSegment, Point3, PointKey, points_distance


class EndpointRole(str, Enum):
    START = "START"
    END = "END"


class CoincidentMember(NamedTuple):
    segment_index: int
    role: EndpointRole
    point: Point3


@dataclass
class CoincidentGroup:
    """Endpoints of several segments that quantize to the same key."""

    key: PointKey
    members: List[CoincidentMember] = field(default_factory=list)


@dataclass(frozen=True)
class ParallelPair:
    line1: LineSegment
    line2: LineSegment
    perpendicular_distance: float
    overlap_length: float
    alignment: float
    is_coincident: bool
    line1_index: int = -1
    line2_index: int = -1


@dataclass(frozen=True)
class Centerline:
    """Bounded midline of a pair; width is the pair's separation."""

    start: Point3
    end: Point3
    width: float

    @property
    def length(self) -> float:
        return points_distance(self.start, self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Start": _point_dict(self.start),
            "End": _point_dict(self.end),
            "Width": self.width,
            "Length": self.length,
        }


def _point_dict(point: Point3) -> Dict[str, float]:
    return {"X": float(point[0]), "Y": float(point[1]), "Z": float(point[2])}


def segment_to_dict(segment: LineSegment) -> Dict[str, Any]:
    return {
        "Start": _point_dict(segment.start),
        "End": _point_dict(segment.end),
        "Length": segment.length,
    }
