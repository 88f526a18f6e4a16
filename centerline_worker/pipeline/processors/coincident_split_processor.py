"""
COINCIDENT_SPLIT processor - Push coincident endpoints apart along their segments.

Every member of a coincident group is moved outward along its own segment
(END forward, START backward) by split_epsilon. While the moved point still
quantizes onto a key that is already taken, the push grows in further
epsilon steps, up to twice the quantization cell. Groups are visited in key
order and members longest segment first, so the result does not depend on
the order of the input entities. The input collection is never modified; a
new list is returned.
"""

import math
import time
from typing import Any, Dict, List, Optional, Set, Tuple

from .base_processor import BaseProcessor
from .geometry import (
    LineSegment,
    Point3,
    PointKey,
    _add3,
    _scale3,
    key_cell_size,
    quantize,
)
from .models import CoincidentGroup, CoincidentMember, EndpointRole


def _max_split_steps(epsilon: float, tolerance: float) -> int:
    return max(1, int(math.ceil(2.0 * key_cell_size(tolerance) / epsilon)))


def _displace(
    member: CoincidentMember,
    direction: Point3,
    epsilon: float,
    tolerance: float,
    claimed: Set[PointKey],
    pending: Set[PointKey],
    max_steps: int,
) -> Tuple[Point3, PointKey, Optional[int]]:
    """Moved point, its key and the step count used (None when no free key was found)."""
    sign = 1.0 if member.role == EndpointRole.END else -1.0
    for step in range(1, max_steps + 1):
        candidate = _add3(member.point, _scale3(direction, sign * epsilon * step))
        key = quantize(candidate, tolerance)
        if key not in claimed and key not in pending:
            return candidate, key, step
    candidate = _add3(member.point, _scale3(direction, sign * epsilon))
    return candidate, quantize(candidate, tolerance), None


def _member_order(segments: List[LineSegment], member: CoincidentMember):
    """Longest segment first; ties fall back to role, direction and point."""
    segment = segments[member.segment_index]
    return (-segment.length, member.role.value, segment.direction, member.point)


def split_coincident_points(
    segments: List[LineSegment],
    groups: List[CoincidentGroup],
    epsilon: float,
    tolerance: float,
) -> Tuple[List[LineSegment], Dict[str, int]]:
    """Return (new segments, stats) with every coincident endpoint pushed apart."""
    stats = {'moved_points': 0, 'extended_points': 0, 'unresolved_points': 0}
    if not groups:
        return list(segments), stats

    starts = [segment.start for segment in segments]
    ends = [segment.end for segment in segments]
    touched: Set[int] = set()

    pending: Set[PointKey] = {group.key for group in groups}
    claimed: Set[PointKey] = set()
    for segment in segments:
        for point in (segment.start, segment.end):
            key = quantize(point, tolerance)
            if key not in pending:
                claimed.add(key)

    max_steps = _max_split_steps(epsilon, tolerance)

    for group in sorted(groups, key=lambda g: g.key):
        pending.discard(group.key)
        members = sorted(group.members, key=lambda m: _member_order(segments, m))
        for member in members:
            direction = segments[member.segment_index].direction
            point, key, steps = _displace(
                member, direction, epsilon, tolerance, claimed, pending, max_steps
            )
            claimed.add(key)

            if member.role == EndpointRole.END:
                ends[member.segment_index] = point
            else:
                starts[member.segment_index] = point
            touched.add(member.segment_index)

            stats['moved_points'] += 1
            if steps is None:
                stats['unresolved_points'] += 1
            elif steps > 1:
                stats['extended_points'] += 1

    split_segments = [
        segment.with_endpoints(starts[idx], ends[idx]) if idx in touched else segment
        for idx, segment in enumerate(segments)
    ]
    return split_segments, stats


class CoincidentSplitProcessor(BaseProcessor):
    """Processor for splitting coincident endpoints before pairing."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting coincident point split")
        start_time = time.time()

        segments = pipeline_data.get('extract_results', {}).get('segments', [])
        groups = pipeline_data.get('coincident_detect_results', {}).get('groups', [])

        split_segments, split_stats = split_coincident_points(
            segments,
            groups,
            self.thresholds.split_epsilon,
            self.thresholds.point_tolerance,
        )

        if split_stats['unresolved_points']:
            self.log_warning(
                "Coincident endpoints could not be separated",
                unresolved_points=split_stats['unresolved_points']
            )

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            split_points=split_stats['moved_points'],
            extended_points=split_stats['extended_points'],
            unresolved_points=split_stats['unresolved_points'],
            split_epsilon=self.thresholds.split_epsilon
        )
        self.log_info(
            "Coincident point split completed",
            split_points=split_stats['moved_points'],
            extended_points=split_stats['extended_points'],
            unresolved_points=split_stats['unresolved_points'],
            duration_ms=duration_ms
        )

        return {
            'segments': split_segments,
            'split_stats': split_stats,
            'totals': {
                'segments': len(split_segments),
                'split_points': split_stats['moved_points']
            }
        }
