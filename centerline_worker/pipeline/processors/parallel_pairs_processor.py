"""
PARALLEL_PAIRS processor - Match segments that form the two edges of a run.

Every unordered pair (i, j), i < j, is tested in order:

1. alignment: abs(dot(d_i, d_j)) >= parallel_threshold (either orientation)
2. separation: |cross(start_j - start_i, d_i)| within [min_distance, max_distance]
3. overlap: overlap_length >= min_overlap, or end_i touches start_j

No ranking or deduplication is done; one segment may sit in several pairs.
"""

import time
from typing import Any, Dict, List, Optional

from ...config import PairingThresholds
from .base_processor import BaseProcessor
from .geometry import LineSegment, _cross3, _dot3, _length3, _sub3, points_distance
from .models import ParallelPair
from .projection import overlap_length


def alignment(line1: LineSegment, line2: LineSegment) -> float:
    """abs of the direction dot product; 1.0 for parallel or anti-parallel."""
    return abs(_dot3(line1.direction, line2.direction))


def perpendicular_distance(line1: LineSegment, line2: LineSegment) -> float:
    """Distance from line2's start to the infinite line through line1."""
    return _length3(_cross3(_sub3(line2.start, line1.start), line1.direction))


def match_pair(line1: LineSegment, line2: LineSegment, thresholds: PairingThresholds,
               line1_index: int = -1, line2_index: int = -1) -> Optional[ParallelPair]:
    """Run the three acceptance tests on one ordered pair."""
    dot = alignment(line1, line2)
    if dot < thresholds.parallel_threshold:
        return None

    distance = perpendicular_distance(line1, line2)
    if distance < thresholds.min_distance or distance > thresholds.max_distance:
        return None

    overlap = overlap_length(
        line1,
        line2,
        coincident_threshold=thresholds.coincident_threshold,
        overlap_floor=thresholds.overlap_floor,
        coincident_overlap=thresholds.coincident_overlap,
    )
    is_coincident = points_distance(line1.end, line2.start) < thresholds.coincident_threshold
    if not is_coincident and overlap < thresholds.min_overlap:
        return None

    return ParallelPair(
        line1=line1,
        line2=line2,
        perpendicular_distance=distance,
        overlap_length=overlap,
        alignment=dot,
        is_coincident=is_coincident,
        line1_index=line1_index,
        line2_index=line2_index,
    )


def find_parallel_pairs(segments: List[LineSegment],
                        thresholds: PairingThresholds) -> List[ParallelPair]:
    """All accepted pairs over the segment collection, in (i, j) order."""
    pairs: List[ParallelPair] = []
    n = len(segments)
    for i in range(n):
        for j in range(i + 1, n):
            pair = match_pair(segments[i], segments[j], thresholds,
                              line1_index=i, line2_index=j)
            if pair is not None:
                pairs.append(pair)
    return pairs


class ParallelPairsProcessor(BaseProcessor):
    """Processor for parallel pair detection over the split segments."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting parallel pair detection")
        start_time = time.time()

        segments = pipeline_data.get('coincident_split_results', {}).get('segments', [])
        pairs = find_parallel_pairs(segments, self.thresholds)

        coincident_pairs = sum(1 for pair in pairs if pair.is_coincident)
        avg_distance = 0.0
        if pairs:
            avg_distance = sum(pair.perpendicular_distance for pair in pairs) / len(pairs)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            segments=len(segments),
            total_pairs_checked=len(segments) * (len(segments) - 1) // 2,
            pairs=len(pairs),
            coincident_pairs=coincident_pairs,
            average_distance=avg_distance
        )

        if not pairs:
            self.log_info("No parallel pairs found", segments=len(segments))

        self.log_info(
            "Parallel pair detection completed",
            segments=len(segments),
            pairs=len(pairs),
            coincident_pairs=coincident_pairs,
            average_distance=round(avg_distance, 4),
            duration_ms=duration_ms
        )

        return {
            'pairs': pairs,
            'algorithm_config': {
                'parallel_threshold': self.thresholds.parallel_threshold,
                'min_distance': self.thresholds.min_distance,
                'max_distance': self.thresholds.max_distance,
                'min_overlap': self.thresholds.min_overlap,
                'coincident_threshold': self.thresholds.coincident_threshold
            },
            'totals': {
                'pairs': len(pairs),
                'coincident_pairs': coincident_pairs
            }
        }
