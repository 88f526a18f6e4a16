"""
CENTERLINES processor - Midline and width for every matched pair.
"""

import time
from typing import Any, Dict, List

from .base_processor import BaseProcessor
from .geometry import _midpoint3
from .models import Centerline, ParallelPair
from .pairing_constants import CENTERLINE_RANGE_EPS
from .projection import overlap_range, project


def synthesize_centerline(pair: ParallelPair) -> Centerline:
    """
    Midline of the pair, clipped to the span where both edges coexist.

    The span is line1's parameter range covered by line2. A (near) empty span
    only happens for pairs accepted as end-to-end coincident; those use the
    whole of line1.
    """
    line1, line2 = pair.line1, pair.line2
    s, e = overlap_range(line1, line2)
    if e - s <= CENTERLINE_RANGE_EPS:
        s, e = 0.0, 1.0

    start1 = line1.point_at(s)
    end1 = line1.point_at(e)
    _, start2 = project(start1, line2.start, line2.end)
    _, end2 = project(end1, line2.start, line2.end)

    return Centerline(
        start=_midpoint3(start1, start2),
        end=_midpoint3(end1, end2),
        width=pair.perpendicular_distance,
    )


class CenterlineProcessor(BaseProcessor):
    """Processor for centerline synthesis."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting centerline synthesis")
        start_time = time.time()

        pairs: List[ParallelPair] = pipeline_data.get('parallel_pairs_results', {}).get('pairs', [])
        centerlines = [synthesize_centerline(pair) for pair in pairs]

        total_length = sum(centerline.length for centerline in centerlines)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            centerlines=len(centerlines),
            total_length=total_length
        )
        self.log_info(
            "Centerline synthesis completed",
            centerlines=len(centerlines),
            total_length=round(total_length, 4),
            duration_ms=duration_ms
        )

        return {
            'centerlines': centerlines,
            'totals': {
                'centerlines': len(centerlines),
                'total_length': total_length
            }
        }
