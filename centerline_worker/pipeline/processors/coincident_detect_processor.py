"""
COINCIDENT_DETECT processor - Group segment endpoints that share a location.
"""

import time
from collections import defaultdict
from typing import Any, Dict, List

from .base_processor import BaseProcessor
from .geometry import LineSegment, PointKey, quantize
from .models import CoincidentGroup, CoincidentMember, EndpointRole


def find_coincident_groups(segments: List[LineSegment], tolerance: float) -> List[CoincidentGroup]:
    """
    Group endpoints by quantized key; keys shared by more than one endpoint
    are reported in first-seen order.
    """
    point_map: Dict[PointKey, List[CoincidentMember]] = defaultdict(list)
    for idx, segment in enumerate(segments):
        point_map[quantize(segment.start, tolerance)].append(
            CoincidentMember(idx, EndpointRole.START, segment.start))
        point_map[quantize(segment.end, tolerance)].append(
            CoincidentMember(idx, EndpointRole.END, segment.end))

    return [
        CoincidentGroup(key=key, members=members)
        for key, members in point_map.items()
        if len(members) > 1
    ]


class CoincidentDetectProcessor(BaseProcessor):
    """Processor for finding coincident endpoints."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting coincident point detection")
        start_time = time.time()

        segments = pipeline_data.get('extract_results', {}).get('segments', [])
        groups = find_coincident_groups(segments, self.thresholds.point_tolerance)
        coincident_endpoints = sum(len(group.members) for group in groups)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            segments=len(segments),
            coincident_points=len(groups),
            coincident_endpoints=coincident_endpoints,
            point_tolerance=self.thresholds.point_tolerance
        )
        self.log_info(
            "Coincident point detection completed",
            segments=len(segments),
            coincident_points=len(groups),
            coincident_endpoints=coincident_endpoints,
            duration_ms=duration_ms
        )

        return {
            'groups': groups,
            'totals': {
                'coincident_points': len(groups),
                'coincident_endpoints': coincident_endpoints
            }
        }
