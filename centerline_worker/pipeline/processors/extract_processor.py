"""
EXTRACT processor - Collect line geometry of one layer and build segments.
"""

import time
from typing import Any, Dict, List

from .base_processor import BaseProcessor
from .line_utils import build_line_segments


class ExtractProcessor(BaseProcessor):
    """Processor for extracting line segments from the selected layer."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Extract LINE / POLYLINE entities of the layer and turn them into segments."""
        self.log_info("Starting line extraction")

        start_time = time.time()

        drawing_data = pipeline_data['drawing']
        layer_name = pipeline_data['layer_name']

        extracted_entities = {
            'lines': [],
            'polylines': []
        }

        for layer_data in drawing_data.get('Layers', []):
            if layer_data.get('LayerName', '') != layer_name:
                continue

            for line in layer_data.get('Lines', []):
                extracted_entities['lines'].append({
                    'layer_name': layer_name,
                    'entity_type': 'LINE',
                    'data': line
                })

            for polyline in layer_data.get('Polylines', []):
                extracted_entities['polylines'].append({
                    'layer_name': layer_name,
                    'entity_type': 'POLYLINE',
                    'data': polyline
                })

        all_entities: List[Dict[str, Any]] = []
        all_entities.extend(extracted_entities['lines'])
        all_entities.extend(extracted_entities['polylines'])

        segments, rejection_stats = build_line_segments(
            all_entities, self.thresholds.min_line_length
        )

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            total_lines=len(extracted_entities['lines']),
            total_polylines=len(extracted_entities['polylines']),
            segments=len(segments),
            rejected_short=rejection_stats['rejected_short'],
            rejected_invalid=rejection_stats['rejected_invalid'],
            min_line_length=self.thresholds.min_line_length
        )

        self.log_info(
            "Line extraction completed",
            total_lines=len(extracted_entities['lines']),
            total_polylines=len(extracted_entities['polylines']),
            segments=len(segments),
            rejected_short=rejection_stats['rejected_short'],
            rejected_invalid=rejection_stats['rejected_invalid'],
            duration_ms=duration_ms
        )

        return {
            'entities': extracted_entities,
            'segments': segments,
            'rejection_stats': rejection_stats,
            'totals': {
                'lines': len(extracted_entities['lines']),
                'polylines': len(extracted_entities['polylines']),
                'segments': len(segments)
            }
        }
