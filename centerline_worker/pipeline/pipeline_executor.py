"""
Pipeline executor for the five-stage centerline pipeline of one layer.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from ..config import PairingThresholds
from .processors.extract_processor import ExtractProcessor
from .processors.coincident_detect_processor import CoincidentDetectProcessor
from .processors.coincident_split_processor import CoincidentSplitProcessor
from .processors.parallel_pairs_processor import ParallelPairsProcessor
from .processors.centerline_processor import CenterlineProcessor

logger = structlog.get_logger()


class PipelineExecutor:
    """Executes the centerline pipeline for a single layer, stage by stage."""

    PIPELINE_STEPS = [
        ("EXTRACT", ExtractProcessor),
        ("COINCIDENT_DETECT", CoincidentDetectProcessor),
        ("COINCIDENT_SPLIT", CoincidentSplitProcessor),
        ("PARALLEL_PAIRS", ParallelPairsProcessor),
        ("CENTERLINES", CenterlineProcessor),
    ]

    def __init__(self, job_id: uuid.UUID, layer_name: str,
                 thresholds: Optional[PairingThresholds] = None):
        self.job_id = job_id
        self.layer_name = layer_name
        self.thresholds = thresholds or PairingThresholds()
        self.processors = {}
        self.steps = {}

        # Initialize processors
        for step_name, processor_class in self.PIPELINE_STEPS:
            self.processors[step_name] = processor_class(job_id, self.thresholds, layer_name)

    def execute_pipeline(self, drawing_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute the complete pipeline for the layer.

        Args:
            drawing_data: Drawing export with a 'Layers' list

        Returns:
            Step results keyed by step name
        """
        logger.info(
            "Pipeline execution started",
            job_id=str(self.job_id),
            layer_name=self.layer_name
        )

        self._create_job_steps()

        pipeline_data = {
            'drawing': drawing_data,
            'layer_name': self.layer_name,
        }

        results = {}

        # Stages run strictly in order; each reads only earlier results
        for step_order, (step_name, _) in enumerate(self.PIPELINE_STEPS, 1):
            try:
                step_result = self._execute_step(step_name, step_order, pipeline_data)
            except Exception as e:
                logger.error(
                    "Pipeline step failed",
                    job_id=str(self.job_id),
                    layer_name=self.layer_name,
                    step_name=step_name,
                    error=str(e)
                )
                raise

            results[step_name] = step_result
            pipeline_data[f'{step_name.lower()}_results'] = step_result

        logger.info(
            "Pipeline execution completed",
            job_id=str(self.job_id),
            layer_name=self.layer_name,
            results_summary={
                step: result.get('totals', {}) for step, result in results.items()
            }
        )

        return results

    def _create_job_steps(self):
        """Create in-memory step records."""
        for step_order, (step_name, _) in enumerate(self.PIPELINE_STEPS, 1):
            self.steps[step_name] = {
                'step_name': step_name,
                'step_order': step_order,
                'status': 'pending',
                'started_at': None,
                'completed_at': None,
                'failed_at': None,
                'duration_ms': None,
                'metrics': {},
                'error_message': None,
            }

    def _execute_step(self, step_name: str, step_order: int,
                      pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a single pipeline step."""
        step = self.steps.get(step_name)
        if not step:
            raise ValueError(f"Step {step_name} not found")

        step['status'] = 'running'
        step['started_at'] = datetime.now(timezone.utc)

        start_time = time.time()
        processor = self.processors[step_name]

        try:
            result = processor.process(pipeline_data)
        except Exception as e:
            step['status'] = 'failed'
            step['failed_at'] = datetime.now(timezone.utc)
            step['duration_ms'] = int((time.time() - start_time) * 1000)
            step['error_message'] = str(e)
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        step['status'] = 'completed'
        step['completed_at'] = datetime.now(timezone.utc)
        step['duration_ms'] = duration_ms
        step['metrics'] = processor.get_metrics()

        logger.info(
            "Pipeline step completed",
            job_id=str(self.job_id),
            layer_name=self.layer_name,
            step_name=step_name,
            step_order=step_order,
            duration_ms=duration_ms,
            metrics=processor.get_metrics()
        )

        return result
