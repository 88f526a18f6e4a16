"""
Job processor for running the centerline pipeline over drawing layers.
"""

import json
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Union

import structlog

from .config import PairingThresholds, settings
from .pipeline.pipeline_executor import PipelineExecutor
from .pipeline.processors.units import internal_to_millimeters

logger = structlog.get_logger()


def _layer_summary(results: Dict[str, Any], length_unit: str) -> Dict[str, Any]:
    """JSON-ready view of one layer's pipeline results."""
    centerlines = []
    for centerline in results['CENTERLINES']['centerlines']:
        item = centerline.to_dict()
        item['WidthMm'] = internal_to_millimeters(centerline.width, length_unit)
        centerlines.append(item)

    return {
        'centerlines': centerlines,
        'totals': {step: result.get('totals', {}) for step, result in results.items()},
    }


def _run_layer(job_id: uuid.UUID, layer_name: str, drawing_data: Dict[str, Any],
               thresholds: PairingThresholds, length_unit: str) -> Dict[str, Any]:
    """Each layer gets its own executor and segment collection."""
    executor = PipelineExecutor(job_id, layer_name, thresholds)
    results = executor.execute_pipeline(drawing_data)
    return _layer_summary(results, length_unit)


def process_drawing(
    drawing_data: Dict[str, Any],
    layer_names: List[str],
    thresholds: Optional[PairingThresholds] = None,
    job_id: Optional[uuid.UUID] = None,
    length_unit: str = "m",
    max_workers: int = 4,
) -> Dict[str, Any]:
    """
    Run the pipeline for every requested layer of an in-memory drawing.

    A failing layer is logged and reported under 'errors'; the other layers
    still complete. A layer without pairs is a normal, empty result.
    """
    if not layer_names:
        raise ValueError("No selected layers found")

    job_id = job_id or uuid.uuid4()
    thresholds = thresholds or PairingThresholds()

    layers: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    processing_stats = {
        'layers_processed': 0,
        'processing_errors': 0,
        'parallel_tasks': len(layer_names)
    }

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_to_layer = {
            executor.submit(_run_layer, job_id, layer_name, drawing_data, thresholds, length_unit): layer_name
            for layer_name in layer_names
        }

        for future in as_completed(future_to_layer):
            layer_name = future_to_layer[future]
            try:
                layers[layer_name] = future.result()
                processing_stats['layers_processed'] += 1
            except Exception as e:
                processing_stats['processing_errors'] += 1
                errors[layer_name] = str(e)
                logger.error(
                    "Layer processing failed",
                    job_id=str(job_id),
                    layer_name=layer_name,
                    error=str(e),
                    error_type=type(e).__name__
                )

    return {
        'job_id': str(job_id),
        'length_unit': length_unit,
        'layers': layers,
        'errors': errors,
        'processing_stats': processing_stats,
    }


def process_job(drawing_path: str, layer_names: Union[str, List[str]],
                job_id_str: Optional[str] = None) -> Dict[str, Any]:
    """
    Main job processing function called by RQ worker.

    Args:
        drawing_path: Path of the drawing export JSON
        layer_names: Layer name or list of layer names to process
        job_id_str: Optional string representation of job UUID

    Returns:
        Job processing results
    """
    job_id = uuid.UUID(job_id_str) if job_id_str else uuid.uuid4()
    if isinstance(layer_names, str):
        layer_names = [layer_names]

    logger.info(
        "Job processing started",
        job_id=str(job_id),
        drawing_file=drawing_path,
        layer_names=layer_names
    )

    try:
        # Thresholds are validated before any layer is touched
        thresholds = settings.pairing_thresholds()

        with open(drawing_path, 'r', encoding='utf-8') as f:
            drawing_data = json.load(f)

        result = process_drawing(
            drawing_data,
            layer_names,
            thresholds=thresholds,
            job_id=job_id,
            length_unit=settings.length_unit,
            max_workers=settings.worker_concurrency,
        )
    except Exception as e:
        logger.error(
            "Job processing failed",
            job_id=str(job_id),
            drawing_file=drawing_path,
            error=str(e),
            error_type=type(e).__name__
        )
        raise

    logger.info(
        "Job completed",
        job_id=str(job_id),
        summary={
            name: len(layer['centerlines']) for name, layer in result['layers'].items()
        },
        processing_errors=result['processing_stats']['processing_errors']
    )

    return result
