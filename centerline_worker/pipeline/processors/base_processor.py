"""
Base processor class for pipeline steps.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import structlog

from ...config import PairingThresholds

logger = structlog.get_logger()


class BaseProcessor(ABC):
    """Base class for all pipeline processors."""

    def __init__(self, job_id: uuid.UUID, thresholds: Optional[PairingThresholds] = None,
                 layer_name: str = ""):
        self.job_id = job_id
        self.thresholds = thresholds or PairingThresholds()
        self.layer_name = layer_name
        self.metrics = {}

    @abstractmethod
    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Process the pipeline data and return results."""
        pass

    def get_metrics(self) -> Dict[str, Any]:
        """Get processing metrics."""
        return self.metrics.copy()

    def _context(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "job_id": str(self.job_id),
            "processor": self.__class__.__name__,
            "layer_name": self.layer_name,
            **context,
        }

    def log_info(self, message: str, **context):
        """Log info message with job context."""
        logger.info(message, **self._context(context))

    def log_warning(self, message: str, **context):
        """Log warning message with job context."""
        logger.warning(message, **self._context(context))

    def log_error(self, message: str, **context):
        """Log error message with job context."""
        logger.error(message, **self._context(context))

    def update_metrics(self, **metrics):
        """Update processor metrics."""
        self.metrics.update(metrics)
