"""
Job service for queuing layer jobs on Redis.
"""

import uuid
from typing import List, Optional, Union

import redis
import structlog
from rq import Queue
from rq.job import Job as RQJob

from ..config import settings

logger = structlog.get_logger()


class JobService:
    """Service for queuing centerline jobs and reading their status."""

    def __init__(self, redis_client=None, queue_name: str = 'centerline_jobs'):
        self.redis_client = redis_client or redis.from_url(settings.redis_url)
        self.queue = Queue(queue_name, connection=self.redis_client)

    def enqueue_layer_job(self, drawing_path: str, layer_names: Union[str, List[str]],
                          job_id: Optional[uuid.UUID] = None) -> str:
        """
        Enqueue a drawing for centerline extraction.

        Returns:
            RQ job ID
        """
        job_id = job_id or uuid.uuid4()
        try:
            rq_job = self.queue.enqueue(
                'centerline_worker.job_processor.process_job',
                drawing_path,
                layer_names,
                str(job_id),
                job_timeout=settings.job_timeout,
                job_id=str(job_id)
            )
        except Exception as e:
            logger.error(
                "Failed to enqueue job",
                job_id=str(job_id),
                error=str(e)
            )
            raise

        logger.info(
            "Job enqueued successfully",
            job_id=str(job_id),
            rq_job_id=rq_job.id,
            layer_names=layer_names
        )
        return rq_job.id

    def get_job_status(self, rq_job_id: str) -> Optional[dict]:
        """Get RQ job status, None when the job is unknown."""
        try:
            rq_job = RQJob.fetch(rq_job_id, connection=self.redis_client)
        except Exception as e:
            logger.error("Failed to fetch job", rq_job_id=rq_job_id, error=str(e))
            return None

        return {
            'id': rq_job.id,
            'status': rq_job.get_status(),
            'created_at': rq_job.created_at,
            'started_at': rq_job.started_at,
            'ended_at': rq_job.ended_at,
            'result': rq_job.return_value(),
        }
