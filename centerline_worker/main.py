"""
Centerline worker - RQ worker process.
Main worker entry point for processing layer jobs.
"""

import os

import redis
import structlog
from rq import Queue, Worker

from centerline_worker.config import settings
from centerline_worker.services.logging_service import configure_logging

configure_logging(settings.log_level)

logger = structlog.get_logger()

QUEUE_NAMES = ['centerline_jobs', 'centerline_high_priority', 'centerline_low_priority']


def main():
    """Main worker process."""
    logger.info(
        "Starting centerline worker",
        redis_url=settings.redis_url,
        concurrency=settings.worker_concurrency,
        length_unit=settings.length_unit
    )

    # Fail fast on inconsistent thresholds
    thresholds = settings.pairing_thresholds()
    logger.info("Pairing thresholds loaded", **thresholds.model_dump())

    redis_connection = redis.from_url(settings.redis_url)

    queues = [Queue(name, connection=redis_connection) for name in QUEUE_NAMES]

    worker = Worker(
        queues,
        connection=redis_connection,
        name=f"centerline-worker-{os.getpid()}"
    )

    logger.info(
        "Worker created successfully",
        worker_name=worker.name,
        queues=[q.name for q in queues]
    )

    try:
        worker.work(with_scheduler=True)
    except KeyboardInterrupt:
        logger.info("Worker interrupted, shutting down gracefully")
    except Exception as e:
        logger.error("Worker error", error=str(e))
        raise
    finally:
        logger.info("Worker shutdown complete")


if __name__ == '__main__':
    main()
