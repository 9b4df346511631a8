"""Producer side of the thumbnail job queue (RQ on Redis)."""

from typing import Optional

import redis
from rq import Callback, Queue, Retry

from common.logging_config import get_logger

logger = get_logger(__name__)

THUMBNAIL_TASK = "thumbnailer.tasks.generate_thumbnails"
THUMBNAIL_FAILURE_CALLBACK = "thumbnailer.tasks.report_failure"
RETRY_INTERVALS = [10, 30, 60]


class ThumbnailQueue:
    """
    Enqueues ThumbnailJob{user_id, file_id} messages.

    Delivery is at-least-once: RQ retries a failed job up to max_retries
    times, so the consumer must tolerate seeing the same job again.
    Regenerating thumbnails overwrites the previous files.
    """

    def __init__(self, queue: Queue, job_timeout: int, max_retries: int):
        self.queue = queue
        self.job_timeout = job_timeout
        self.max_retries = max_retries

    @classmethod
    def from_url(cls, url: str, name: str, job_timeout: int, max_retries: int) -> "ThumbnailQueue":
        connection = redis.Redis.from_url(url)
        return cls(Queue(name, connection=connection), job_timeout, max_retries)

    def enqueue(self, user_id: str, file_id: str) -> Optional[str]:
        retry = None
        if self.max_retries > 0:
            retry = Retry(max=self.max_retries, interval=RETRY_INTERVALS[:self.max_retries])

        job = self.queue.enqueue(
            THUMBNAIL_TASK,
            user_id,
            file_id,
            job_timeout=self.job_timeout,
            retry=retry,
            on_failure=Callback(THUMBNAIL_FAILURE_CALLBACK),
        )
        logger.info(f"Enqueued thumbnail job {job.id} [file_id={file_id}] [user_id={user_id}]")
        return job.id
