"""RQ task functions for the thumbnail queue.

Job payloads carry only (user_id, file_id); the stores are rebuilt from
configuration inside the worker process.
"""

from functools import lru_cache
from typing import Dict

from common.logging_config import get_logger
from filestore import config
from filestore.blob_storage import BlobStore
from filestore.database import Database
from filestore.repositories.file_repository import FileRepository
from thumbnailer.thumbnail_worker import ThumbnailWorker

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_worker() -> ThumbnailWorker:
    database = Database(config.DATABASE_PATH)
    return ThumbnailWorker(FileRepository(database), BlobStore(config.FOLDER_PATH))


def generate_thumbnails(user_id: str, file_id: str) -> Dict[int, str]:
    logger.info(f"Processing thumbnail job [file_id={file_id}] [user_id={user_id}]")
    return get_worker().process(user_id, file_id)


def report_failure(job, connection, exc_type, exc_value, traceback) -> None:
    """
    RQ failure callback, run after every failed attempt.

    Once no retries remain the job is left in the queue's failed job
    registry; nothing else polls thumbnail outcomes, so the log line is the
    only report.
    """
    if job.retries_left:
        logger.warning(
            f"Thumbnail job {job.id} failed, {job.retries_left} retries left: {exc_value}"
        )
        return

    logger.error(f"Thumbnail job {job.id} dead-lettered after final attempt: {exc_value} args={job.args}")
