"""Entry point for the thumbnail worker.
Consumes the thumbnail queue until stopped.
"""

import redis
from rq import Queue, Worker

from common.logging_config import setup_logging
from filestore.config import REDIS_URL, THUMBNAIL_QUEUE_NAME

logger = setup_logging('thumbnailer')
setup_logging('filestore')


def main() -> None:
    """
    Run a single RQ worker on the thumbnail queue.

    Jobs are independent per file, so more workers can be started against
    the same queue to scale out.
    """
    connection = redis.Redis.from_url(REDIS_URL)
    queue = Queue(THUMBNAIL_QUEUE_NAME, connection=connection)

    logger.info(f"Starting thumbnail worker on queue '{THUMBNAIL_QUEUE_NAME}'")
    worker = Worker([queue], connection=connection)
    worker.work(with_scheduler=True)


if __name__ == "__main__":
    main()
