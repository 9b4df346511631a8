"""Configuration settings for the files API server and the thumbnail worker."""

import os

from common.constants import SESSION_TTL_SECONDS as DEFAULT_SESSION_TTL_SECONDS


DATABASE_PATH = os.environ.get("FILES_DB_PATH", "/tmp/files_manager/metadata.db")

FOLDER_PATH = os.environ.get("FOLDER_PATH", "/tmp/files_manager")

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

SESSION_TTL_SECONDS = int(os.environ.get("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS)))

THUMBNAIL_QUEUE_NAME = os.environ.get("THUMBNAIL_QUEUE_NAME", "fileQueue")

THUMBNAIL_JOB_TIMEOUT = int(os.environ.get("THUMBNAIL_JOB_TIMEOUT", "60"))

THUMBNAIL_MAX_RETRIES = int(os.environ.get("THUMBNAIL_MAX_RETRIES", "3"))

FILES_HOST = os.environ.get("FILES_HOST", "0.0.0.0")

FILES_PORT = int(os.environ.get("FILES_PORT", "5000"))
