"""Composition of stores and services for one process."""

from dataclasses import dataclass

from filestore import config
from filestore.blob_storage import BlobStore
from filestore.database import Database
from filestore.job_queue import ThumbnailQueue
from filestore.repositories.file_repository import FileRepository
from filestore.repositories.user_repository import UserRepository
from filestore.services.auth_service import AuthService
from filestore.services.file_service import FileService
from filestore.services.status_service import StatusService
from filestore.session_store import SessionStore


@dataclass
class ServiceContainer:
    database: Database
    blobs: BlobStore
    sessions: SessionStore
    thumbnail_queue: ThumbnailQueue
    auth_service: AuthService
    file_service: FileService
    status_service: StatusService


def build_container(
    database: Database,
    blobs: BlobStore,
    sessions: SessionStore,
    thumbnail_queue: ThumbnailQueue,
) -> ServiceContainer:
    """
    Wire services on top of already constructed store handles.
    """
    user_repo = UserRepository(database)
    file_repo = FileRepository(database)

    return ServiceContainer(
        database=database,
        blobs=blobs,
        sessions=sessions,
        thumbnail_queue=thumbnail_queue,
        auth_service=AuthService(user_repo, sessions),
        file_service=FileService(file_repo, blobs, thumbnail_queue),
        status_service=StatusService(database, sessions, user_repo, file_repo),
    )


def container_from_config() -> ServiceContainer:
    """
    Build the production container from environment configuration.
    """
    return build_container(
        database=Database(config.DATABASE_PATH),
        blobs=BlobStore(config.FOLDER_PATH),
        sessions=SessionStore.from_url(config.REDIS_URL, config.SESSION_TTL_SECONDS),
        thumbnail_queue=ThumbnailQueue.from_url(
            config.REDIS_URL,
            config.THUMBNAIL_QUEUE_NAME,
            job_timeout=config.THUMBNAIL_JOB_TIMEOUT,
            max_retries=config.THUMBNAIL_MAX_RETRIES,
        ),
    )
