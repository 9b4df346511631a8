"""File service for business logic."""

import base64
import binascii
import mimetypes
from typing import Iterator, List, Optional, Tuple, Union

from common.constants import FILE, FILE_KINDS, FOLDER, IMAGE, ROOT_PARENT_ID, THUMBNAIL_WIDTHS
from common.logging_config import get_logger
from filestore.blob_storage import BlobStore, variant_path
from filestore.exceptions import (
    InvalidParentError,
    MissingFieldError,
    NotAFileError,
    NotFoundError,
    ParentNotAFolderError,
    ValidationError,
)
from filestore.job_queue import ThumbnailQueue
from filestore.repositories.file_repository import FileNode, FileRepository
from filestore.utils import generate_uuid, normalize_parent_id, parse_page, utcnow

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _decode_base64(data: str) -> bytes:
    """
    Decode a base64 payload, accepting line-wrapped (MIME) and unpadded input.

    Raises:
        ValidationError: If the payload holds characters outside the base64
            alphabet or has an impossible length
    """
    compact = "".join(data.split())
    compact += "=" * (-len(compact) % 4)
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid data")


class FileService:
    def __init__(self, file_repo: FileRepository, blobs: BlobStore, thumbnail_queue: ThumbnailQueue):
        self.file_repo = file_repo
        self.blobs = blobs
        self.thumbnail_queue = thumbnail_queue

    def upload(
        self,
        owner_id: str,
        name: Optional[str],
        kind: Optional[str],
        parent_id: Optional[Union[str, int]] = None,
        data: Optional[str] = None,
    ) -> FileNode:
        """
        Create a folder or store file content, depending on kind.
        """
        if not name:
            raise MissingFieldError("name")
        if kind not in FILE_KINDS:
            raise MissingFieldError("type")

        if kind == FOLDER:
            return self.create_folder(owner_id, name, parent_id)
        return self.upload_content(owner_id, name, kind, parent_id, data)

    def create_folder(self, owner_id: str, name: Optional[str], parent_id: Optional[Union[str, int]] = None) -> FileNode:
        if not name:
            raise MissingFieldError("name")

        parent_id = self._validate_parent(normalize_parent_id(parent_id))

        now = utcnow()
        node = FileNode(
            file_id=generate_uuid(),
            owner_id=owner_id,
            name=name,
            kind=FOLDER,
            is_public=False,
            parent_id=parent_id,
            local_path=None,
            created_at=now,
            updated_at=now,
        )
        self.file_repo.create(node)
        logger.info(f"Created folder '{name}' [file_id={node.file_id}] [user_id={owner_id}]")
        return node

    def upload_content(
        self,
        owner_id: str,
        name: Optional[str],
        kind: Optional[str],
        parent_id: Optional[Union[str, int]],
        base64_data: Optional[str],
    ) -> FileNode:
        if not name:
            raise MissingFieldError("name")
        if kind not in (FILE, IMAGE):
            raise MissingFieldError("type")
        if not base64_data:
            raise MissingFieldError("data")

        parent_id = self._validate_parent(normalize_parent_id(parent_id))

        content = _decode_base64(base64_data)

        local_path = self.blobs.put(content)

        now = utcnow()
        node = FileNode(
            file_id=generate_uuid(),
            owner_id=owner_id,
            name=name,
            kind=kind,
            is_public=False,
            parent_id=parent_id,
            local_path=local_path,
            created_at=now,
            updated_at=now,
        )
        self.file_repo.create(node)
        logger.info(
            f"Stored {kind} '{name}' ({len(content)} bytes) [file_id={node.file_id}] [user_id={owner_id}]"
        )

        if kind == IMAGE:
            self._enqueue_thumbnails(node)

        return node

    def _enqueue_thumbnails(self, node: FileNode) -> None:
        # The upload is already committed; a node without thumbnails is still valid.
        try:
            self.thumbnail_queue.enqueue(node.owner_id, node.file_id)
        except Exception as e:
            logger.error(f"Failed to enqueue thumbnail job [file_id={node.file_id}]: {e}", exc_info=True)

    def _validate_parent(self, parent_id: str) -> str:
        if parent_id == ROOT_PARENT_ID:
            return parent_id

        parent = self.file_repo.get_by_id(parent_id)
        if parent is None:
            logger.warning(f"Parent {parent_id} not found")
            raise InvalidParentError()
        if not parent.is_folder:
            logger.warning(f"Parent {parent_id} is a {parent.kind}, not a folder")
            raise ParentNotAFolderError()
        return parent_id

    def get(self, requester_id: Optional[str], file_id: str) -> FileNode:
        node = self.file_repo.get_by_id(file_id)
        if node is None or not node.visible_to(requester_id):
            raise NotFoundError()
        return node

    def list(
        self,
        requester_id: str,
        parent_id: Optional[Union[str, int]] = None,
        page: Optional[Union[str, int]] = 0,
    ) -> List[FileNode]:
        parent_id = normalize_parent_id(parent_id)
        page = parse_page(page)
        nodes = self.file_repo.list_children(requester_id, parent_id, page)
        logger.debug(f"Listed {len(nodes)} nodes under {parent_id} page {page} [user_id={requester_id}]")
        return nodes

    def set_public(self, requester_id: str, file_id: str, value: bool) -> FileNode:
        node = self.file_repo.get_owned(file_id, requester_id)
        if node is None:
            raise NotFoundError()
        return self.file_repo.set_public(node, value, utcnow())

    def read_content(
        self,
        requester_id: Optional[str],
        file_id: str,
        size: Optional[Union[str, int]] = None,
    ) -> Tuple[Iterator[bytes], str]:
        """
        Open a node's content, or one of its thumbnails when size is given.

        Returns:
            (byte stream, content type)
        """
        node = self.get(requester_id, file_id)
        if node.is_folder:
            raise NotAFileError()

        path = node.local_path
        if size is not None and size != "":
            path = variant_path(node.local_path, self._parse_thumbnail_width(size))

        if not self.blobs.exists(path):
            logger.warning(f"Blob missing for node [file_id={file_id}] path={path}")
            raise NotFoundError()

        content_type, _ = mimetypes.guess_type(node.name)
        return self.blobs.stream(path), content_type or DEFAULT_CONTENT_TYPE

    @staticmethod
    def _parse_thumbnail_width(size: Union[str, int]) -> int:
        try:
            width = int(size)
        except (TypeError, ValueError):
            raise ValidationError("Invalid size")
        if width not in THUMBNAIL_WIDTHS:
            raise ValidationError("Invalid size")
        return width
