"""Manages file content on local disk: blob write/read and thumbnail variants."""

from pathlib import Path
from typing import Iterator

from common.constants import STREAM_PIECE_SIZE_BYTES
from common.logging_config import get_logger
from filestore.exceptions import StorageError
from filestore.utils import generate_uuid

logger = get_logger(__name__)


def variant_path(local_path: str, width: int) -> str:
    """
    Path of the thumbnail of local_path at the given width.
    """
    return f"{local_path}_{width}"


class BlobStore:
    """
    Blobs live directly under root, named by a generated uuid. The returned
    path string is what gets recorded as a node's localPath.
    """

    def __init__(self, root: str):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Ensure the storage folder exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def put(self, data: bytes) -> str:
        """
        Write data under a freshly generated blob id.

        Args:
            data: Raw file content

        Returns:
            String path to the written blob

        Raises:
            StorageError: If the write fails
        """
        blob_path = self.root / generate_uuid()
        try:
            self.ensure_root()
            blob_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write blob {blob_path}: {e}", exc_info=True)
            raise StorageError(f"Failed to write blob {blob_path.name}") from e

        logger.debug(f"Wrote blob {blob_path} ({len(data)} bytes)")
        return str(blob_path)

    def write(self, path: str, data: bytes) -> None:
        """
        Write data at an explicit path, replacing any previous content.
        Used for derived files such as thumbnails.
        """
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}", exc_info=True)
            raise StorageError(f"Failed to write {Path(path).name}") from e

    def read(self, path: str) -> bytes:
        """
        Read an entire blob.

        Raises:
            FileNotFoundError: If the blob does not exist
        """
        return Path(path).read_bytes()

    def stream(self, path: str, piece_size: int = STREAM_PIECE_SIZE_BYTES) -> Iterator[bytes]:
        """
        Stream blob data in pieces.

        Args:
            path: Blob path
            piece_size: Size of each piece in bytes (default 64KB)

        Yields:
            Blob data pieces
        """
        with open(path, 'rb') as f:
            while True:
                piece = f.read(piece_size)
                if not piece:
                    break
                yield piece

    def exists(self, path: str) -> bool:
        return Path(path).is_file()
