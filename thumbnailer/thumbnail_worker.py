"""Generates resized variants of uploaded images."""

import io
from typing import Dict, Iterable, List

from PIL import Image, ImageOps, UnidentifiedImageError

from common.constants import IMAGE, THUMBNAIL_WIDTHS
from common.logging_config import get_logger
from filestore.blob_storage import BlobStore, variant_path
from filestore.exceptions import StorageError, ThumbnailGenerationError, ThumbnailJobRejected
from filestore.repositories.file_repository import FileRepository

logger = get_logger(__name__)

DEFAULT_FORMAT = "PNG"


def resize_to_width(source: bytes, width: int) -> bytes:
    """
    Resize an encoded image to the given width, keeping its aspect ratio.

    The result is encoded in the source's format, so a thumbnail of a JPEG is
    a JPEG. EXIF orientation is applied first, so the thumbnail is upright.
    """
    with Image.open(io.BytesIO(source)) as image:
        image_format = image.format or DEFAULT_FORMAT
        upright = ImageOps.exif_transpose(image)
        height = max(1, round(upright.height * width / upright.width))
        resized = upright.resize((width, height))

        if image_format == "JPEG" and resized.mode not in ("RGB", "L"):
            resized = resized.convert("RGB")

        output = io.BytesIO()
        resized.save(output, format=image_format)
        return output.getvalue()


class ThumbnailWorker:
    """
    Consumes ThumbnailJob{user_id, file_id}.

    Processing is idempotent: a redelivered job rewrites the same files with
    the same content. Node metadata is never touched.
    """

    def __init__(self, file_repo: FileRepository, blobs: BlobStore, widths: Iterable[int] = THUMBNAIL_WIDTHS):
        self.file_repo = file_repo
        self.blobs = blobs
        self.widths = tuple(widths)

    def process(self, user_id: str, file_id: str) -> Dict[int, str]:
        """
        Write every thumbnail of the node.

        Returns:
            Mapping of width to written path

        Raises:
            ThumbnailJobRejected: The node is missing, not owned by user_id,
                or not an image
            ThumbnailGenerationError: At least one width failed; widths that
                succeeded stay on disk
        """
        if not file_id:
            raise ThumbnailJobRejected("Missing fileId")
        if not user_id:
            raise ThumbnailJobRejected("Missing userId")

        node = self.file_repo.get_owned(file_id, user_id)
        if node is None:
            raise ThumbnailJobRejected(f"File not found [file_id={file_id}] [user_id={user_id}]")
        if node.kind != IMAGE:
            raise ThumbnailJobRejected(f"File {file_id} is a {node.kind}, not an image")

        source = self.blobs.read(node.local_path)

        written: Dict[int, str] = {}
        failed: List[int] = []
        for width in self.widths:
            path = variant_path(node.local_path, width)
            try:
                self.blobs.write(path, resize_to_width(source, width))
            except (StorageError, UnidentifiedImageError, OSError, ValueError) as e:
                logger.warning(f"Thumbnail {width}px failed [file_id={file_id}]: {e}")
                failed.append(width)
                continue
            written[width] = path
            logger.debug(f"Wrote thumbnail {path}")

        if failed:
            raise ThumbnailGenerationError(file_id, failed)

        logger.info(f"Generated {len(written)} thumbnails [file_id={file_id}]")
        return written
