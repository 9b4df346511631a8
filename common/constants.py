"""Project-wide constants shared by the API server and the thumbnail worker."""

ROOT_PARENT_ID: str = "0"

FOLDER = "folder"
FILE = "file"
IMAGE = "image"
FILE_KINDS = (FOLDER, FILE, IMAGE)

PAGE_SIZE: int = 20

THUMBNAIL_WIDTHS = (500, 250, 100)

SESSION_KEY_PREFIX = "auth_"
SESSION_TTL_SECONDS: int = 24 * 3600

STREAM_PIECE_SIZE_BYTES: int = 64 * 1024
