"""Custom exception classes for the files service."""


class FilesManagerError(Exception):
    """
    Base exception class for all files service errors.
    """
    pass


class UnauthorizedError(FilesManagerError):
    """
    Raised when a token is missing, unknown or expired, or credentials are wrong.
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationError(FilesManagerError):
    """
    Raised when a request is missing a field or carries an invalid value.
    """
    pass


class MissingFieldError(ValidationError):
    """
    Raised when a required field is absent or empty.
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing {field}")


class InvalidParentError(ValidationError):
    """
    Raised when the referenced parent node does not exist.
    """

    def __init__(self, message: str = "Parent not found"):
        super().__init__(message)


class ParentNotAFolderError(ValidationError):
    """
    Raised when the referenced parent node is not a folder.
    """

    def __init__(self, message: str = "Parent is not a folder"):
        super().__init__(message)


class NotAFileError(ValidationError):
    """
    Raised when content is requested for a folder.
    """

    def __init__(self, message: str = "A folder doesn't have content"):
        super().__init__(message)


class UserAlreadyExistsError(FilesManagerError):
    """
    Raised when attempting to register an email that already exists.
    """

    def __init__(self, message: str = "Already exist"):
        super().__init__(message)


class NotFoundError(FilesManagerError):
    """
    Raised when a node is missing or not visible to the requester.

    Ownership mismatches raise this too, so callers cannot probe for other
    users' private files.
    """

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class StorageError(FilesManagerError):
    """
    Raised when the blob store cannot be read or written.
    """
    pass


class ThumbnailJobRejected(FilesManagerError):
    """
    Raised by the worker when a job references a node it must not process.
    """
    pass


class ThumbnailGenerationError(FilesManagerError):
    """
    Raised by the worker when one or more thumbnail widths failed.
    """

    def __init__(self, file_id: str, failed_widths):
        self.file_id = file_id
        self.failed_widths = list(failed_widths)
        super().__init__(f"Thumbnail generation failed for {file_id} at widths {self.failed_widths}")
