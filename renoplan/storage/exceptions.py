"""Object storage exceptions."""


class StorageError(Exception):
    """Raised when an object cannot be stored or signed."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidUploadError(StorageError):
    """The uploaded file is not an acceptable image."""

    pass
