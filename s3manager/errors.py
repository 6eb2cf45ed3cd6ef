class S3ManagerError(Exception):
    """Base for every error the proxy reports back to the browser."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(S3ManagerError):
    def __init__(self, message: str = "Missing AWS configuration. Region, Access Key, and Secret Key are required."):
        super().__init__(message)


class BackendError(S3ManagerError):
    """Raised by the storage layer; the message is the SDK's, unchanged."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    @classmethod
    def from_exception(cls, exc: Exception) -> "BackendError":
        return cls(str(exc) or type(exc).__name__, cause=exc)


class InvalidRequestError(S3ManagerError):
    pass


class MissingBucketError(InvalidRequestError):
    def __init__(self, message: str = "Bucket name is required for deleting objects."):
        super().__init__(message)


class FileTooLargeError(InvalidRequestError):
    def __init__(self, filename: str, max_bytes: int):
        super().__init__(f"File {filename} exceeds the maximum upload size of {max_bytes} bytes.")
        self.filename = filename
        self.max_bytes = max_bytes


class UploadFailedError(S3ManagerError):
    def __init__(self, filename: str, reason: str):
        super().__init__(f"Failed to upload {filename}: {reason}")
        self.filename = filename
