from __future__ import annotations
"""Exceptions raised by the filesystem adapter."""


class FilesystemException(Exception):
    """Base error for s3_filesystem."""


class FilesystemOperationFailed(FilesystemException):
    """Raised when a remote operation on a location could not be completed."""

    operation = "operation"

    def __init__(self, message: str, *, location: str = "", reason: str = "", cause: BaseException | None = None):
        super().__init__(message)
        self.location = location
        self.reason = reason
        self.cause = cause

    @classmethod
    def at_location(cls, location: str, reason: str = "", cause: BaseException | None = None):
        message = f"Unable to {cls.operation} at location: {location}."
        if reason:
            message = f"{message} {reason}"
        return cls(message.rstrip(), location=location, reason=reason, cause=cause)


class UnableToCheckExistence(FilesystemOperationFailed):
    operation = "check existence"

    @classmethod
    def for_location(cls, location: str, cause: BaseException | None = None):
        return cls.at_location(location, _reason_from(cause), cause)


class UnableToCheckFileExistence(UnableToCheckExistence):
    operation = "check file existence"


class UnableToCheckDirectoryExistence(UnableToCheckExistence):
    operation = "check directory existence"


class UnableToReadFile(FilesystemOperationFailed):
    operation = "read file"

    @classmethod
    def from_location(cls, location: str, reason: str = "", cause: BaseException | None = None):
        return cls.at_location(location, reason or _reason_from(cause), cause)


class UnableToWriteFile(FilesystemOperationFailed):
    operation = "write file"


class UnableToDeleteFile(FilesystemOperationFailed):
    operation = "delete file"


class UnableToDeleteDirectory(FilesystemOperationFailed):
    operation = "delete directory"


class UnableToCreateDirectory(FilesystemOperationFailed):
    operation = "create directory"


class UnableToListContents(FilesystemOperationFailed):
    operation = "list contents"


class UnableToSetVisibility(FilesystemOperationFailed):
    operation = "set visibility"


class UnableToRetrieveMetadata(FilesystemOperationFailed):
    """Raised when a single metadata attribute cannot be determined."""

    operation = "retrieve metadata"

    def __init__(self, message: str, *, metadata_type: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.metadata_type = metadata_type

    @classmethod
    def create(cls, location: str, metadata_type: str, reason: str = "", cause: BaseException | None = None):
        reason = reason or _reason_from(cause)
        message = f"Unable to retrieve the {metadata_type} for file at location: {location}."
        if reason:
            message = f"{message} {reason}"
        return cls(message, metadata_type=metadata_type, location=location, reason=reason, cause=cause)

    @classmethod
    def visibility(cls, location: str, reason: str = "", cause: BaseException | None = None):
        return cls.create(location, "visibility", reason, cause)

    @classmethod
    def mime_type(cls, location: str, reason: str = "", cause: BaseException | None = None):
        return cls.create(location, "mime_type", reason, cause)

    @classmethod
    def last_modified(cls, location: str, reason: str = "", cause: BaseException | None = None):
        return cls.create(location, "last_modified", reason, cause)

    @classmethod
    def file_size(cls, location: str, reason: str = "", cause: BaseException | None = None):
        return cls.create(location, "file_size", reason, cause)


class _TransferFailed(FilesystemOperationFailed):
    def __init__(self, message: str, *, source: str, destination: str, cause: BaseException | None = None):
        super().__init__(message, location=source, reason=_reason_from(cause), cause=cause)
        self.source = source
        self.destination = destination

    @classmethod
    def from_location_to(cls, source: str, destination: str, cause: BaseException | None = None):
        message = f"Unable to {cls.operation} from {source} to {destination}"
        return cls(message, source=source, destination=destination, cause=cause)


class UnableToCopyFile(_TransferFailed):
    operation = "copy file"


class UnableToMoveFile(_TransferFailed):
    operation = "move file"


class InvalidVisibilityProvided(FilesystemException, ValueError):
    """Raised for visibility values other than public or private."""

    @classmethod
    def with_visibility(cls, visibility: object, expected: str):
        return cls(f"Invalid visibility provided. Expected {expected}, received {visibility!r}")


def _reason_from(cause: BaseException | None) -> str:
    if cause is None:
        return ""
    return str(cause)
