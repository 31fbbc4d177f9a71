from __future__ import annotations
"""Filesystem semantics on top of an S3 bucket."""
from collections import deque
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import io
import logging
import mimetypes
import shutil
import tempfile
from typing import Any, BinaryIO, Iterator, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError

from .acl import acl_for_visibility, acl_from_grants, visibility_for_acl
from .config import OPTION_MIMETYPE, OPTION_VISIBILITY, Config, freeze_options, merge_options
from .exceptions import (
    UnableToCheckDirectoryExistence,
    UnableToCheckFileExistence,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToListContents,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from .models import DirectoryAttributes, FileAttributes, StorageAttributes
from .paths import DELIMITER, directory_path, directory_prefix, normalize_path

LOGGER = logging.getLogger(__name__)

# Content type S3 stores when an upload does not declare one.
DEFAULT_CONTENT_TYPE = "binary/octet-stream"
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})
TEMP_FILE_PREFIX = "s3-filesystem-"
STREAM_CHUNK_SIZE = 1024 * 1024

BACKEND_ERRORS = (ClientError, BotoCoreError)

ConfigLike = Optional[Union[Config, Mapping[str, Any]]]


class S3FilesystemAdapter:
    """Exposes a single bucket as a hierarchical filesystem.

    ``options`` are client keyword arguments merged into every request; the
    ``options`` key of a per-call :class:`Config` overrides them for that call.
    ``page_size`` bounds ``MaxKeys`` for listings, the backend default applies
    when it is ``None``.
    """

    def __init__(
        self,
        client,
        bucket: str,
        options: Mapping[str, Any] | None = None,
        *,
        page_size: int | None = None,
    ):
        self._client = client
        self._bucket = bucket
        self._options = freeze_options(options)
        self._page_size = page_size

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    # Existence and metadata

    def file_exists(self, path: str) -> bool:
        key = normalize_path(path)
        LOGGER.debug("Checking existence of '%s' in bucket '%s'", key, self._bucket)
        try:
            self._client.head_object(**self._request(Key=key))
        except ClientError as exc:
            if _error_code(exc) in NOT_FOUND_CODES:
                return False
            raise UnableToCheckFileExistence.for_location(path, exc) from exc
        except BotoCoreError as exc:
            raise UnableToCheckFileExistence.for_location(path, exc) from exc
        return True

    def directory_exists(self, path: str) -> bool:
        prefix = directory_prefix(path)
        params: dict[str, Any] = {"Delimiter": DELIMITER, "MaxKeys": 1}
        if prefix:
            params["Prefix"] = prefix
        try:
            response = self._client.list_objects_v2(**self._request(**params))
        except BACKEND_ERRORS as exc:
            raise UnableToCheckDirectoryExistence.for_location(path, exc) from exc
        return bool(response.get("Contents") or response.get("CommonPrefixes"))

    def mime_type(self, path: str) -> FileAttributes:
        key = normalize_path(path)
        try:
            response = self._head(key)
        except BACKEND_ERRORS as exc:
            raise UnableToRetrieveMetadata.mime_type(path, cause=exc) from exc

        content_type = response.get("ContentType")
        if not content_type or content_type == DEFAULT_CONTENT_TYPE:
            raise UnableToRetrieveMetadata.mime_type(path, "No specific content type is stored for the object.")
        return FileAttributes(key, mime_type=content_type)

    def last_modified(self, path: str) -> FileAttributes:
        key = normalize_path(path)
        try:
            response = self._head(key)
        except BACKEND_ERRORS as exc:
            raise UnableToRetrieveMetadata.last_modified(path, cause=exc) from exc

        try:
            timestamp = to_timestamp(response.get("LastModified"))
        except ValueError as exc:
            raise UnableToRetrieveMetadata.last_modified(path, cause=exc) from exc
        if timestamp is None:
            raise UnableToRetrieveMetadata.last_modified(path, "The backend did not report a modification time.")
        return FileAttributes(key, last_modified=timestamp)

    def file_size(self, path: str) -> FileAttributes:
        key = normalize_path(path)
        try:
            response = self._head(key)
        except BACKEND_ERRORS as exc:
            raise UnableToRetrieveMetadata.file_size(path, cause=exc) from exc

        size = response.get("ContentLength")
        if size is None:
            raise UnableToRetrieveMetadata.file_size(path, "The backend did not report a content length.")
        return FileAttributes(key, file_size=int(size))

    def visibility(self, path: str) -> FileAttributes:
        key = normalize_path(path)
        try:
            response = self._client.get_object_acl(**self._request(Key=key))
        except BACKEND_ERRORS as exc:
            raise UnableToRetrieveMetadata.visibility(path, cause=exc) from exc

        acl = acl_from_grants(response.get("Grants") or [])
        return FileAttributes(key, visibility=visibility_for_acl(acl))

    def set_visibility(self, path: str, visibility: str) -> None:
        key = normalize_path(path)
        acl = acl_for_visibility(visibility)
        LOGGER.debug("Setting ACL '%s' on '%s'", acl, key)
        try:
            self._client.put_object_acl(**self._request(Key=key, ACL=acl))
        except BACKEND_ERRORS as exc:
            raise UnableToSetVisibility.at_location(path, str(exc), exc) from exc

    # Reading and writing

    def write(self, path: str, contents: bytes | str, config: ConfigLike = None) -> None:
        config = _as_config(config)
        key = normalize_path(path)
        params = self._upload_params(key, config)
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        LOGGER.debug("Writing %d byte(s) to '%s' in bucket '%s'", len(contents), key, self._bucket)
        try:
            self._client.put_object(**self._request(config, Key=key, Body=contents, **params))
        except BACKEND_ERRORS as exc:
            raise UnableToWriteFile.at_location(path, str(exc), exc) from exc

    def write_stream(self, path: str, contents: BinaryIO | bytes, config: ConfigLike = None) -> None:
        config = _as_config(config)
        key = normalize_path(path)
        if isinstance(contents, (bytes, bytearray)):
            contents = io.BytesIO(contents)
        extra_args = merge_options(merge_options(self._options, config.client_options), self._upload_params(key, config))
        LOGGER.debug("Streaming upload to '%s' in bucket '%s'", key, self._bucket)
        try:
            self._client.upload_fileobj(contents, self._bucket, key, ExtraArgs=extra_args or None)
        except BACKEND_ERRORS as exc:
            raise UnableToWriteFile.at_location(path, str(exc), exc) from exc

    def read(self, path: str) -> bytes:
        key = normalize_path(path)
        LOGGER.debug("Reading '%s' from bucket '%s'", key, self._bucket)
        try:
            response = self._client.get_object(**self._request(Key=key))
        except BACKEND_ERRORS as exc:
            raise UnableToReadFile.from_location(path, cause=exc) from exc

        body = response["Body"]
        try:
            return body.read()
        except BACKEND_ERRORS as exc:
            raise UnableToReadFile.from_location(path, cause=exc) from exc
        finally:
            body.close()

    def read_stream(self, path: str) -> BinaryIO:
        """Return a readable stream over the object at ``path``.

        The object is spooled into an anonymous temporary file which is
        removed when the caller closes the returned stream.
        """

        key = normalize_path(path)
        try:
            response = self._client.get_object(**self._request(Key=key))
        except BACKEND_ERRORS as exc:
            raise UnableToReadFile.from_location(path, cause=exc) from exc

        body = response["Body"]
        if response.get("ContentLength") == 0:
            body.close()
            raise UnableToReadFile.from_location(path, "The object has no contents.")

        stream = tempfile.TemporaryFile(prefix=TEMP_FILE_PREFIX)
        try:
            shutil.copyfileobj(body, stream, STREAM_CHUNK_SIZE)
        except (*BACKEND_ERRORS, OSError) as exc:
            stream.close()
            raise UnableToReadFile.from_location(path, cause=exc) from exc
        finally:
            body.close()

        if stream.tell() == 0:
            stream.close()
            raise UnableToReadFile.from_location(path, "The object has no contents.")
        stream.seek(0)
        return stream

    def delete(self, path: str) -> None:
        key = normalize_path(path)
        LOGGER.debug("Deleting '%s' from bucket '%s'", key, self._bucket)
        try:
            self._client.delete_object(**self._request(Key=key))
        except BACKEND_ERRORS as exc:
            raise UnableToDeleteFile.at_location(path, str(exc), exc) from exc

    # Directories

    def create_directory(self, path: str, config: ConfigLike = None) -> None:
        config = _as_config(config)
        prefix = directory_prefix(path)
        if not prefix:
            return
        params = self._upload_params(prefix, config, guess_type=False)
        LOGGER.debug("Creating directory marker '%s' in bucket '%s'", prefix, self._bucket)
        try:
            self._client.put_object(**self._request(config, Key=prefix, Body=b"", **params))
        except BACKEND_ERRORS as exc:
            raise UnableToCreateDirectory.at_location(path, str(exc), exc) from exc

    def delete_directory(self, path: str) -> None:
        """Delete every object under ``path`` and the directory marker.

        Objects written under the prefix while the deletion is running may
        survive it.
        """

        prefix = directory_prefix(path)
        deleted = 0
        try:
            for page in self._list_pages(prefix):
                keys = [obj["Key"] for obj in page.get("Contents", [])]
                if not keys:
                    continue
                response = self._client.delete_objects(
                    **self._request(Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True})
                )
                errors = response.get("Errors") or []
                if errors:
                    first = errors[0]
                    raise UnableToDeleteDirectory.at_location(
                        path,
                        f"{len(errors)} object(s) could not be deleted, "
                        f"first: {first.get('Key')} ({first.get('Code')})",
                    )
                deleted += len(keys)

            key = normalize_path(path)
            if key:
                self._client.delete_object(**self._request(Key=key))
        except BACKEND_ERRORS as exc:
            raise UnableToDeleteDirectory.at_location(path, str(exc), exc) from exc
        LOGGER.debug("Deleted %d object(s) under '%s'", deleted, prefix)

    def list_contents(self, path: str = "", deep: bool = False) -> Iterator[StorageAttributes]:
        """Yield the files and directories under ``path``.

        With ``deep`` the common prefixes are descended breadth first. Entries
        are produced as pages arrive, every page of every prefix is consumed.
        """

        pending = deque([directory_prefix(path)])
        seen_keys: set[str] = set()
        seen_prefixes: set[str] = set()
        try:
            while pending:
                prefix = pending.popleft()
                for page in self._list_pages(prefix, delimiter=DELIMITER, fetch_owner=True):
                    for obj in page.get("Contents", []):
                        key = obj["Key"]
                        # The marker object of the directory being listed.
                        if key == prefix or key in seen_keys:
                            continue
                        seen_keys.add(key)
                        yield _file_attributes(obj)
                    for common in page.get("CommonPrefixes", []):
                        common_prefix = common["Prefix"]
                        if common_prefix in seen_prefixes:
                            continue
                        seen_prefixes.add(common_prefix)
                        if deep:
                            pending.append(common_prefix)
                        directory = directory_path(common_prefix)
                        # A bare "/" prefix is the bucket root, not a directory.
                        if directory:
                            yield DirectoryAttributes(directory)
        except (*BACKEND_ERRORS, ValueError) as exc:
            raise UnableToListContents.at_location(path, str(exc), exc) from exc

    # Move and copy

    def copy(self, source: str, destination: str, config: ConfigLike = None) -> None:
        config = _as_config(config)
        try:
            self._copy_object(source, destination, config)
        except BACKEND_ERRORS as exc:
            raise UnableToCopyFile.from_location_to(source, destination, exc) from exc

    def move(self, source: str, destination: str, config: ConfigLike = None) -> None:
        """Copy ``source`` to ``destination`` and delete ``source``.

        Not atomic: when the delete fails the object exists at both paths.
        """

        config = _as_config(config)
        try:
            self._copy_object(source, destination, config)
            self._client.delete_object(**self._request(config, Key=normalize_path(source)))
        except BACKEND_ERRORS as exc:
            raise UnableToMoveFile.from_location_to(source, destination, exc) from exc

    # Helpers

    def _request(self, config: Config | None = None, **params: Any) -> dict[str, Any]:
        options = self._options
        if config is not None:
            options = merge_options(options, config.client_options)
        return merge_options(options, {"Bucket": self._bucket, **params})

    def _head(self, key: str) -> dict[str, Any]:
        return self._client.head_object(**self._request(Key=key))

    def _upload_params(self, key: str, config: Config, *, guess_type: bool = True) -> dict[str, Any]:
        params: dict[str, Any] = {}
        visibility = config.get(OPTION_VISIBILITY)
        if visibility is not None:
            params["ACL"] = acl_for_visibility(visibility)
        mimetype = config.get(OPTION_MIMETYPE)
        if not mimetype and guess_type:
            mimetype, _ = mimetypes.guess_type(key)
        if mimetype:
            params["ContentType"] = mimetype
        return params

    def _copy_object(self, source: str, destination: str, config: Config) -> None:
        source_key = normalize_path(source)
        destination_key = normalize_path(destination)
        params: dict[str, Any] = {}
        visibility = config.get(OPTION_VISIBILITY)
        if visibility is not None:
            params["ACL"] = acl_for_visibility(visibility)
        LOGGER.debug("Copying '%s' to '%s' in bucket '%s'", source_key, destination_key, self._bucket)
        self._client.copy_object(
            **self._request(
                config,
                Key=destination_key,
                CopySource={"Bucket": self._bucket, "Key": source_key},
                **params,
            )
        )

    def _list_pages(
        self,
        prefix: str,
        *,
        delimiter: str | None = None,
        fetch_owner: bool = False,
    ) -> Iterator[dict[str, Any]]:
        list_params: dict[str, Any] = {}
        if prefix:
            list_params["Prefix"] = prefix
        if delimiter:
            list_params["Delimiter"] = delimiter
        if fetch_owner:
            list_params["FetchOwner"] = True
        if self._page_size:
            list_params["MaxKeys"] = self._page_size

        request_token: str | None = None
        page_number = 1
        while True:
            params = dict(list_params)
            if request_token:
                params["ContinuationToken"] = request_token
            response = self._client.list_objects_v2(**self._request(**params))
            LOGGER.debug(
                "Listed page %d of '%s' (%d object(s), %d prefix(es))",
                page_number,
                prefix,
                len(response.get("Contents", [])),
                len(response.get("CommonPrefixes", [])),
            )
            yield response

            response_token = response.get("NextContinuationToken")
            if not response.get("IsTruncated") or not response_token:
                break
            request_token = response_token
            page_number += 1


def to_timestamp(value: datetime | str | None) -> int | None:
    """Convert a backend modification time to integer epoch seconds.

    Raises:
        ValueError: when ``value`` is a string in no recognised format.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        text = str(value).strip()
        try:
            moment = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


def _file_attributes(obj: Mapping[str, Any]) -> FileAttributes:
    extra: dict[str, Any] = {}
    if obj.get("ETag"):
        extra["etag"] = obj["ETag"]
    if obj.get("StorageClass"):
        extra["storage_class"] = obj["StorageClass"]
    return FileAttributes(
        obj["Key"],
        file_size=obj.get("Size"),
        visibility=None,
        last_modified=to_timestamp(obj.get("LastModified")),
        mime_type=None,
        extra_metadata=extra,
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _as_config(config: ConfigLike) -> Config:
    if isinstance(config, Config):
        return config
    return Config(config)
