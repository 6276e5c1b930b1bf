"""Storage client protocol, errors and local value types.

This module defines the interface of a LingStorage client: file uploads,
object management and bucket administration against a remote service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol, Sequence

if TYPE_CHECKING:
    from lingstorage.common.progress import BatchProgressCallback, ProgressCallback
    from lingstorage.schemas import FileInfo, ListFilesResult, UploadResult


class StorageError(RuntimeError):
    """Raised when a storage operation fails."""


class TransportError(StorageError):
    """Raised when every attempt failed before an HTTP response arrived."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class APIError(StorageError):
    """Raised when the service answers with an error status or envelope."""

    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        super().__init__(f"lingstorage api error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


@dataclass(frozen=True, slots=True)
class UploadOptions:
    """Server-side processing options shared by every upload variant."""

    allowed_types: tuple[str, ...] = ()
    compress: bool = False
    quality: int = 0
    watermark: bool = False
    watermark_text: str = ""
    watermark_position: str = ""


@dataclass(frozen=True, slots=True)
class UploadFailure:
    """A batch item that could not be uploaded."""

    file: str
    error: str


@dataclass(slots=True)
class BatchUploadResult:
    """Aggregated outcome of a batch upload."""

    total: int
    success: list["UploadResult"] = field(default_factory=list)
    failed: list[UploadFailure] = field(default_factory=list)


class StorageClient(Protocol):
    """Protocol defining the operations of a LingStorage client.

    Every method blocks until the remote call completes.
    """

    def upload_file(
        self,
        file_path: str,
        *,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: "ProgressCallback | None" = None,
    ) -> "UploadResult":
        """Upload a local file.

        Args:
            file_path: Path of the file to send; its basename is the filename.
            bucket: Target bucket, or the server default when empty.
            key: Object key, or a server-assigned key when empty.
            options: Compression, watermark and type-filter options.
            on_progress: Called with ``(uploaded, total)`` after every read.

        Returns:
            UploadResult describing the stored object.

        Raises:
            StorageError: If the file cannot be read or the upload fails.
        """
        ...

    def upload_bytes(
        self,
        data: bytes,
        filename: str,
        *,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: "ProgressCallback | None" = None,
    ) -> "UploadResult":
        """Upload an in-memory payload under ``filename``."""
        ...

    def upload_stream(
        self,
        stream: BinaryIO,
        filename: str,
        *,
        size: int = 0,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: "ProgressCallback | None" = None,
    ) -> "UploadResult":
        """Upload the remaining content of a binary stream.

        Args:
            stream: Readable binary file-like object.
            filename: Name reported to the server.
            size: Payload size; measured from seekable streams when <= 0.
                Progress is only reported when the size is known.
        """
        ...

    def batch_upload(
        self,
        files: Sequence[str],
        *,
        bucket: str = "",
        key_prefix: str = "",
        options: UploadOptions | None = None,
        on_progress: "BatchProgressCallback | None" = None,
        on_file_progress: "ProgressCallback | None" = None,
    ) -> BatchUploadResult:
        """Upload local files one after another.

        Per-file failures are collected in ``BatchUploadResult.failed`` and
        never abort the batch.
        """
        ...

    def delete_file(self, bucket: str, key: str) -> None:
        """Delete an object."""
        ...

    def copy_file(self, src_bucket: str, src_key: str, dest_bucket: str, dest_key: str) -> None:
        """Copy an object to a new bucket/key."""
        ...

    def move_file(self, src_bucket: str, src_key: str, dest_bucket: str, dest_key: str) -> None:
        """Move an object to a new bucket/key."""
        ...

    def get_file_url(self, bucket: str, key: str, expires: timedelta | None = None) -> str:
        """Get an access URL, optionally valid for ``expires``."""
        ...

    def get_file_info(self, bucket: str, key: str) -> "FileInfo":
        """Get object metadata."""
        ...

    def list_files(
        self,
        bucket: str,
        *,
        prefix: str = "",
        marker: str = "",
        delimiter: str = "",
        limit: int = 0,
    ) -> "ListFilesResult":
        """List one page of objects in a bucket."""
        ...

    def list_buckets(self, *, tag_condition: str = "", shared: bool = False) -> list[str]:
        """List bucket names visible to the API key."""
        ...

    def create_bucket(self, bucket_name: str, region: str = "") -> None:
        """Create a bucket."""
        ...

    def delete_bucket(self, bucket_name: str) -> None:
        """Delete a bucket."""
        ...

    def set_bucket_private(self, bucket_name: str, is_private: bool) -> None:
        """Switch a bucket between private and public access."""
        ...

    def get_bucket_domains(self, bucket_name: str) -> list[str]:
        """List the domains bound to a bucket."""
        ...

    def ping(self) -> None:
        """Check that the server answers.

        Raises:
            StorageError: If the server is unreachable or answers >= 400.
        """
        ...
