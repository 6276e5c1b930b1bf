"""Python client for the LingStorage object-storage service."""

from lingstorage.common.config import ClientConfig
from lingstorage.common.progress import ProgressMonitor
from lingstorage.schemas import FileInfo, ListFilesResult, UploadResult
from lingstorage.storage import (
    APIError,
    BatchUploadResult,
    HttpStorageClient,
    StorageClient,
    StorageError,
    TransportError,
    UploadFailure,
    UploadOptions,
)

__version__ = "1.0.0"

__all__ = [
    "APIError",
    "BatchUploadResult",
    "ClientConfig",
    "FileInfo",
    "HttpStorageClient",
    "ListFilesResult",
    "ProgressMonitor",
    "StorageClient",
    "StorageError",
    "TransportError",
    "UploadFailure",
    "UploadOptions",
    "UploadResult",
]
