"""LingStorage client abstraction layer.

This module exposes the storage client protocol, its HTTP implementation
and the error types raised by both.
"""

from .client import (
    APIError,
    BatchUploadResult,
    StorageClient,
    StorageError,
    TransportError,
    UploadFailure,
    UploadOptions,
)
from .http_client import HttpStorageClient

__all__ = [
    "APIError",
    "BatchUploadResult",
    "HttpStorageClient",
    "StorageClient",
    "StorageError",
    "TransportError",
    "UploadFailure",
    "UploadOptions",
]
