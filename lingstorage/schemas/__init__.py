"""Wire-format models for LingStorage API payloads."""

from .envelope import CodeEnvelope, Envelope, StatusEnvelope, decode_envelope
from .files import (
    BucketDomains,
    BucketList,
    FileInfo,
    FileUrl,
    ListFilesResult,
    UploadResult,
)

__all__ = [
    "BucketDomains",
    "BucketList",
    "CodeEnvelope",
    "Envelope",
    "FileInfo",
    "FileUrl",
    "ListFilesResult",
    "StatusEnvelope",
    "UploadResult",
    "decode_envelope",
]
