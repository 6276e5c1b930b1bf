"""Pydantic models for file and bucket payloads.

Field aliases follow the camelCase names used on the wire; models accept
both the alias and the Python attribute name.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class UploadResult(_WireModel):
    """Outcome of a successful upload."""

    key: str = ""
    bucket: str = ""
    filename: str = ""
    size: int = 0
    original_size: int = Field(default=0, alias="originalSize")
    compressed: bool = False
    watermarked: bool = False
    url: str = ""


class FileInfo(_WireModel):
    """Metadata of a stored object."""

    key: str = ""
    size: int = 0
    last_modified: datetime | None = Field(default=None, alias="lastModified")
    etag: str = ""
    content_type: str = Field(default="", alias="contentType")


class ListFilesResult(_WireModel):
    """One page of a bucket listing."""

    files: list[FileInfo] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    next_marker: str = Field(default="", alias="nextMarker")
    is_truncated: bool = Field(default=False, alias="isTruncated")

    @field_validator("files", "directories", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


class FileUrl(_WireModel):
    url: str = ""


class BucketList(_WireModel):
    buckets: list[str] = Field(default_factory=list)

    @field_validator("buckets", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value


class BucketDomains(_WireModel):
    domains: list[str] = Field(default_factory=list)

    @field_validator("domains", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value
