"""HTTP implementation of the LingStorage client.

Requests go through ``requests`` sessions sharing one connection pool. Each
call is retried by ``tenacity`` on transport failures and 5xx responses with
a linear backoff, then the response envelope is decoded into a schema model
or an ``APIError``.

Dependencies:
    - requests
    - tenacity (retry policy)
    - urllib3 (multipart encoding)
    - pydantic (response models)
"""

from __future__ import annotations

import io
import logging
import os
import threading
from datetime import timedelta
from typing import Any, BinaryIO, Sequence, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError
from requests.adapters import HTTPAdapter
from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_incrementing,
)
from urllib3.filepost import encode_multipart_formdata

from lingstorage.common.config import ClientConfig, get_config
from lingstorage.common.durations import format_go_duration
from lingstorage.common.progress import (
    BatchProgressCallback,
    ProgressCallback,
    ProgressReader,
)
from lingstorage.constants import (
    BUCKETS_PATH,
    FILES_PATH,
    HEADER_API_KEY,
    HEADER_API_SECRET,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    UPLOAD_PATH,
)
from lingstorage.schemas import (
    BucketDomains,
    BucketList,
    FileInfo,
    FileUrl,
    ListFilesResult,
    UploadResult,
    decode_envelope,
)
from lingstorage.storage.client import (
    APIError,
    BatchUploadResult,
    StorageError,
    TransportError,
    UploadFailure,
    UploadOptions,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_READ_CHUNK_SIZE = 32 * 1024
_FILE_CONTENT_TYPE = "application/octet-stream"

# Failures raised while talking to the server. Other RequestExceptions
# (MissingSchema, InvalidURL, InvalidHeader, ...) come from building the request.
_TRANSPORT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


def _is_server_error(response: requests.Response) -> bool:
    return response.status_code >= 500


def _give_up(retry_state: RetryCallState) -> requests.Response:
    outcome = retry_state.outcome
    if outcome is not None and outcome.failed:
        exc = outcome.exception()
        raise TransportError(
            f"Request failed after {retry_state.attempt_number} attempts: {exc}",
            attempts=retry_state.attempt_number,
        ) from exc
    return outcome.result()


class HttpStorageClient:
    """LingStorage client speaking the service's public HTTP API.

    Every thread gets its own ``requests.Session``; all sessions are mounted
    on one ``HTTPAdapter``, so the connection pool is shared while cookie and
    header state stays per thread. An instance may therefore be used from
    several threads at once.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._adapter = HTTPAdapter()
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @staticmethod
    def _build_session() -> requests.Session:
        return requests.Session()

    @property
    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._build_session()
            session.mount("http://", self._adapter)
            session.mount("https://", self._adapter)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    @classmethod
    def from_environment(cls) -> "HttpStorageClient":
        return cls(get_config())

    @property
    def config(self) -> ClientConfig:
        return self._config

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._adapter.close()
        self._local = threading.local()

    def __enter__(self) -> "HttpStorageClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- uploads -----------------------------------------------------------

    def upload_file(
        self,
        file_path: str,
        *,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        try:
            source = open(file_path, "rb")
        except OSError as exc:
            raise StorageError(f"Failed to open file: {exc}") from exc

        with source:
            try:
                size = os.fstat(source.fileno()).st_size
            except OSError as exc:
                raise StorageError(f"Failed to get file info: {exc}") from exc
            reader: Any = source
            if on_progress is not None:
                reader = ProgressReader(source, size, on_progress)
            return self._upload(
                reader,
                os.path.basename(file_path),
                bucket=bucket,
                key=key,
                options=options,
            )

    def upload_bytes(
        self,
        data: bytes,
        filename: str,
        *,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        reader: Any = io.BytesIO(data)
        if on_progress is not None:
            reader = ProgressReader(reader, len(data), on_progress)
        return self._upload(reader, filename, bucket=bucket, key=key, options=options)

    def upload_stream(
        self,
        stream: BinaryIO,
        filename: str,
        *,
        size: int = 0,
        bucket: str = "",
        key: str = "",
        options: UploadOptions | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        if size <= 0:
            size = _remaining_size(stream)
        reader: Any = stream
        if on_progress is not None and size > 0:
            reader = ProgressReader(stream, size, on_progress)
        return self._upload(reader, filename, bucket=bucket, key=key, options=options)

    def batch_upload(
        self,
        files: Sequence[str],
        *,
        bucket: str = "",
        key_prefix: str = "",
        options: UploadOptions | None = None,
        on_progress: BatchProgressCallback | None = None,
        on_file_progress: ProgressCallback | None = None,
    ) -> BatchUploadResult:
        total = len(files)
        result = BatchUploadResult(total=total)

        for index, file_path in enumerate(files):
            if on_progress is not None:
                on_progress(index, total, file_path)
            key = f"{key_prefix}/{os.path.basename(file_path)}" if key_prefix else ""
            try:
                uploaded = self.upload_file(
                    file_path,
                    bucket=bucket,
                    key=key,
                    options=options,
                    on_progress=on_file_progress,
                )
            except StorageError as exc:
                result.failed.append(UploadFailure(file=file_path, error=str(exc)))
                continue
            result.success.append(uploaded)

        if on_progress is not None:
            on_progress(total, total, "")
        return result

    def _upload(
        self,
        reader: Any,
        filename: str,
        *,
        bucket: str,
        key: str,
        options: UploadOptions | None,
    ) -> UploadResult:
        options = options or UploadOptions()
        content = _read_all(reader)

        fields: list[tuple[str, Any]] = [
            ("file", (filename, content, _FILE_CONTENT_TYPE)),
        ]
        if bucket:
            fields.append(("bucket", bucket))
        if key:
            fields.append(("key", key))
        if options.compress:
            fields.append(("compress", "true"))
            if options.quality > 0:
                fields.append(("quality", str(options.quality)))
        if options.watermark:
            fields.append(("watermark", "true"))
            if options.watermark_text:
                fields.append(("watermarkText", options.watermark_text))
            if options.watermark_position:
                fields.append(("watermarkPosition", options.watermark_position))
        body, content_type = encode_multipart_formdata(fields)

        params = [("allowedTypes", allowed) for allowed in options.allowed_types]
        response = self._send(
            "POST",
            self._url(UPLOAD_PATH),
            params=params or None,
            data=body,
            content_type=content_type,
        )
        return _parse(UploadResult, self._decode_data(response))

    # -- objects -----------------------------------------------------------

    def delete_file(self, bucket: str, key: str) -> None:
        response = self._send("DELETE", self._url(_file_path(bucket, key)))
        self._expect_ok(response)

    def copy_file(self, src_bucket: str, src_key: str, dest_bucket: str, dest_key: str) -> None:
        self._transfer("copy", src_bucket, src_key, dest_bucket, dest_key)

    def move_file(self, src_bucket: str, src_key: str, dest_bucket: str, dest_key: str) -> None:
        self._transfer("move", src_bucket, src_key, dest_bucket, dest_key)

    def _transfer(
        self, action: str, src_bucket: str, src_key: str, dest_bucket: str, dest_key: str
    ) -> None:
        response = self._send(
            "POST",
            self._url(_file_path(src_bucket, src_key, action)),
            json={"destBucket": dest_bucket, "destKey": dest_key},
        )
        self._expect_ok(response)

    def get_file_url(self, bucket: str, key: str, expires: timedelta | None = None) -> str:
        params = None
        if expires is not None and expires > timedelta(0):
            params = {"expires": format_go_duration(expires)}
        response = self._send("GET", self._url(_file_path(bucket, key, "url")), params=params)
        return _parse(FileUrl, self._decode_data(response)).url

    def get_file_info(self, bucket: str, key: str) -> FileInfo:
        response = self._send("GET", self._url(_file_path(bucket, key, "info")))
        return _parse(FileInfo, self._decode_data(response))

    def list_files(
        self,
        bucket: str,
        *,
        prefix: str = "",
        marker: str = "",
        delimiter: str = "",
        limit: int = 0,
    ) -> ListFilesResult:
        params: dict[str, str] = {}
        if prefix:
            params["prefix"] = prefix
        if marker:
            params["marker"] = marker
        if delimiter:
            params["delimiter"] = delimiter
        if limit > 0:
            params["limit"] = str(limit)
        response = self._send(
            "GET",
            self._url(f"{_bucket_path(bucket)}/files"),
            params=params or None,
        )
        return _parse(ListFilesResult, self._decode_data(response))

    # -- buckets -----------------------------------------------------------

    def list_buckets(self, *, tag_condition: str = "", shared: bool = False) -> list[str]:
        params: dict[str, str] = {}
        if tag_condition:
            params["tagCondition"] = tag_condition
        if shared:
            params["shared"] = "true"
        response = self._send("GET", self._url(BUCKETS_PATH), params=params or None)
        return _parse(BucketList, self._decode_data(response)).buckets

    def create_bucket(self, bucket_name: str, region: str = "") -> None:
        response = self._send(
            "POST",
            self._url(BUCKETS_PATH),
            json={"bucketName": bucket_name, "region": region},
        )
        self._expect_ok(response)

    def delete_bucket(self, bucket_name: str) -> None:
        response = self._send("DELETE", self._url(_bucket_path(bucket_name)))
        self._expect_ok(response)

    def set_bucket_private(self, bucket_name: str, is_private: bool) -> None:
        response = self._send(
            "PUT",
            self._url(f"{_bucket_path(bucket_name)}/private"),
            json={"isPrivate": is_private},
        )
        self._expect_ok(response)

    def get_bucket_domains(self, bucket_name: str) -> list[str]:
        response = self._send("GET", self._url(f"{_bucket_path(bucket_name)}/domains"))
        return _parse(BucketDomains, self._decode_data(response)).domains

    def ping(self) -> None:
        response = self._send("HEAD", self._config.base_url)
        if response.status_code >= 400:
            raise APIError(
                response.status_code,
                f"ping failed with status code: {response.status_code}",
            )

    # -- transport ---------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.base_url}{path}"

    def _headers(self, content_type: str | None = None) -> dict[str, str]:
        headers = {HEADER_USER_AGENT: self._config.user_agent}
        if self._config.api_key:
            headers[HEADER_API_KEY] = self._config.api_key
        if self._config.api_secret:
            headers[HEADER_API_SECRET] = self._config.api_secret
        if content_type:
            headers[HEADER_CONTENT_TYPE] = content_type
        return headers

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: Any = None,
        data: bytes | None = None,
        content_type: str | None = None,
    ) -> requests.Response:
        """Issue a request, retrying transport failures and 5xx responses.

        Attempt ``n`` (1-based) is followed by an ``n`` second pause when
        another attempt remains. The last response is returned whatever its
        status; ``TransportError`` is raised when the last attempt produced
        no response at all. Errors building the request are raised as
        ``StorageError`` without retrying.

        ``config.timeout`` bounds connecting and each socket read of an
        attempt, not the attempt as a whole.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self._config.retry_count + 1),
            wait=wait_incrementing(start=1, increment=1),
            retry=retry_if_exception_type(_TRANSPORT_ERRORS) | retry_if_result(_is_server_error),
            retry_error_callback=_give_up,
            before_sleep=before_sleep_log(logger, logging.DEBUG),
        )
        headers = self._headers(content_type)
        try:
            return retrying(
                self._attempt,
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=headers,
            )
        except requests.RequestException as exc:
            raise StorageError(f"Failed to create request: {exc}") from exc

    def _attempt(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("%s %s", method, url)
        return self._session.request(method, url, timeout=self._config.timeout, **kwargs)

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.status_code == 200:
            return
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("msg") or ""
            raise APIError(response.status_code, str(message), payload.get("details"))
        raise APIError(response.status_code, response.text)

    def _decode_data(self, response: requests.Response) -> Any:
        self._raise_for_status(response)
        try:
            payload = response.json()
        except ValueError as exc:
            raise StorageError(f"Failed to parse response: {exc}") from exc
        envelope = _decode_envelope(payload)
        if envelope is None:
            raise APIError(response.status_code, "response carries no success envelope")
        if not envelope.succeeded:
            raise APIError(response.status_code, envelope.failure_message, envelope.details)
        return envelope.data

    def _expect_ok(self, response: requests.Response) -> None:
        self._raise_for_status(response)
        if not response.content:
            return
        try:
            payload = response.json()
        except ValueError:
            # plain-text acknowledgements are accepted
            return
        envelope = _decode_envelope(payload)
        if envelope is not None and not envelope.succeeded:
            raise APIError(response.status_code, envelope.failure_message, envelope.details)


def _decode_envelope(payload: Any):
    try:
        return decode_envelope(payload)
    except ValidationError as exc:
        raise StorageError(f"Failed to parse response: {exc}") from exc


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data if data is not None else {})
    except ValidationError as exc:
        raise StorageError(f"Failed to parse response: {exc}") from exc


def _read_all(reader: Any) -> bytes:
    chunks: list[bytes] = []
    try:
        while True:
            chunk = reader.read(_READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
    except OSError as exc:
        raise StorageError(f"Failed to copy file data: {exc}") from exc
    return b"".join(chunks)


def _remaining_size(stream: BinaryIO) -> int:
    seekable = getattr(stream, "seekable", None)
    if seekable is None or not seekable():
        return 0
    try:
        current = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(current)
    except OSError:
        return 0
    return max(end - current, 0)


def _bucket_path(bucket: str) -> str:
    return f"{BUCKETS_PATH}/{quote(bucket, safe='')}"


def _file_path(bucket: str, key: str, action: str = "") -> str:
    path = f"{FILES_PATH}/{quote(bucket, safe='')}/{quote(key, safe='/')}"
    return f"{path}/{action}" if action else path
