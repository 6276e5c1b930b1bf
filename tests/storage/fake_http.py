"""Helpers building canned ``requests.Response`` objects."""

from __future__ import annotations

import json
from typing import Any

import requests


def make_response(status_code: int = 200, payload: Any = None, *, text: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = text.encode("utf-8")
    return response


def ok(data: Any = None) -> requests.Response:
    return make_response(200, {"success": True, "data": data})


def upload_ok(key: str = "uploads/a.txt", **extra: Any) -> requests.Response:
    data = {
        "key": key,
        "bucket": "test-bucket",
        "filename": key.rsplit("/", 1)[-1],
        "size": 5,
        "originalSize": 5,
        "compressed": False,
        "watermarked": False,
        "url": f"http://cdn.test/{key}",
    }
    data.update(extra)
    return ok(data)


def form_field(body: bytes, name: str) -> bytes | None:
    """Return the value of a plain multipart text field, or None."""
    marker = f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode()
    start = body.find(marker)
    if start < 0:
        return None
    start += len(marker)
    end = body.find(b"\r\n", start)
    return body[start:end]
