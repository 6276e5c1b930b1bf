"""Response envelopes returned by the LingStorage API.

The service wraps payloads in one of two shapes:

* ``{"success": bool, "message": str, "data": ...}``
* ``{"code": int, "msg": str, "data": ...}`` where ``code == 200`` means success

The presence of ``success`` or ``code`` selects the shape.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict


class _EnvelopeBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    message: str | None = None
    msg: str | None = None
    details: Any = None
    data: Any = None

    @property
    def failure_message(self) -> str:
        return self.message or self.msg or ""


class StatusEnvelope(_EnvelopeBase):
    """Canonical envelope carrying a boolean ``success`` flag."""

    success: bool

    @property
    def succeeded(self) -> bool:
        return self.success


class CodeEnvelope(_EnvelopeBase):
    """Secondary envelope carrying a numeric ``code``."""

    code: int

    @property
    def succeeded(self) -> bool:
        return self.code == 200


Envelope = Union[StatusEnvelope, CodeEnvelope]


def decode_envelope(payload: Any) -> Envelope | None:
    """Select the envelope shape by its discriminating field.

    Returns ``None`` when ``payload`` is not an object carrying either
    ``success`` or ``code``. Raises ``pydantic.ValidationError`` when the
    discriminator is present but malformed.
    """
    if not isinstance(payload, dict):
        return None
    if "success" in payload:
        return StatusEnvelope.model_validate(payload)
    if "code" in payload:
        return CodeEnvelope.model_validate(payload)
    return None
