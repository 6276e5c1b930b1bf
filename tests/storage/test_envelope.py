"""Tests for response envelope and payload models."""

import pytest
from pydantic import ValidationError

from lingstorage.schemas import (
    CodeEnvelope,
    StatusEnvelope,
    UploadResult,
    decode_envelope,
)


def test_success_field_selects_status_envelope():
    envelope = decode_envelope({"success": True, "data": {"url": "u"}})

    assert isinstance(envelope, StatusEnvelope)
    assert envelope.succeeded
    assert envelope.data == {"url": "u"}


def test_code_field_selects_code_envelope():
    envelope = decode_envelope({"code": 200, "msg": "ok", "data": [1]})

    assert isinstance(envelope, CodeEnvelope)
    assert envelope.succeeded


def test_success_takes_precedence_over_code():
    envelope = decode_envelope({"success": False, "code": 200, "message": "denied"})

    assert isinstance(envelope, StatusEnvelope)
    assert not envelope.succeeded


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"success": False, "message": "m", "msg": "x"}, "m"),
        ({"success": False, "msg": "x"}, "x"),
        ({"code": 401, "msg": "unauthorized"}, "unauthorized"),
        ({"code": 500}, ""),
    ],
)
def test_failure_message_fallback(payload, expected):
    envelope = decode_envelope(payload)

    assert not envelope.succeeded
    assert envelope.failure_message == expected


@pytest.mark.parametrize("payload", [None, [], "text", {"data": {}}])
def test_no_discriminator(payload):
    assert decode_envelope(payload) is None


def test_malformed_discriminator_raises():
    with pytest.raises(ValidationError):
        decode_envelope({"code": "not-a-number"})


def test_upload_result_aliases():
    result = UploadResult.model_validate(
        {"key": "k", "originalSize": 2048, "size": 1024, "compressed": True}
    )

    assert result.original_size == 2048
    assert result.size == 1024
    assert result.compressed is True
    assert result.watermarked is False


def test_success_flag_lives_on_concrete_envelopes():
    from lingstorage.schemas.envelope import _EnvelopeBase

    assert "succeeded" not in vars(_EnvelopeBase)
    assert isinstance(vars(StatusEnvelope)["succeeded"], property)
    assert isinstance(vars(CodeEnvelope)["succeeded"], property)
