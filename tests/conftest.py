from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from lingstorage.common.config import ClientConfig
from lingstorage.storage.http_client import HttpStorageClient


@pytest.fixture()
def config():
    return ClientConfig(
        base_url="http://storage.test/",
        api_key="test-key",
        api_secret="test-secret",
    )


@pytest.fixture()
def mock_session():
    """Mock requests.Session used by HttpStorageClient."""
    session = MagicMock()
    with patch.object(HttpStorageClient, "_build_session", return_value=session):
        yield session


@pytest.fixture()
def client(config, mock_session):
    return HttpStorageClient(config)


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("time.sleep") as sleep:
        yield sleep
