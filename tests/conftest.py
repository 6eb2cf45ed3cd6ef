"""Shared fixtures: a mocked S3 client wired in place of boto3.client."""

import os
from unittest.mock import MagicMock

import pytest

# must be set before s3manager.config is imported
os.environ.setdefault("S3MANAGER_STATIC_DIR", os.path.join(os.path.dirname(__file__), "static"))

from fastapi.testclient import TestClient  # noqa: E402

from s3manager import storage  # noqa: E402
from s3manager.main import app  # noqa: E402


VALID_CONFIG = {
    "region": "eu-west-1",
    "accessKeyId": "AKIATEST",
    "secretAccessKey": "secret",
}


@pytest.fixture
def valid_config():
    return dict(VALID_CONFIG)


@pytest.fixture
def s3():
    client = MagicMock(name="s3")
    client.list_buckets.return_value = {"Buckets": []}
    client.list_objects_v2.return_value = {"KeyCount": 0, "IsTruncated": False}
    client.delete_objects.return_value = {"Deleted": []}
    return client


@pytest.fixture
def boto_client(monkeypatch, s3):
    """Replace boto3.client; the returned mock records the construction kwargs."""
    factory = MagicMock(return_value=s3)
    monkeypatch.setattr(storage.boto3, "client", factory)
    return factory


@pytest.fixture
def client(boto_client):
    return TestClient(app)
