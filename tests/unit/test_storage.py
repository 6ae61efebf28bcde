"""
Unit tests for the R2 storage client.

The boto3 client is real but stubbed with botocore's Stubber, which checks
every call's parameters against the installed S3 service model. No network.
"""

import asyncio

import pytest
from botocore.stub import Stubber

from recruitdesk.core.coaches.export import StorageError
from recruitdesk.infrastructure.storage.client import R2StorageClient, StorageConfig

CONFIG = StorageConfig(
    access_key_id="test-access-key",
    secret_access_key="test-secret-key",
    bucket_name="coach-exports",
    endpoint_url="https://account.r2.cloudflarestorage.com",
)


@pytest.fixture
def client():
    return R2StorageClient(CONFIG)


class TestR2StorageClient:

    def test_upload_is_conditional_on_no_existing_object(self, client):
        with Stubber(client._s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {"ETag": '"etag"'},
                expected_params={
                    "Bucket": "coach-exports",
                    "Key": "camp-1/coach-export.csv",
                    "Body": b"First name",
                    "ContentType": "text/csv",
                    "CacheControl": "max-age=3600",
                    "IfNoneMatch": "*",
                    "Metadata": {"campaign-id": "camp-1"},
                },
            )

            path = asyncio.run(
                client.upload_export(b"First name", "camp-1", "coach-export.csv")
            )

            stubber.assert_no_pending_responses()

        assert path == "camp-1/coach-export.csv"

    def test_existing_object_fails_the_upload(self, client):
        with Stubber(client._s3_client) as stubber:
            stubber.add_client_error(
                "put_object",
                service_error_code="PreconditionFailed",
                http_status_code=412,
            )

            with pytest.raises(StorageError, match="Upload failed"):
                asyncio.run(client.upload_export(b"x", "camp-1", "coach-export.csv"))

    def test_presigned_url_carries_expiry(self, client):
        url = asyncio.run(
            client.get_presigned_url("camp-1/coach-export.csv", expiry_seconds=604800)
        )

        assert "camp-1/coach-export.csv" in url
        assert "X-Amz-Expires=604800" in url

    def test_delete_failure_raises_storage_error(self, client):
        with Stubber(client._s3_client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="AccessDenied")

            with pytest.raises(StorageError, match="Delete failed"):
                asyncio.run(client.delete_object("camp-1/coach-export.csv"))
