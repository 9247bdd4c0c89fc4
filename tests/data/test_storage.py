import pytest
from botocore.stub import Stubber

from roomchat.app.common.exceptions import BackendError, ValidationError
from roomchat.app.common.utils.storage import StorageService


@pytest.fixture
def storage():
    service = StorageService(
        endpoint_url="https://storage.example.com/",
        region_name="kr-standard",
        access_key="test-access",
        secret_key="test-secret",
    )
    with Stubber(service.s3_client) as stubber:
        service.stubber = stubber
        yield service


@pytest.mark.asyncio
async def test_upload_object(storage):
    storage.stubber.add_response(
        "put_object",
        {},
        {"Bucket": "verification-images", "Key": "u1/a.png", "Body": b"png", "ContentType": "image/png"},
    )

    key = await storage.upload_object("verification-images", "u1/a.png", b"png", content_type="image/png")

    assert key == "u1/a.png"
    storage.stubber.assert_no_pending_responses()


@pytest.mark.asyncio
async def test_upload_object_error_is_wrapped(storage):
    storage.stubber.add_client_error("put_object", service_error_code="NoSuchBucket", http_status_code=404)

    with pytest.raises(BackendError):
        await storage.upload_object("missing", "u1/a.png", b"png")


@pytest.mark.asyncio
async def test_upload_object_requires_body(storage):
    with pytest.raises(ValidationError):
        await storage.upload_object("verification-images", "u1/a.png", b"")
    with pytest.raises(ValidationError):
        await storage.upload_object("verification-images", "", b"png")


def test_public_url(storage):
    assert storage.get_public_url("verification-audio", "/u1/a.webm") == "https://storage.example.com/verification-audio/u1/a.webm"
