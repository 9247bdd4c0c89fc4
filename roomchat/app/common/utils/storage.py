import asyncio
import logging
import os

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from roomchat.app.common.exceptions import BackendError, ValidationError

logger = logging.getLogger(__name__)

load_dotenv()


class StorageService:
    """S3 호환 Object Storage 래퍼."""

    def __init__(
        self,
        service_name: str = "s3",
        endpoint_url: str | None = None,
        region_name: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ):
        self.endpoint_url = (endpoint_url or os.getenv("STORAGE_ENDPOINT", "https://kr.object.ncloudstorage.com")).rstrip("/")
        self.s3_client = boto3.client(
            service_name,
            endpoint_url=self.endpoint_url,
            aws_access_key_id=access_key or os.getenv("STORAGE_ACCESS_KEY"),
            aws_secret_access_key=secret_key or os.getenv("STORAGE_SECRET_KEY"),
            region_name=region_name or os.getenv("STORAGE_REGION", "kr-standard"),
        )

    async def upload_object(self, bucket: str, key: str, data: bytes, content_type: str | None = None) -> str:
        if not key:
            raise ValidationError("Object key is required")
        if not data:
            raise ValidationError("Object body must not be empty")

        extra = {"ContentType": content_type} if content_type else {}
        try:
            # boto3는 동기 클라이언트이므로 스레드에서 실행
            await asyncio.to_thread(self.s3_client.put_object, Bucket=bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload object {bucket}/{key}: {e}")
            raise BackendError(f"Failed to upload object: {e}")

        logger.info(f"Uploaded object {bucket}/{key} ({len(data)} bytes)")
        return key

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.endpoint_url}/{bucket}/{path.lstrip('/')}"
