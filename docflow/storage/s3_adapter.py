from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from docflow.config.settings import Settings
from docflow.logging.logger import Log
from docflow.storage.base import BaseDocumentStore
from docflow.storage.exceptions import ObjectNotFoundError, StorageError, StorageUnavailableError

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404"}


class S3DocumentStore(BaseDocumentStore):
    """Reads documents from an S3-compatible bucket (AWS S3 or MinIO)."""

    def __init__(self, client: Any, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3DocumentStore":
        try:
            client = boto3.client(
                "s3",
                endpoint_url=settings.s3_endpoint_url or None,
                aws_access_key_id=settings.s3_access_key or None,
                aws_secret_access_key=settings.s3_secret_key or None,
                region_name=settings.s3_region,
                config=Config(
                    signature_version="s3v4",
                    s3={"addressing_style": "path"},
                    retries={"max_attempts": 3, "mode": "standard"},
                ),
            )
        except (BotoCoreError, ValueError) as exc:
            raise StorageUnavailableError(f"Cannot create S3 client: {exc}") from exc
        Log.info(f"Using S3 bucket '{settings.s3_bucket_name}' at {settings.s3_endpoint_url}")
        return cls(client, settings.s3_bucket_name)

    def fetch(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(
                    f"Object not found: s3://{self._bucket}/{key}"
                ) from exc
            raise StorageError(f"S3 error reading s3://{self._bucket}/{key}: {code}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 unreachable reading s3://{self._bucket}/{key}: {exc}") from exc
