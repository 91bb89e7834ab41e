# warranty_hub/services/image_store.py
import time
from urllib.parse import urlparse

import boto3

from warranty_hub.utils.settings import (
    R2_ENDPOINT,
    R2_REGION,
    R2_ACCESS_KEY,
    R2_SECRET_KEY,
    R2_BUCKET_NAME,
    IMAGE_URL_TTL_SECONDS,
)
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "products/"


def extract_key(stored: str) -> str:
    """
    Starsze wiersze trzymają pełny URL zamiast klucza; z takiego URL-a
    bierzemy ścieżkę bez wiodącego "/".
    """
    if stored.startswith("http"):
        return urlparse(stored).path[1:]
    return stored


class ImageStore:
    """
    Zdjęcia produktów w buckecie S3 / R2.
    W bazie zapisywany jest tylko klucz, URL podpisujemy przy odczycie.
    """

    def __init__(self, bucket: str | None = None, client=None):
        self.bucket = bucket or R2_BUCKET_NAME
        self._client = client

    @property
    def client(self):
        if self._client is None:
            kwargs = {"region_name": R2_REGION}
            if R2_ENDPOINT:
                kwargs["endpoint_url"] = R2_ENDPOINT
            if R2_ACCESS_KEY:
                kwargs["aws_access_key_id"] = R2_ACCESS_KEY
            if R2_SECRET_KEY:
                kwargs["aws_secret_access_key"] = R2_SECRET_KEY
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def put(self, data: bytes, content_type: str, filename: str) -> str:
        key = f"{KEY_PREFIX}{int(time.time() * 1000)}-{filename}"
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        logger.info(f"Stored image {key} ({len(data)} bytes)")
        return key

    def sign(self, key: str, ttl_seconds: int = IMAGE_URL_TTL_SECONDS) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "ResponseContentDisposition": "inline",
            },
            ExpiresIn=ttl_seconds,
        )

    def viewable_url(self, stored: str) -> str:
        return self.sign(extract_key(stored))
