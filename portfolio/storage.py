"""
Object storage abstraction for S3-compatible buckets and in-memory testing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.config import Config


class StorageClient(Protocol):
    """Defines the operations the site needs from object storage."""

    def upload_bytes(
        self,
        bucket: str,
        name: str,
        data: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
    ) -> None:
        ...

    def remove(self, bucket: str, names: list[str]) -> None:
        ...

    def public_url(self, bucket: str, name: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage/v1/object/public"
    buckets: dict = field(default_factory=dict)

    def upload_bytes(
        self,
        bucket: str,
        name: str,
        data: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
    ) -> None:
        self.buckets.setdefault(bucket, {})[name] = data

    def remove(self, bucket: str, names: list[str]) -> None:
        stored = self.buckets.get(bucket, {})
        for name in names:
            stored.pop(name, None)

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self.base_url}/{bucket}/{name}"

    def get_bytes(self, bucket: str, name: str) -> bytes:
        stored = self.buckets.get(bucket, {}).get(name)
        if stored is None:
            raise FileNotFoundError(f"{bucket}/{name}")
        return stored


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client. Each site bucket maps to a real bucket.
    """

    endpoint: str
    region: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str = ""

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def upload_bytes(
        self,
        bucket: str,
        name: str,
        data: bytes,
        *,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
    ) -> None:
        params = {"Bucket": bucket, "Key": name, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        if cache_control:
            params["CacheControl"] = cache_control
        self._client.put_object(**params)

    def remove(self, bucket: str, names: list[str]) -> None:
        if not names:
            return
        self._client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [{"Key": name} for name in names], "Quiet": True},
        )

    def public_url(self, bucket: str, name: str) -> str:
        base = (self.public_base_url or self.endpoint).rstrip("/")
        return f"{base}/{bucket}/{name}"
