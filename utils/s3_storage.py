"""S3 storage manager for restaurant images.

- images/{restaurant_id}/{image_name}
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import boto3


class S3StorageManager:
    """Stores restaurant photos in S3 and hands out their public URLs."""

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region: str = "ap-northeast-2",
        public_base_url: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.s3_client = client or boto3.client(
            "s3",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region,
        )

    @staticmethod
    def _safe_name(value: str, max_len: int = 200) -> str:
        # keep the file name but drop path separators and odd characters
        safe = "".join(c if c.isalnum() or c in ("-", "_", ".") else "_" for c in value)
        return safe[:max_len] if len(safe) > max_len else safe

    @classmethod
    def image_key(cls, restaurant_id: str, image_name: str) -> str:
        return f"images/{restaurant_id}/{cls._safe_name(image_name)}"

    def upload_restaurant_image(
        self,
        restaurant_id: str,
        image_name: str,
        image_data: bytes,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload a restaurant image and return its object key."""
        key = self.image_key(restaurant_id, image_name)
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=image_data,
            ContentType=content_type,
        )
        return key

    def public_url(self, key: str) -> str:
        """Durable URL for an uploaded object."""
        if self.public_base_url:
            return f"{self.public_base_url}/{quote(key)}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{quote(key)}"
