"""Dependency providers shared by the endpoints."""

from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.db.session import get_store
from app.db.store import DocumentStore
from app.services.restaurants import RestaurantProjection
from app.services.reviews import ReviewService
from utils.s3_storage import S3StorageManager


def get_projection(store: DocumentStore = Depends(get_store)) -> RestaurantProjection:
    return RestaurantProjection(store)


def get_review_service(store: DocumentStore = Depends(get_store)) -> ReviewService:
    return ReviewService(store)


@lru_cache
def get_storage() -> S3StorageManager:
    """Return a cached S3 storage manager built from settings."""
    return S3StorageManager(
        bucket_name=settings.aws_s3_bucket,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region=settings.aws_region,
        public_base_url=settings.s3_public_base_url,
    )
