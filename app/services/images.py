"""Restaurant photo upload."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument, NotFound
from app.db.store import DocumentStore
from app.models.restaurant import Restaurant
from utils.s3_storage import S3StorageManager

logger = logging.getLogger(__name__)


def update_restaurant_image_reference(store: DocumentStore, restaurant_id: str, public_image_url: str) -> None:
    """Point the restaurant's photo at ``public_image_url``."""

    def set_photo(db: Session) -> None:
        restaurant = db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFound(f"Restaurant {restaurant_id} does not exist.")
        restaurant.photo = public_image_url

    store.run_transaction(set_photo)


def update_restaurant_image(
    store: DocumentStore,
    storage: S3StorageManager,
    restaurant_id: str | None,
    image_name: str | None,
    image_data: bytes | None,
    content_type: str = "image/jpeg",
) -> str:
    """Upload an image for a restaurant, store its URL on the record and return the URL."""
    if not restaurant_id:
        raise InvalidArgument("No restaurant ID has been provided.")
    if not image_name or image_data is None:
        raise InvalidArgument("A valid image has not been provided.")

    with store.session() as db:
        if db.get(Restaurant, restaurant_id) is None:
            logger.warning("Image upload for unknown restaurant %s", restaurant_id)
            raise NotFound(f"Restaurant {restaurant_id} does not exist.")

    try:
        key = storage.upload_restaurant_image(restaurant_id, image_name, image_data, content_type)
        public_image_url = storage.public_url(key)
        update_restaurant_image_reference(store, restaurant_id, public_image_url)
    except Exception:
        logger.exception("Error processing image upload for restaurant %s", restaurant_id)
        raise

    logger.info("Uploaded image %s for restaurant %s", key, restaurant_id)
    return public_image_url
