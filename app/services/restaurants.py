"""Read side: restaurant listings, single restaurants and their reviews."""

from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.core.errors import SubscriptionSetupError
from app.db.store import DocumentStore, Subscription
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.schemas.restaurant import (
    SORT_BY_RATING,
    SORT_BY_REVIEW,
    RestaurantFilters,
    RestaurantOut,
)
from app.schemas.review import ReviewOut

logger = logging.getLogger(__name__)


def apply_query_filters(stmt: Select, filters: RestaurantFilters) -> Select:
    """Add equality predicates and the ordering clause described by ``filters``."""
    if filters.category:
        stmt = stmt.where(Restaurant.category == filters.category)
    if filters.city:
        stmt = stmt.where(Restaurant.city == filters.city)
    if filters.price:
        stmt = stmt.where(Restaurant.price == filters.price_tier)

    if filters.sort == SORT_BY_RATING or not filters.sort:
        stmt = stmt.order_by(Restaurant.avg_rating.desc())
    elif filters.sort == SORT_BY_REVIEW:
        stmt = stmt.order_by(Restaurant.num_ratings.desc())
    return stmt


def _coerce_filters(filters: RestaurantFilters | dict | None) -> RestaurantFilters:
    if filters is None:
        return RestaurantFilters()
    if isinstance(filters, RestaurantFilters):
        return filters
    return RestaurantFilters.model_validate(filters)


def _reviews_stmt(restaurant_id: str) -> Select:
    return (
        select(Review)
        .where(Review.restaurant_id == restaurant_id)
        .order_by(Review.timestamp.desc(), Review.seq.desc())
    )


class RestaurantProjection:
    """Exposes stored restaurants and reviews as plain schema objects."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    @staticmethod
    def _fetch_restaurants(filters: RestaurantFilters) -> Callable[[Session], list[RestaurantOut]]:
        stmt = apply_query_filters(select(Restaurant), filters)

        def fetch(db: Session) -> list[RestaurantOut]:
            return [RestaurantOut.model_validate(r) for r in db.execute(stmt).scalars().all()]

        return fetch

    @staticmethod
    def _fetch_reviews(restaurant_id: str) -> Callable[[Session], list[ReviewOut]]:
        stmt = _reviews_stmt(restaurant_id)

        def fetch(db: Session) -> list[ReviewOut]:
            return [ReviewOut.model_validate(r) for r in db.execute(stmt).scalars().all()]

        return fetch

    def list_restaurants(self, filters: RestaurantFilters | dict | None = None) -> list[RestaurantOut]:
        """Return every restaurant matching ``filters``."""
        fetch = self._fetch_restaurants(_coerce_filters(filters))
        with self.store.session() as db:
            return fetch(db)

    def watch_restaurants(
        self,
        filters: RestaurantFilters | dict | None,
        callback: Callable[[list[RestaurantOut]], None],
    ) -> Subscription:
        """Deliver the full filtered listing now and after every change to it."""
        if not callable(callback):
            logger.error("watch_restaurants: the callback parameter is not a function")
            raise SubscriptionSetupError("The callback parameter is not a function")
        return self.store.watch(self._fetch_restaurants(_coerce_filters(filters)), callback)

    def get_restaurant_by_id(self, restaurant_id: str | None) -> RestaurantOut | None:
        if not restaurant_id:
            logger.warning("Invalid ID received: %r", restaurant_id)
            return None
        with self.store.session() as db:
            restaurant = db.get(Restaurant, restaurant_id)
            if restaurant is None:
                logger.info("Restaurant %s not found", restaurant_id)
                return None
            return RestaurantOut.model_validate(restaurant)

    def list_reviews(self, restaurant_id: str | None) -> list[ReviewOut]:
        """Reviews of one restaurant, most recent first."""
        if not restaurant_id:
            logger.warning("Invalid restaurantId received: %r", restaurant_id)
            return []
        with self.store.session() as db:
            return self._fetch_reviews(restaurant_id)(db)

    def watch_reviews(
        self,
        restaurant_id: str | None,
        callback: Callable[[list[ReviewOut]], None],
    ) -> Subscription:
        if not restaurant_id:
            logger.error("watch_reviews: invalid restaurantId received: %r", restaurant_id)
            raise SubscriptionSetupError("No restaurant ID has been provided.")
        if not callable(callback):
            logger.error("watch_reviews: the callback parameter is not a function")
            raise SubscriptionSetupError("The callback parameter is not a function")
        return self.store.watch(self._fetch_reviews(restaurant_id), callback)

    def create_restaurant(self, data: dict) -> RestaurantOut:
        """Insert a restaurant with empty rating statistics."""

        def insert(db: Session) -> Restaurant:
            restaurant = Restaurant(**data, num_ratings=0, sum_rating=0.0, avg_rating=0.0)
            db.add(restaurant)
            db.flush()
            return restaurant

        restaurant = self.store.run_transaction(insert)
        logger.info("Created restaurant %s (%s)", restaurant.id, restaurant.name)
        return RestaurantOut.model_validate(restaurant)
