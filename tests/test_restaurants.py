from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.models.review import Review
from app.schemas.restaurant import RestaurantFilters
from app.services.restaurants import RestaurantProjection
from app.services.reviews import ReviewService


@pytest.fixture
def seeded(add_restaurant):
    return {
        "luigi": add_restaurant(name="Luigi", category="Italian", city="Seoul", price=2,
                                num_ratings=10, sum_rating=30.0, avg_rating=3.0),
        "pasta": add_restaurant(name="Pasta Bar", category="Italian", city="Busan", price=2,
                                num_ratings=2, sum_rating=9.0, avg_rating=4.5),
        "trattoria": add_restaurant(name="Trattoria", category="Italian", city="Seoul", price=3,
                                    num_ratings=4, sum_rating=18.0, avg_rating=4.5 - 0.1),
        "taco": add_restaurant(name="Taco Stand", category="Mexican", city="Seoul", price=1,
                               num_ratings=30, sum_rating=60.0, avg_rating=2.0),
        "empty": add_restaurant(name="New Place", category="Korean", city="Seoul", price=2),
    }


def _names(restaurants):
    return [r.name for r in restaurants]


# ── Filters ──────────────────────────────────────────────────────────────


def test_no_filters_returns_everything_by_rating(store, seeded):
    restaurants = RestaurantProjection(store).list_restaurants()

    assert _names(restaurants) == ["Pasta Bar", "Trattoria", "Luigi", "Taco Stand", "New Place"]
    ratings = [r.avg_rating for r in restaurants]
    assert ratings == sorted(ratings, reverse=True)


def test_category_and_price_filters_combine(store, seeded):
    restaurants = RestaurantProjection(store).list_restaurants({"category": "Italian", "price": "$$"})

    assert {r.name for r in restaurants} == {"Luigi", "Pasta Bar"}
    assert all(r.category == "Italian" and r.price == 2 for r in restaurants)


def test_city_filter(store, seeded):
    restaurants = RestaurantProjection(store).list_restaurants(RestaurantFilters(city="Busan"))
    assert _names(restaurants) == ["Pasta Bar"]


def test_filter_without_matches_returns_empty_list(store, seeded):
    assert RestaurantProjection(store).list_restaurants({"category": "French"}) == []


def test_sort_by_review_count(store, seeded):
    restaurants = RestaurantProjection(store).list_restaurants({"sort": "Review"})

    counts = [r.num_ratings for r in restaurants]
    assert counts == sorted(counts, reverse=True)
    assert restaurants[0].name == "Taco Stand"


def test_explicit_rating_sort_matches_default(store, seeded):
    projection = RestaurantProjection(store)
    assert _names(projection.list_restaurants({"sort": "Rating"})) == _names(projection.list_restaurants({}))


def test_unknown_sort_applies_no_ordering_but_still_filters(store, seeded):
    restaurants = RestaurantProjection(store).list_restaurants({"sort": "Name", "city": "Seoul"})
    assert {r.name for r in restaurants} == {"Luigi", "Trattoria", "Taco Stand", "New Place"}


def test_price_tier_is_symbol_count():
    assert RestaurantFilters(price="$$$").price_tier == 3
    assert RestaurantFilters().price_tier is None


# ── Single restaurant ────────────────────────────────────────────────────


def test_get_restaurant_by_id(store, seeded):
    restaurant = RestaurantProjection(store).get_restaurant_by_id(seeded["luigi"])

    assert restaurant.name == "Luigi"
    assert restaurant.num_ratings == 10
    assert isinstance(restaurant.timestamp, datetime)
    assert restaurant.timestamp.tzinfo == timezone.utc


@pytest.mark.parametrize("restaurant_id", [None, "", "does-not-exist"])
def test_get_restaurant_by_id_degrades_to_none(store, seeded, restaurant_id):
    assert RestaurantProjection(store).get_restaurant_by_id(restaurant_id) is None


def test_new_restaurant_starts_with_empty_statistics(store):
    created = RestaurantProjection(store).create_restaurant(
        {"name": "Fresh", "category": "Thai", "city": "Seoul", "price": 1, "photo": None}
    )

    assert created.id
    assert (created.num_ratings, created.sum_rating, created.avg_rating) == (0, 0.0, 0.0)
    assert created.timestamp.tzinfo == timezone.utc


# ── Reviews ──────────────────────────────────────────────────────────────


def test_list_reviews_newest_first(store, add_restaurant):
    restaurant_id = add_restaurant()
    base = datetime(2024, 6, 1, 12, 0, 0)

    def insert(db):
        for offset, user in [(0, "first"), (2, "third"), (1, "second")]:
            db.add(Review(restaurant_id=restaurant_id, rating=4, text="", user_id=user,
                          timestamp=base + timedelta(minutes=offset)))

    store.run_transaction(insert)

    reviews = RestaurantProjection(store).list_reviews(restaurant_id)

    assert [r.user_id for r in reviews] == ["third", "second", "first"]
    assert reviews[0].timestamp == datetime(2024, 6, 1, 12, 2, tzinfo=timezone.utc)


def test_list_reviews_only_returns_own_reviews(store, add_restaurant):
    first = add_restaurant(name="One")
    second = add_restaurant(name="Two")
    service = ReviewService(store)
    service.add_review_to_restaurant(first, {"rating": 5, "text": "a", "user_id": "u1"})
    service.add_review_to_restaurant(second, {"rating": 2, "text": "b", "user_id": "u2"})

    reviews = RestaurantProjection(store).list_reviews(first)

    assert [r.user_id for r in reviews] == ["u1"]
    assert all(r.timestamp.tzinfo == timezone.utc for r in reviews)


@pytest.mark.parametrize("restaurant_id", [None, ""])
def test_list_reviews_without_id_is_empty(store, restaurant_id):
    assert RestaurantProjection(store).list_reviews(restaurant_id) == []


def test_reviews_submitted_in_quick_succession_are_newest_first(store, add_restaurant):
    restaurant_id = add_restaurant()
    service = ReviewService(store)
    users = [f"u{i}" for i in range(8)]
    for user in users:
        service.add_review_to_restaurant(restaurant_id, {"rating": 3, "text": "", "user_id": user})

    reviews = RestaurantProjection(store).list_reviews(restaurant_id)

    assert [r.user_id for r in reviews] == list(reversed(users))
    timestamps = [r.timestamp for r in reviews]
    assert timestamps == sorted(timestamps, reverse=True)
