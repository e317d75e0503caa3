"""
Restaurant data loader
----------------------
Reads restaurants.jsonl and stores each restaurant together with its ratings.

Each line looks like::

    {"name": "...", "category": "Italian", "city": "Seoul", "price": 2,
     "photo": null, "ratings": [{"rating": 4, "text": "...", "user_id": "u1"}]}

Ratings go through the regular review submission so the stored count, sum and
average always match the reviews that were loaded.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# load the project's .env file
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# make the app package importable when run as a script
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError

from app.core.errors import InvalidArgument
from app.db.init_db import init_db
from app.db.session import create_store
from app.db.store import DocumentStore
from app.schemas.restaurant import RestaurantCreate
from app.services.restaurants import RestaurantProjection
from app.services.reviews import ReviewService

logger = logging.getLogger("load_restaurants")


def iter_jsonl(path: Path):
    """Yield (line number, parsed value) per non-blank line; value is None when the JSON is broken."""
    with path.open("r", encoding="utf-8") as fp:
        for line_no, line in enumerate(fp, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                record = None
            yield line_no, record


def load_restaurants(jsonl_path: Path, store: DocumentStore) -> tuple[int, int, int]:
    """Load restaurants from JSONL. Returns (restaurants, ratings, skipped records)."""
    projection = RestaurantProjection(store)
    reviews = ReviewService(store)
    restaurants_loaded = 0
    ratings_loaded = 0
    skipped = 0

    for line_no, record in iter_jsonl(jsonl_path):
        if not isinstance(record, dict):
            skipped += 1
            logger.warning("Skipping line %d: not a JSON object", line_no)
            continue

        ratings = record.pop("ratings", None) or []
        try:
            payload = RestaurantCreate.model_validate(record)
        except ValidationError as exc:
            skipped += 1
            if skipped <= 5:
                logger.warning("Skipping restaurant %r: %s", record.get("name"), exc)
            continue

        restaurant = projection.create_restaurant(payload.model_dump())
        restaurants_loaded += 1

        for rating in ratings:
            try:
                reviews.add_review_to_restaurant(restaurant.id, rating)
            except InvalidArgument as exc:
                skipped += 1
                logger.warning("Skipping rating for %s: %s", restaurant.name, exc)
                continue
            ratings_loaded += 1

        if restaurants_loaded % 10 == 0:
            logger.info("%d restaurants loaded...", restaurants_loaded)

    return restaurants_loaded, ratings_loaded, skipped


def main() -> None:
    parser = argparse.ArgumentParser(description="restaurants.jsonl -> database")
    parser.add_argument(
        "--file",
        type=Path,
        default=Path("restaurants.jsonl"),
        help="restaurant JSONL file (default: ./restaurants.jsonl)",
    )
    args = parser.parse_args()

    if not args.file.exists():
        raise SystemExit(f"File not found: {args.file}")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    store = create_store()
    try:
        init_db(store)
        restaurants, ratings, skipped = load_restaurants(args.file, store)

        print("\n" + "=" * 60)
        print("Restaurant load complete")
        print("=" * 60)
        print(f"  restaurants: {restaurants}")
        print(f"  ratings:     {ratings}")
        print(f"  skipped:     {skipped}")
        print("=" * 60)
    finally:
        store.close()


if __name__ == "__main__":
    main()
