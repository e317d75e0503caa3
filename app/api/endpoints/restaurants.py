"""Restaurant and review endpoints."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from app.api.deps import get_projection, get_review_service, get_storage
from app.core.errors import InvalidArgument, NotFound, TransactionConflict, Unavailable
from app.db.session import get_store
from app.db.store import DocumentStore
from app.schemas.restaurant import ImageUploadOut, RestaurantCreate, RestaurantFilters, RestaurantOut
from app.schemas.review import ReviewCreate, ReviewOut
from app.services.images import update_restaurant_image
from app.services.restaurants import RestaurantProjection
from app.services.reviews import ReviewService
from utils.s3_storage import S3StorageManager

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.get("", response_model=list[RestaurantOut])
def list_restaurants(
    filters: RestaurantFilters = Depends(),
    projection: RestaurantProjection = Depends(get_projection),
) -> list[RestaurantOut]:
    """Return restaurants filtered by category/city/price, sorted by rating or review count."""
    return projection.list_restaurants(filters)


@router.post("", response_model=RestaurantOut, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    payload: RestaurantCreate,
    projection: RestaurantProjection = Depends(get_projection),
) -> RestaurantOut:
    return projection.create_restaurant(payload.model_dump())


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(
    restaurant_id: str,
    projection: RestaurantProjection = Depends(get_projection),
) -> RestaurantOut:
    restaurant = projection.get_restaurant_by_id(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@router.get("/{restaurant_id}/reviews", response_model=list[ReviewOut])
def list_reviews(
    restaurant_id: str,
    projection: RestaurantProjection = Depends(get_projection),
) -> list[ReviewOut]:
    """Reviews for a restaurant, newest first."""
    return projection.list_reviews(restaurant_id)


@router.post("/{restaurant_id}/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def add_review(
    restaurant_id: str,
    payload: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
) -> ReviewOut:
    """Submit a rating; the restaurant's aggregates are updated in the same transaction."""
    try:
        return service.add_review_to_restaurant(restaurant_id, payload)
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (TransactionConflict, Unavailable) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.post("/{restaurant_id}/image", response_model=ImageUploadOut)
def upload_image(
    restaurant_id: str,
    image: UploadFile = File(...),
    store: DocumentStore = Depends(get_store),
    storage: S3StorageManager = Depends(get_storage),
) -> ImageUploadOut:
    """Upload a photo and make it the restaurant's picture."""
    try:
        url = update_restaurant_image(
            store,
            storage,
            restaurant_id,
            image.filename,
            image.file.read(),
            image.content_type or "image/jpeg",
        )
    except InvalidArgument as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (TransactionConflict, Unavailable) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return ImageUploadOut(photo=url)
