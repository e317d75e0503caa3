"""ORM models."""

from app.models.restaurant import Restaurant  # noqa: F401
from app.models.review import Review  # noqa: F401
