"""Restaurant model."""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, String, func
from sqlalchemy.orm import relationship

from app.db.base import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Restaurant(Base):
    """Restaurant metadata plus running rating statistics."""

    __tablename__ = "restaurants"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    city = Column(String(100), nullable=False, index=True)
    price = Column(Integer, nullable=False, index=True)  # tier 1-4
    photo = Column(String(1024))
    num_ratings = Column(Integer, nullable=False, default=0)
    sum_rating = Column(Float, nullable=False, default=0.0)
    avg_rating = Column(Float, nullable=False, default=0.0, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    version = Column(Integer, nullable=False)  # optimistic concurrency

    reviews = relationship("Review", back_populates="restaurant", cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}
