"""Review model."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.models.restaurant import new_id


class Review(Base):
    """A single rating left on a restaurant. Rows are never updated."""

    __tablename__ = "reviews"

    id = Column(String(32), primary_key=True, default=new_id)
    restaurant_id = Column(
        String(32), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating = Column(Float, nullable=False)  # 0-5
    text = Column(Text, nullable=False, default="")
    user_id = Column(String(128), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    # position within the restaurant, breaks ties between equal timestamps
    seq = Column(Integer, nullable=False, default=0)

    restaurant = relationship("Restaurant", back_populates="reviews")

    __mapper_args__ = {"eager_defaults": True}
