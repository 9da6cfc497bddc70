#app/data/models/basket.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, Numeric
from sqlalchemy.orm import relationship

from app.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class BasketModel(Base):
    __tablename__ = "baskets"

    id = Column(Integer, primary_key=True)
    # jeden koszyk na usera - unique chroni przed wyscigiem przy pierwszym add
    user_id = Column(Integer, nullable=False, unique=True, index=True)

    total_items = Column(Integer, nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "BasketItemModel",
        back_populates="basket",
        cascade="all, delete-orphan",
    )
