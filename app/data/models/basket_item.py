from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.data.database import Base


class BasketItemModel(Base):
    __tablename__ = "basket_items"

    id = Column(Integer, primary_key=True)
    basket_id = Column(Integer, ForeignKey("baskets.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    color = Column(String(20), nullable=False)
    size = Column(String(10), nullable=False)

    quantity = Column(Integer, nullable=False)
    # wartosc calej linii (cena * ilosc), nie cena jednostkowa
    price = Column(Numeric(10, 2), nullable=False)

    basket = relationship("BasketModel", back_populates="items")

    __table_args__ = (
        UniqueConstraint("basket_id", "product_id", "color", "size", name="u_basket_product_variant"),
    )
