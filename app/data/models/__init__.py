#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.basket import BasketModel
from app.data.models.basket_item import BasketItemModel

__all__ = ["BasketModel", "BasketItemModel"]
