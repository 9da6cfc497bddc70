# app/services/basket_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from app.data.models.basket import BasketModel
from app.data.models.basket_item import BasketItemModel
from app.domain.enums import ColorEnum, SizeEnum
from app.domain.errors import (
    BasketConsistencyError,
    BasketItemNotFound,
    BasketNotFound,
    InvalidQuantityError,
    InvalidVariant,
    ProductNotFound,
)
from app.domain.schemas import ProductOut
from app.repos.basket_repo import BasketRepo
from app.services.product_client import ProductClient
from app.utils.retry import conflict_retry
from app.utils.settings import LEGACY_FLAT_ITEM_PRICE
from app.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT)


class BasketService:
    """
    Use case'y dla koszyka uzytkownika (jeden koszyk na usera)
    query (get_basket) tylko odczyt
    commands (add_item, remove_item) zmieniaja pozycje i sumy koszyka
    w jednej transakcji, z optimistic lockingiem na wersji koszyka

    Niezmiennik: total_items == suma quantity, total_price == suma price pozycji
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        flat_item_price: bool = LEGACY_FLAT_ITEM_PRICE,
    ):
        self.repo = BasketRepo(db)
        self.product_client = product_client
        self.flat_item_price = flat_item_price

    #query - odczyt
    def get_basket(self, user_id: int) -> Dict[str, Any]:
        try:
            with self.repo.transaction():
                basket = self.repo.get_basket_by_user(user_id)
                if basket is None:
                    raise BasketNotFound(user_id)

                items = self.repo.get_items(basket.id)
                view = {
                    "id": basket.id,
                    "user_id": basket.user_id,
                    "total_items": basket.total_items,
                    "total_price": _money(basket.total_price),
                    "items": [],
                }
        except BasketConsistencyError as e:
            logger.critical(f"Basket invariant broken for user {user_id}: {e}")
            raise

        # katalog pytamy raz na produkt
        products: Dict[int, ProductOut | None] = {}
        for item in items:
            if item.product_id not in products:
                try:
                    products[item.product_id] = self.product_client.fetch_product(item.product_id)
                except ProductNotFound:
                    # produkt zniknal z katalogu, pozycja zostaje bez opisu produktu
                    logger.warning(f"Product {item.product_id} from basket {basket.id} is missing in catalog")
                    products[item.product_id] = None

            product = products[item.product_id]

            view["items"].append(
                {
                    "id": item.id,
                    "color": item.color,
                    "size": item.size,
                    "quantity": item.quantity,
                    "price": _money(item.price),
                    "product": self._narrow_to_variant(product, item) if product is not None else None,
                }
            )

        return view

    @staticmethod
    def _narrow_to_variant(product: ProductOut, item: BasketItemModel) -> ProductOut:
        # produkt "tak jak skonfigurowany w tej pozycji" - tylko wybrany kolor i rozmiar
        return product.model_copy(
            update={
                "colors": [c for c in product.colors if c.value == item.color],
                "sizes": [s for s in product.sizes if s.value == item.size],
            }
        )

    #commands
    def add_item(
        self,
        user_id: int,
        product_id: int,
        color: ColorEnum | str,
        size: SizeEnum | str,
        quantity: int,
    ) -> Dict[str, Any]:
        try:
            color = ColorEnum(color)
        except ValueError:
            raise InvalidVariant("color", str(color))
        try:
            size = SizeEnum(size)
        except ValueError:
            raise InvalidVariant("size", str(size))

        logger.info(f"Pobieranie danych produktu {product_id} z product-service")
        product = self.product_client.fetch_product(product_id)
        unit_price = _money(product.price)

        try:
            return self._add_item(user_id, product, unit_price, color, size, quantity)
        except BasketConsistencyError as e:
            logger.critical(f"Basket invariant broken for user {user_id}: {e}")
            raise

    @conflict_retry()
    def _add_item(
        self,
        user_id: int,
        product: ProductOut,
        unit_price: Decimal,
        color: ColorEnum,
        size: SizeEnum,
        quantity: int,
    ) -> Dict[str, Any]:
        with self.repo.transaction():
            basket = self.repo.get_basket_by_user(user_id)
            existing_item = None
            if basket is not None:
                existing_item = self.repo.find_variant_item(
                    basket.id, product.id, color.value, size.value
                )

            if existing_item:
                return self._merge_item(basket, existing_item, unit_price, quantity)

            # walidacja przed jakimkolwiek zapisem
            if color not in product.colors:
                raise InvalidVariant("color", color.value)
            if size not in product.sizes:
                raise InvalidVariant("size", size.value)
            if quantity <= 0:
                raise InvalidQuantityError("Quantity must be greater than 0 for the first add of a variant")

            if basket is None:
                basket = self.repo.get_or_create_basket(user_id)
                logger.info(f"Utworzono koszyk {basket.id} dla uzytkownika {user_id}")

            return self._create_item(basket, product, unit_price, color, size, quantity)

    def _merge_item(
        self,
        basket: BasketModel,
        item: BasketItemModel,
        unit_price: Decimal,
        quantity: int,
    ) -> Dict[str, Any]:
        new_quantity = item.quantity + quantity

        if new_quantity <= 0:
            logger.info(
                f"Pozycja {item.id} w koszyku {basket.id} spada do {new_quantity}, usuwam"
            )
            result = self._item_view(item, removed=True)
            self.repo.delete_item(item)
            self.repo.update_basket_totals(
                basket,
                total_items=basket.total_items - item.quantity,
                total_price=_money(basket.total_price) - _money(item.price),
            )
            return result

        logger.info(
            f"Produkt {item.product_id} juz jest w koszyku {basket.id}, zmieniam ilosc "
            f"z {item.quantity} na {new_quantity}"
        )
        item.quantity = new_quantity
        item.price = unit_price * new_quantity
        self.repo.update_item(item)

        # przyrostowo o delte, nie przeliczamy sum od zera
        self.repo.update_basket_totals(
            basket,
            total_items=basket.total_items + quantity,
            total_price=_money(basket.total_price) + unit_price * quantity,
        )
        return self._item_view(item)

    def _create_item(
        self,
        basket: BasketModel,
        product: ProductOut,
        unit_price: Decimal,
        color: ColorEnum,
        size: SizeEnum,
        quantity: int,
    ) -> Dict[str, Any]:
        if self.flat_item_price:
            line_price = unit_price
        else:
            line_price = unit_price * quantity

        logger.info(f"Dodaje nowy produkt {product.id} ({color.value}/{size.value}) do koszyka {basket.id}")
        item = self.repo.add_item(
            BasketItemModel(
                basket_id=basket.id,
                product_id=product.id,
                color=color.value,
                size=size.value,
                quantity=quantity,
                price=line_price,
            )
        )

        self.repo.update_basket_totals(
            basket,
            total_items=basket.total_items + quantity,
            total_price=_money(basket.total_price) + line_price,
        )
        return self._item_view(item)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, str]:
        try:
            self._remove_item(user_id, item_id)
        except BasketConsistencyError as e:
            logger.critical(f"Basket invariant broken for user {user_id}: {e}")
            raise

        return {"message": "Product successfully deleted from basket!"}

    @conflict_retry()
    def _remove_item(self, user_id: int, item_id: int) -> None:
        with self.repo.transaction():
            basket = self.repo.get_basket_by_user(user_id)
            if basket is None:
                raise BasketNotFound(user_id)

            item = self.repo.get_item(basket.id, item_id)
            if item is None:
                raise BasketItemNotFound(item_id)

            logger.info(f"Usuwanie pozycji {item_id} z koszyka {basket.id}")

            self.repo.delete_item(item)
            self.repo.update_basket_totals(
                basket,
                total_items=basket.total_items - item.quantity,
                total_price=_money(basket.total_price) - _money(item.price),
            )

    @staticmethod
    def _item_view(item: BasketItemModel, removed: bool = False) -> Dict[str, Any]:
        return {
            "id": item.id,
            "basket_id": item.basket_id,
            "product_id": item.product_id,
            "color": item.color,
            "size": item.size,
            "quantity": item.quantity,
            "price": _money(item.price),
            "removed": removed,
        }
