# app/repos/basket_repo.py
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.orm.attributes import set_committed_value

from app.data.models.basket import BasketModel
from app.data.models.basket_item import BasketItemModel
from app.domain.errors import BasketVersionConflict, BasketConsistencyError


class BasketRepo:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self):
        """
        Jednostka pracy: commit na koncu, rollback przy kazdym wyjatku.
        Zapis pozycji i sum koszyka albo przechodzi w calosci albo wcale.
        """
        if self.db.in_transaction():
            # resztki po wczesniejszym odczycie w tej samej sesji - nie nasze, nie commitujemy
            self.db.rollback()
        try:
            yield self.db
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_basket_by_user(self, user_id: int) -> BasketModel | None:
        baskets = self.db.execute(
            select(BasketModel).where(BasketModel.user_id == user_id)
        ).scalars().all()

        if len(baskets) > 1:
            raise BasketConsistencyError(
                f"User {user_id} has {len(baskets)} baskets"
            )
        return baskets[0] if baskets else None

    def create_basket(self, user_id: int) -> BasketModel:
        basket = BasketModel(
            user_id=user_id,
            total_items=0,
            total_price=Decimal("0.00"),
            version=1,
        )
        self.db.add(basket)
        try:
            # flush od razu, zeby konflikt unique wyszedl tutaj a nie przy commit
            self.db.flush()
        except IntegrityError as e:
            raise BasketVersionConflict(f"Basket for user {user_id} created concurrently") from e
        return basket

    def get_or_create_basket(self, user_id: int) -> BasketModel:
        return self.get_basket_by_user(user_id) or self.create_basket(user_id)

    def get_items(self, basket_id: int) -> list[BasketItemModel]:
        return list(
            self.db.execute(
                select(BasketItemModel)
                .where(BasketItemModel.basket_id == basket_id)
                .order_by(BasketItemModel.id)
            ).scalars().all()
        )

    def get_item(self, basket_id: int, item_id: int) -> BasketItemModel | None:
        return self.db.execute(
            select(BasketItemModel).where(
                BasketItemModel.basket_id == basket_id,
                BasketItemModel.id == item_id,
            )
        ).scalar_one_or_none()

    def find_variant_item(
        self,
        basket_id: int,
        product_id: int,
        color: str,
        size: str,
    ) -> BasketItemModel | None:
        return self.db.execute(
            select(BasketItemModel).where(
                BasketItemModel.basket_id == basket_id,
                BasketItemModel.product_id == product_id,
                BasketItemModel.color == color,
                BasketItemModel.size == size,
            )
        ).scalar_one_or_none()

    def add_item(self, item: BasketItemModel) -> BasketItemModel:
        self.db.add(item)
        try:
            self.db.flush()
        except IntegrityError as e:
            raise BasketVersionConflict(
                f"Item for product {item.product_id} ({item.color}/{item.size}) created concurrently"
            ) from e
        return item

    def update_item(self, item: BasketItemModel) -> BasketItemModel:
        try:
            self.db.flush()
        except StaleDataError as e:
            #pozycje usunela inna transakcja
            raise BasketVersionConflict(f"Basket item {item.id} was removed by another operation") from e
        return item

    def delete_item(self, item: BasketItemModel) -> None:
        result = self.db.execute(
            delete(BasketItemModel)
            .where(BasketItemModel.id == item.id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise BasketVersionConflict(f"Basket item {item.id} was removed by another operation")
        self.db.expunge(item)

    def update_basket_totals(
        self,
        basket: BasketModel,
        total_items: int,
        total_price: Decimal,
    ) -> None:
        """
        Optimistic locking na polu version:
        UPDATE baskets SET ..., version = v + 1 WHERE id = :id AND version = v
        0 wierszy -> koszyk zmieniony przez inna transakcje.
        """
        old_version = basket.version
        result = self.db.execute(
            update(BasketModel)
            .where(
                BasketModel.id == basket.id,
                BasketModel.version == old_version,
            )
            .values(
                total_items=total_items,
                total_price=total_price,
                version=old_version + 1,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            raise BasketVersionConflict(
                f"Basket {basket.id} was modified by another operation (version {old_version})"
            )

        # stan obiektu zgodny z baza, bez ponownego UPDATE przy flush
        set_committed_value(basket, "total_items", total_items)
        set_committed_value(basket, "total_price", total_price)
        set_committed_value(basket, "version", old_version + 1)
