# app/domain/errors.py


class BasketError(Exception):
    """Base class for basket domain errors."""


class NotFoundError(BasketError):
    pass


class ProductNotFound(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__("Product is not found with given id!")
        self.product_id = product_id


class BasketNotFound(NotFoundError):
    def __init__(self, user_id: int):
        super().__init__("User has not yet basket!")
        self.user_id = user_id


class BasketItemNotFound(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__("Basket item is not found!")
        self.item_id = item_id


class InvalidVariant(NotFoundError):
    """Color or size outside of the product's declared variants."""

    def __init__(self, field: str, value: str):
        super().__init__(f"{field.capitalize()} is not found in product!")
        self.field = field
        self.value = value


class InvalidQuantityError(BasketError):
    pass


class ConflictError(BasketError):
    pass


class BasketVersionConflict(ConflictError):
    """
    Koszyk zmieniony przez inna transakcje (wersja lub unique constraint).
    Cala operacja jest powtarzana przez conflict_retry.
    """


class BasketConsistencyError(BasketError):
    """
    Naruszenie niezmiennikow koszyka (np. dwa koszyki jednego usera).
    Nie jest bledem klienta - nie mapujemy go na 4xx.
    """
