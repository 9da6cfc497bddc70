#app/api/routers/basket.py
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import (
    ConflictError,
    InvalidQuantityError,
    NotFoundError,
)
from app.domain.schemas import (
    BasketItemIn,
    BasketItemOut,
    BasketOut,
    MessageOut,
)
from app.services.basket_service import BasketService
from app.services.product_client import ProductClient

router = APIRouter(prefix="/basket", tags=["basket"])


def get_product_client() -> ProductClient:
    return ProductClient()


def current_user_id(x_user_id: int | None = Header(default=None)) -> int:
    #identyfikacja usera robi gateway, tutaj tylko naglowek
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing user identity")
    return x_user_id


def get_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
) -> BasketService:
    return BasketService(db=db, product_client=product_client)


@router.get("", response_model=BasketOut)
def get_basket(
    user_id: int = Depends(current_user_id),
    svc: BasketService = Depends(get_service),
):
    try:
        return svc.get_basket(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{product_id}", response_model=BasketItemOut)
def add_item(
    product_id: int,
    payload: BasketItemIn,
    user_id: int = Depends(current_user_id),
    svc: BasketService = Depends(get_service),
):
    try:
        return svc.add_item(
            user_id=user_id,
            product_id=product_id,
            color=payload.color,
            size=payload.size,
            quantity=payload.quantity,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidQuantityError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{item_id}", response_model=MessageOut)
def remove_item(
    item_id: int,
    user_id: int = Depends(current_user_id),
    svc: BasketService = Depends(get_service),
):
    try:
        return svc.remove_item(user_id, item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
