# app/product_service/main.py
# lokalny mock katalogu dla ProductClient (uvicorn app.product_service.main:app --port 8001)
from fastapi import FastAPI, HTTPException

from app.domain.schemas import ProductOut

app = FastAPI(title="Product Service (dev mock)")


CATALOG = [
    ProductOut(id=1, name="Basic T-Shirt", price="19.99", colors=["red", "white", "black"], sizes=["S", "M", "L", "XL"]),
    ProductOut(id=2, name="Hoodie", price="49.50", colors=["grey", "black"], sizes=["M", "L", "XL", "XXL"]),
    ProductOut(id=3, name="Denim Jacket", price="89.00", colors=["blue"], sizes=["XS", "S", "M"]),
    ProductOut(id=4, name="Summer Dress", price="64.90", colors=["yellow", "pink", "white"], sizes=["XS", "S", "M", "L"]),
]
PRODUCTS = {p.id: p for p in CATALOG}


@app.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product is not found with given id!")
    return product
