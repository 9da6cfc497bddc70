# app/services/product_client.py
import requests

from app.domain.errors import ProductNotFound
from app.domain.schemas import ProductOut
from app.utils.retry import http_retry
from app.utils.settings import PRODUCT_SERVICE_URL, PRODUCT_SERVICE_TIMEOUT
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """
    Klient product-service (katalog), tylko odczyt:
    cena i dostepne kolory / rozmiary produktu
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or PRODUCT_SERVICE_TIMEOUT

    @http_retry()
    def fetch_product(self, product_id: int) -> ProductOut:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)

        #404 to nie blad sieci, nie ponawiamy
        if resp.status_code == 404:
            raise ProductNotFound(product_id)

        resp.raise_for_status()
        return ProductOut.model_validate(resp.json())
