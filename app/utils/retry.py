# app/utils/retry.py
import logging

from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log
import requests

from app.domain.errors import BasketVersionConflict
from app.utils.settings import BASKET_CONFLICT_RETRIES
from app.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


#optimistic locking - cala jednostka pracy powtarzana od nowa
#(nowy odczyt koszyka i nowa wersja) gdy ktos inny zmienil koszyk
def conflict_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or BASKET_CONFLICT_RETRIES),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(BasketVersionConflict),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
