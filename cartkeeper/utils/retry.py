# cartkeeper/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests

from cartkeeper.domain.errors import ConcurrentCartUpdate, DuplicateOwner
from cartkeeper.utils.settings import CART_WRITE_ATTEMPTS


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


def write_retry():
    # przegrany wyscig o koszyk -> pobierz ponownie i powtorz cala operacje
    return retry(
        reraise=True,
        stop=stop_after_attempt(CART_WRITE_ATTEMPTS),
        wait=wait_exponential(multiplier=0.02, min=0.02, max=0.2),
        retry=retry_if_exception_type((DuplicateOwner, ConcurrentCartUpdate)),
    )
