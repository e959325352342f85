# cartkeeper/services/product_client.py
import requests

from cartkeeper.domain.schemas import ProductInfo
from cartkeeper.utils.retry import http_retry
from cartkeeper.utils.settings import PRODUCT_SERVICE_URL, PRODUCT_SERVICE_TIMEOUT
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """Read-only access to the product catalog over HTTP."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout or PRODUCT_SERVICE_TIMEOUT

    @http_retry()
    def get_by_id(self, product_id: int) -> ProductInfo | None:
        return self.get_for_display(product_id)

    def get_for_display(self, product_id: int) -> ProductInfo | None:
        """Single attempt, used where a stale or missing answer is acceptable."""
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        # brak produktu to odpowiedz, nie blad transportu
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return ProductInfo.model_validate(resp.json())
