"""
Tests for the HTTP product client and the dev catalog app
"""
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from cartkeeper.product_service.main import app as product_app
from cartkeeper.services.product_client import ProductClient


def _response(status_code, payload=None):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return resp


@patch("cartkeeper.services.product_client.requests.get")
def test_get_by_id_parses_product(mock_get):
    mock_get.return_value = _response(
        200, {"id": 1, "name": "Keyboard", "price": 199.99, "stock": 3, "is_available": True}
    )

    product = ProductClient(base_url="http://catalog/").get_by_id(1)

    mock_get.assert_called_once_with("http://catalog/products/1", timeout=2.0)
    assert product.price == Decimal("199.99")
    assert product.stock == 3


@patch("cartkeeper.services.product_client.requests.get")
def test_missing_product_is_none(mock_get):
    mock_get.return_value = _response(404)

    assert ProductClient().get_by_id(99) is None
    assert mock_get.call_count == 1


@patch("cartkeeper.services.product_client.requests.get")
def test_transport_errors_are_retried_then_raised(mock_get):
    mock_get.side_effect = requests.ConnectionError("down")

    with pytest.raises(requests.ConnectionError):
        ProductClient().get_by_id(1)

    assert mock_get.call_count == 3


@patch("cartkeeper.services.product_client.requests.get")
def test_display_lookup_is_not_retried(mock_get):
    mock_get.side_effect = requests.ConnectionError("down")

    with pytest.raises(requests.ConnectionError):
        ProductClient().get_for_display(1)

    assert mock_get.call_count == 1


def test_dev_catalog_serves_products():
    client = TestClient(product_app)

    assert client.get("/products/3").json()["stock"] == 5
    assert client.get("/products/404").status_code == 404
