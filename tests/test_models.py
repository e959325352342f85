"""
Tests for the owner type, totals and in-memory cart line handling
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from cartkeeper.data.models.cart import CartModel
from cartkeeper.domain.errors import InvalidOwner
from cartkeeper.domain.owner import AccountOwner, SessionOwner, owner_columns, owner_from_columns
from cartkeeper.domain.totals import compute_total, to_money


class TestOwner:
    def test_account_columns(self):
        assert owner_from_columns(5, None) == AccountOwner(5)
        assert owner_columns(AccountOwner(5)) == {"account_id": 5, "session_id": None}

    def test_session_columns(self):
        assert owner_from_columns(None, "tok-abc") == SessionOwner("tok-abc")
        assert owner_columns(SessionOwner("tok-abc")) == {"account_id": None, "session_id": "tok-abc"}

    def test_both_variants_rejected(self):
        with pytest.raises(InvalidOwner):
            owner_from_columns(5, "tok-abc")

    def test_neither_variant_rejected(self):
        with pytest.raises(InvalidOwner):
            owner_from_columns(None, None)

    def test_empty_session_rejected(self):
        with pytest.raises(InvalidOwner):
            owner_columns(SessionOwner(""))

    def test_session_owner_str_hides_token(self):
        owner = SessionOwner("abcdefghijklmnopqrstuvwxyz")
        assert "ijkl" not in str(owner)


class TestTotals:
    def test_empty_total_is_zero(self):
        assert compute_total([]) == Decimal("0.00")

    def test_total_sums_quantity_times_price(self):
        lines = [
            SimpleNamespace(quantity=3, unit_price=Decimal("10.00")),
            SimpleNamespace(quantity=2, unit_price=Decimal("0.10")),
        ]
        assert compute_total(lines) == Decimal("30.20")

    def test_to_money_from_float(self):
        assert to_money(0.1 + 0.2) == Decimal("0.30")


class TestCartLines:
    def test_add_line_accumulates_and_refreshes_price(self):
        cart = CartModel()
        cart.add_line(1, 2, Decimal("10.00"))
        cart.add_line(1, 3, Decimal("12.00"))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.items[0].unit_price == Decimal("12.00")

    def test_remove_line_reports_absence(self):
        cart = CartModel()
        cart.add_line(1, 1, Decimal("1.00"))

        assert cart.remove_line(1) is True
        assert cart.remove_line(1) is False
        assert cart.items == []

    def test_owner_setter_switches_variant(self):
        cart = CartModel()
        cart.owner = SessionOwner("tok-abc")
        cart.owner = AccountOwner(9)

        assert cart.account_id == 9
        assert cart.session_id is None
        assert cart.owner == AccountOwner(9)
