#cartkeeper/data/models/cart.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship

from cartkeeper.data.database import Base
from cartkeeper.data.models.cart_item import CartItemModel
from cartkeeper.domain.owner import Owner, owner_columns, owner_from_columns


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    # sqlite oddaje naiwne daty, zapisujemy zawsze w UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)

    # dokladnie jedno z dwoch, unikalne -> jeden koszyk na wlasciciela
    account_id = Column(Integer, nullable=True, unique=True)
    session_id = Column(String(64), nullable=True, unique=True)

    total_price = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    version = Column(Integer, nullable=False, default=1)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=CartItemModel.id,
    )

    __table_args__ = (
        CheckConstraint(
            "(account_id IS NULL) <> (session_id IS NULL)",
            name="ck_carts_single_owner",
        ),
        CheckConstraint("total_price >= 0", name="ck_carts_total_non_negative"),
    )

    @property
    def owner(self) -> Owner:
        return owner_from_columns(self.account_id, self.session_id)

    @owner.setter
    def owner(self, owner: Owner) -> None:
        cols = owner_columns(owner)
        self.account_id = cols["account_id"]
        self.session_id = cols["session_id"]

    def is_expired(self, now: datetime) -> bool:
        expires = as_utc(self.expires_at)
        return expires is not None and now >= expires

    def find_line(self, product_id: int) -> CartItemModel | None:
        return next((i for i in self.items if i.product_id == product_id), None)

    def add_line(self, product_id: int, quantity: int, unit_price: Decimal) -> CartItemModel:
        """Additive on quantity, last write wins on the price snapshot."""
        line = self.find_line(product_id)
        if line:
            line.quantity += quantity
            line.unit_price = unit_price
            return line

        line = CartItemModel(product_id=product_id, quantity=quantity, unit_price=unit_price)
        self.items.append(line)
        return line

    def remove_line(self, product_id: int) -> bool:
        line = self.find_line(product_id)
        if line is None:
            return False
        self.items.remove(line)
        return True

    def clear_lines(self) -> None:
        self.items.clear()
