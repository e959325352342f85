# cartkeeper/repos/cart_repo.py
from datetime import datetime, timezone, timedelta

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cartkeeper.data.models.cart import CartModel
from cartkeeper.domain.errors import ConcurrentCartUpdate, DuplicateOwner, InvalidOwner
from cartkeeper.domain.owner import AccountOwner, Owner, SessionOwner, owner_columns, owner_from_columns
from cartkeeper.domain.totals import compute_total, to_money
from cartkeeper.utils.settings import GUEST_CART_TTL_SECONDS
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Repozytorium koszykow kluczowanych wlascicielem.

    Jeden koszyk na wlasciciela gwarantuja unikalne kolumny ``account_id`` /
    ``session_id``, wiec wyscigi przy tworzeniu rozstrzyga baza.
    Kazdy ``save`` przelicza pola pochodne i podbija ``version`` w tej samej
    transakcji, ktora zapisuje pozycje.
    """

    def __init__(self, db: Session, guest_ttl_seconds: int = GUEST_CART_TTL_SECONDS):
        self.db = db
        self.guest_ttl = timedelta(seconds=guest_ttl_seconds)

    def _owner_filter(self, owner: Owner):
        if isinstance(owner, AccountOwner):
            return CartModel.account_id == owner.account_id
        if isinstance(owner, SessionOwner):
            return CartModel.session_id == owner.session_id
        raise InvalidOwner(f"Unsupported owner {owner!r}")

    def _expiry_for(self, owner: Owner, now: datetime) -> datetime | None:
        if isinstance(owner, SessionOwner):
            return now + self.guest_ttl
        return None

    # =====================================================
    # READ
    # =====================================================
    def find_by_owner(self, owner: Owner, now: datetime | None = None) -> CartModel | None:
        cart = self.db.execute(
            select(CartModel)
            .where(self._owner_filter(owner))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if cart is None:
            return None

        #wygasly koszyk goscia traktujemy jak nieistniejacy
        if cart.is_expired(now or datetime.now(timezone.utc)):
            logger.info(f"Koszyk {cart.id} ({owner}) wygasl, usuwam")
            self.db.delete(cart)
            self.db.commit()
            return None

        return cart

    # =====================================================
    # WRITE
    # =====================================================
    def create_empty(self, owner: Owner) -> CartModel:
        now = datetime.now(timezone.utc)
        cart = CartModel(
            total_price=to_money(0),
            version=1,
            created_at=now,
            updated_at=now,
            expires_at=self._expiry_for(owner, now),
        )
        cart.owner = owner

        self.db.add(cart)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateOwner(f"Cart for {owner} already exists") from e

        self.db.refresh(cart)
        logger.info(f"Utworzono nowy koszyk {cart.id} dla {owner}")
        return cart

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # UPDATE carts SET ... WHERE id = :id AND version = :old
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def save(self, cart: CartModel, discard: CartModel | None = None) -> CartModel:
        """
        Zapis koszyka w jednej transakcji.
        ``discard`` jest usuwany w tej samej transakcji (scalenie koszyka goscia).
        """
        try:
            owner = owner_from_columns(cart.account_id, cart.session_id)
        except InvalidOwner:
            self.db.rollback()
            raise

        now = datetime.now(timezone.utc)
        old_version = cart.version
        new_data = {
            **owner_columns(owner),
            "total_price": compute_total(cart.items),
            "updated_at": now,
            "expires_at": self._expiry_for(owner, now),
            "version": old_version + 1,
        }

        try:
            if discard is not None:
                self.db.delete(discard)
            self.db.flush()
            rowcount = self.update_cart_version(cart.id, old_version, new_data)
        except IntegrityError as e:
            self.db.rollback()
            raise ConcurrentCartUpdate(f"Cart {cart.id} write rejected: {e.orig}") from e

        # Optimistic locking, 0 rows -> ktos inny zapisal wczesniej
        if rowcount == 0:
            self.db.rollback()
            raise ConcurrentCartUpdate(f"Cart {cart.id} was modified by another operation")

        self.db.commit()
        self.db.refresh(cart)
        return cart

    def delete(self, owner: Owner) -> bool:
        cart = self.db.execute(
            select(CartModel).where(self._owner_filter(owner))
        ).scalar_one_or_none()

        if cart is None:
            return False

        self.db.delete(cart)
        self.db.commit()
        logger.info(f"Usunieto koszyk {cart.id} ({owner})")
        return True

    def delete_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        carts = self.db.execute(
            select(CartModel).where(
                CartModel.session_id.is_not(None),
                CartModel.expires_at <= now,
            )
        ).scalars().all()

        for cart in carts:
            self.db.delete(cart)
        self.db.commit()

        return len(carts)

    def rollback(self):
        self.db.rollback()
