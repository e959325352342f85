from typing import Dict, Any

from requests import RequestException
from sqlalchemy.orm import Session

from cartkeeper.data.models.cart import CartModel
from cartkeeper.domain.errors import (
    InsufficientStock,
    InvalidQuantity,
    ItemNotFound,
    OutOfStock,
    ProductNotFound,
)
from cartkeeper.domain.owner import AccountOwner, Owner
from cartkeeper.domain.schemas import ProductInfo
from cartkeeper.domain.totals import to_money
from cartkeeper.repos.cart_repo import CartRepo
from cartkeeper.services.product_client import ProductClient
from cartkeeper.utils.retry import write_retry
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use Case'y dla domeny Cart, zgodnie z CQRS.
    Komendy (add, update, remove, clear) waliduja wszystko przed zmiana
    koszyka i zapisuja przez CartRepo.save; zapytanie (get) pobiera dane
    produktow do wyswietlenia w momencie odczytu.
    Kazda operacja dziala na jedynym koszyku wlasciciela, tworzonym leniwie.
    """

    def __init__(self, db: Session, product_client: ProductClient):
        self.repo = CartRepo(db)
        self.product_client = product_client

    # =====================================================
    # QUERY
    # =====================================================
    @write_retry()
    def get_cart(self, owner: Owner) -> Dict[str, Any]:
        """
        Use Case: Pobranie koszyka (Query).
        """
        cart = self._get_or_create(owner)
        return self.present(cart)

    def present(self, cart: CartModel) -> Dict[str, Any]:
        owner = cart.owner
        items = []

        for line in cart.items:
            product = self._lookup_for_display(line.product_id)
            items.append(
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "line_total": to_money(line.unit_price * line.quantity),
                    "name": product.name if product else None,
                    "image": product.image if product else None,
                    "current_price": product.price if product else None,
                    "is_available": product.is_available if product else None,
                }
            )

        return {
            "cart_id": cart.id,
            "owner": {
                "type": owner.kind,
                "account_id": owner.account_id if isinstance(owner, AccountOwner) else None,
            },
            "items": items,
            "total_price": cart.total_price,
            "item_count": sum(line.quantity for line in cart.items),
            "expires_at": cart.expires_at,
            "updated_at": cart.updated_at,
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    @write_retry()
    def add_product(self, owner: Owner, product_id: int, quantity: int) -> Dict[str, Any]:
        """
        Use Case: Dodanie produktu do koszyka (Command).

        Stan magazynu sprawdzany wzgledem zadanej ilosci, nie tego co koszyk
        bedzie zawieral po dodaniu. Istniejaca pozycja dostaje dodana ilosc
        i odswiezona cene.
        """
        if quantity < 1:
            raise InvalidQuantity("Quantity must be at least 1")

        product = self._fetch_in_stock(product_id, quantity)
        cart = self._get_or_create(owner)

        line = cart.add_line(product_id, quantity, to_money(product.price))
        self.repo.save(cart)

        logger.info(
            f"Dodano produkt {product_id} x{quantity} do koszyka {cart.id} "
            f"(ilosc pozycji {line.quantity}, wersja {cart.version})"
        )
        return self.present(cart)

    @write_retry()
    def update_quantity(self, owner: Owner, product_id: int, quantity: int) -> Dict[str, Any]:
        """
        Use Case: Zmiana ilosci pozycji (Command).
        Ilosc 0 usuwa pozycje.
        """
        if quantity < 0:
            raise InvalidQuantity("Quantity cannot be negative")

        product = self._fetch_in_stock(product_id, quantity) if quantity > 0 else None
        cart = self._get_or_create(owner)

        line = cart.find_line(product_id)
        if line is None:
            raise ItemNotFound(product_id)

        if quantity == 0:
            cart.remove_line(product_id)
        else:
            line.quantity = quantity
            line.unit_price = to_money(product.price)

        self.repo.save(cart)

        logger.info(f"Ustawiono ilosc produktu {product_id} na {quantity} w koszyku {cart.id}")
        return self.present(cart)

    @write_retry()
    def remove_product(self, owner: Owner, product_id: int) -> Dict[str, Any]:
        """
        Use Case: Usuniecie produktu z koszyka (Command). Idempotentne.
        """
        cart = self._get_or_create(owner)

        if cart.remove_line(product_id):
            self.repo.save(cart)
            logger.info(f"Usunieto produkt {product_id} z koszyka {cart.id}")

        return self.present(cart)

    @write_retry()
    def clear_cart(self, owner: Owner) -> Dict[str, Any]:
        """
        Use Case: Oproznienie koszyka (Command). Sam koszyk zostaje.
        """
        cart = self._get_or_create(owner)

        if cart.items:
            cart.clear_lines()
            self.repo.save(cart)
            logger.info(f"Koszyk {cart.id} oprozniony")

        return self.present(cart)

    # =====================================================
    # HELPERS
    # =====================================================
    def _get_or_create(self, owner: Owner) -> CartModel:
        cart = self.repo.find_by_owner(owner)
        if cart:
            return cart
        # DuplicateOwner -> retry calej operacji, drugi find zwroci koszyk zwyciezcy
        return self.repo.create_empty(owner)

    def _fetch_in_stock(self, product_id: int, quantity: int) -> ProductInfo:
        product = self.product_client.get_by_id(product_id)

        if product is None:
            raise ProductNotFound(product_id)

        if not product.is_available or product.stock <= 0:
            raise OutOfStock(product_id)

        if product.stock < quantity:
            raise InsufficientStock(product_id, product.stock)

        return product

    def _lookup_for_display(self, product_id: int) -> ProductInfo | None:
        try:
            # jedna proba, bez backoff
            return self.product_client.get_for_display(product_id)
        except RequestException as e:
            logger.warning(f"Brak danych do wyswietlenia produktu {product_id}: {e}")
            return None
