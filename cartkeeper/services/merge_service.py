# cartkeeper/services/merge_service.py
from sqlalchemy.orm import Session

from cartkeeper.data.models.cart import CartModel
from cartkeeper.domain.owner import AccountOwner, SessionOwner
from cartkeeper.repos.cart_repo import CartRepo
from cartkeeper.utils.retry import write_retry
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)


class MergeService:
    """
    Scalanie koszyka goscia (sesji) z koszykiem konta po logowaniu
    lub rejestracji.

    Best effort: kazdy blad jest logowany i polykany, logowanie nigdy nie
    konczy sie bledem przez koszyk. W najgorszym razie zawartosc koszyka
    goscia przepada, ale nigdy nie zostaje dodana dwa razy.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)

    def merge_guest_cart(self, account_id: int, session_token: str | None) -> CartModel | None:
        """
        Use Case: Scalenie koszyka goscia po logowaniu (Command).
        Zwraca koszyk konta, jesli cos zostalo scalone, w przeciwnym razie None.
        """
        try:
            return self._merge(account_id, session_token)
        except Exception:
            logger.exception(f"Blad scalania koszyka goscia z kontem {account_id}, pomijam")
            self.db.rollback()
            return None

    @write_retry()
    def _merge(self, account_id: int, session_token: str | None) -> CartModel | None:
        if not session_token:
            return None

        guest_owner = SessionOwner(session_token)
        account_owner = AccountOwner(account_id)

        guest = self.repo.find_by_owner(guest_owner)
        if guest is None:
            logger.info(f"Brak koszyka goscia do scalenia dla konta {account_id}")
            return None

        if not guest.items:
            self.repo.delete(guest_owner)
            logger.info(f"Usunieto pusty koszyk goscia {guest.id}")
            return None

        account_cart = self.repo.find_by_owner(account_owner)

        if account_cart is None:
            # tania sciezka: przepinamy wlasciciela, pozycje zostaja
            # koszyk konta utworzony w miedzyczasie -> ConcurrentCartUpdate i retry przez fold
            guest.owner = account_owner
            self.repo.save(guest)
            logger.info(f"Koszyk goscia {guest.id} przepisany na konto {account_id}")
            return guest

        # jak Add, ale bez walidacji stanu magazynu
        merged_lines = 0
        for line in guest.items:
            account_cart.add_line(line.product_id, line.quantity, line.unit_price)
            merged_lines += 1

        # usuniecie goscia w tej samej transakcji co zapis koszyka konta
        self.repo.save(account_cart, discard=guest)

        logger.info(
            f"Scalono {merged_lines} pozycji goscia do koszyka {account_cart.id} "
            f"konta {account_id}"
        )
        return account_cart
