#cartkeeper/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from requests import RequestException
from sqlalchemy.orm import Session

from cartkeeper.api.identity import clear_session_cookie, get_owner, require_account
from cartkeeper.data.database import get_db
from cartkeeper.domain.errors import CartError, ConcurrentCartUpdate, DuplicateOwner
from cartkeeper.domain.owner import AccountOwner, Owner
from cartkeeper.domain.schemas import (
    ItemIn,
    QuantityIn,
    CartOut,
    MergeOut,
)
from cartkeeper.services.cart_service import CartService
from cartkeeper.services.merge_service import MergeService
from cartkeeper.services.product_client import ProductClient
from cartkeeper.utils.settings import SESSION_COOKIE_NAME

router = APIRouter(prefix="/cart", tags=["cart"])


def get_product_client() -> ProductClient:
    return ProductClient()


def get_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
) -> CartService:
    return CartService(db=db, product_client=product_client)


def _to_http(e: CartError | RequestException) -> HTTPException:
    if isinstance(e, RequestException):
        return HTTPException(status_code=503, detail="Serwis produktow niedostepny")
    if isinstance(e, (ConcurrentCartUpdate, DuplicateOwner)):
        return HTTPException(status_code=409, detail=e.to_detail())
    status = 404 if isinstance(e, LookupError) else 400
    return HTTPException(status_code=status, detail=e.to_detail())


@router.get("", response_model=CartOut)
def get_cart(
    owner: Owner = Depends(get_owner),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(owner)
    except CartError as e:
        raise _to_http(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    owner: Owner = Depends(get_owner),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_product(owner, payload.product_id, payload.quantity)
    except (CartError, RequestException) as e:
        raise _to_http(e)


@router.put("/items", response_model=CartOut)
def update_item(
    payload: QuantityIn,
    owner: Owner = Depends(get_owner),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(owner, payload.product_id, payload.quantity)
    except (CartError, RequestException) as e:
        raise _to_http(e)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    owner: Owner = Depends(get_owner),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_product(owner, product_id)
    except CartError as e:
        raise _to_http(e)


@router.delete("", response_model=CartOut)
def clear_cart(
    owner: Owner = Depends(get_owner),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.clear_cart(owner)
    except CartError as e:
        raise _to_http(e)


@router.post("/merge", response_model=MergeOut)
def merge_cart(
    request: Request,
    response: Response,
    account: AccountOwner = Depends(require_account),
    db: Session = Depends(get_db),
    svc: CartService = Depends(get_service),
):
    """
    Wywolywane przez logowanie / rejestracje zaraz po wydaniu tokenu.
    Nigdy nie zwraca bledu z powodu samego koszyka.
    """
    session_token = request.cookies.get(SESSION_COOKIE_NAME)
    merged = MergeService(db).merge_guest_cart(account.account_id, session_token)

    # token goscia traci znaczenie niezaleznie od wyniku
    clear_session_cookie(response)

    if merged is None:
        return {"merged": False, "message": "Brak koszyka goscia do scalenia", "cart": None}

    return {"merged": True, "message": "Koszyk goscia scalony", "cart": svc.present(merged)}
