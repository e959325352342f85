# cartkeeper/api/identity.py
from fastapi import Header, HTTPException, Request, Response

from cartkeeper.domain.owner import AccountOwner, Owner, SessionOwner
from cartkeeper.services.identity_service import bearer_token, decode_account_token, resolve_owner
from cartkeeper.utils.settings import GUEST_CART_TTL_SECONDS, SESSION_COOKIE_NAME


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=GUEST_CART_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME)


def get_owner(request: Request, response: Response) -> Owner:
    resolved = resolve_owner(
        request.headers.get("Authorization"),
        request.cookies.get(SESSION_COOKIE_NAME),
    )

    #ciasteczko goscia odnawiamy przy kazdym zadaniu, jak TTL koszyka
    if isinstance(resolved.owner, SessionOwner):
        set_session_cookie(response, resolved.owner.session_id)

    return resolved.owner


def require_account(authorization: str | None = Header(None)) -> AccountOwner:
    token = bearer_token(authorization)
    account_id = decode_account_token(token) if token else None
    if account_id is None:
        raise HTTPException(status_code=401, detail="Wymagany poprawny token Bearer")
    return AccountOwner(account_id)
