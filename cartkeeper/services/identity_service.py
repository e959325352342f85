"""
Maps request credentials to a cart owner.

Order of precedence: a valid bearer token (account), then the guest
session cookie, then a freshly minted session token that the caller must
hand back to the client.
"""
import re
import secrets
from dataclasses import dataclass

import jwt

from cartkeeper.domain.owner import AccountOwner, Owner, SessionOwner
from cartkeeper.utils.settings import JWT_ALGORITHM, JWT_SECRET
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)

# secrets.token_urlsafe(32) daje 43 znaki
_SESSION_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{16,64}$")


@dataclass(frozen=True)
class ResolvedIdentity:
    owner: Owner
    issued_session: str | None = None


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_account_token(
    token: str,
    secret: str = JWT_SECRET,
    algorithm: str = JWT_ALGORITHM,
) -> int | None:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None

    subject = payload.get("sub", payload.get("id"))
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning("Bearer token carries no usable account id")
        return None


def is_session_token(value: str | None) -> bool:
    return bool(value) and _SESSION_TOKEN_RE.match(value) is not None


def resolve_owner(authorization: str | None, session_cookie: str | None) -> ResolvedIdentity:
    token = bearer_token(authorization)
    if token:
        account_id = decode_account_token(token)
        if account_id is not None:
            return ResolvedIdentity(AccountOwner(account_id))

    if is_session_token(session_cookie):
        return ResolvedIdentity(SessionOwner(session_cookie))

    issued = new_session_token()
    return ResolvedIdentity(SessionOwner(issued), issued_session=issued)
