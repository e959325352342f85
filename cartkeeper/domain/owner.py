"""
Cart owner: either an authenticated account or an anonymous session.

A cart belongs to exactly one of the two. The variants are separate types,
so "both" or "neither" cannot be expressed by an ``Owner`` value; the
storage layer keeps two exclusive columns and converts through
``owner_from_columns`` / ``owner_columns``.
"""
from dataclasses import dataclass
from typing import Union

from cartkeeper.domain.errors import InvalidOwner


@dataclass(frozen=True)
class AccountOwner:
    account_id: int

    @property
    def kind(self) -> str:
        return "account"

    def __str__(self) -> str:
        return f"account:{self.account_id}"


@dataclass(frozen=True)
class SessionOwner:
    session_id: str

    @property
    def kind(self) -> str:
        return "session"

    def __str__(self) -> str:
        # nie logujemy calego tokenu
        return f"session:{self.session_id[:8]}"


Owner = Union[AccountOwner, SessionOwner]


def owner_from_columns(account_id: int | None, session_id: str | None) -> Owner:
    if account_id is not None and session_id is not None:
        raise InvalidOwner("Cart cannot have both an account and a session owner")
    if account_id is not None:
        return AccountOwner(account_id)
    if session_id:
        return SessionOwner(session_id)
    raise InvalidOwner("Cart must have either an account or a session owner")


def owner_columns(owner: Owner) -> dict:
    if isinstance(owner, AccountOwner):
        return {"account_id": owner.account_id, "session_id": None}
    if isinstance(owner, SessionOwner):
        if not owner.session_id:
            raise InvalidOwner("Session owner needs a non-empty session id")
        return {"account_id": None, "session_id": owner.session_id}
    raise InvalidOwner(f"Unsupported owner {owner!r}")
