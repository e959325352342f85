"""
Tests for the guest cart reaper task
"""
from sqlalchemy import update

from cartkeeper.data.models.cart import CartModel
from cartkeeper.domain.owner import AccountOwner, SessionOwner
from cartkeeper.repos.cart_repo import CartRepo
from cartkeeper.tasks.expire import expire_guest_carts_task


def test_reaper_removes_only_expired_guest_carts(db):
    repo = CartRepo(db)
    stale = repo.create_empty(SessionOwner("stale-guest-token-0001"))
    repo.create_empty(SessionOwner("fresh-guest-token-0002"))
    repo.create_empty(AccountOwner(1))

    db.execute(
        update(CartModel)
        .where(CartModel.id == stale.id)
        .values(expires_at=CartModel.created_at)
        .execution_options(synchronize_session=False)
    )
    db.commit()

    assert expire_guest_carts_task() == 1

    db.expire_all()
    assert repo.find_by_owner(SessionOwner("stale-guest-token-0001")) is None
    assert repo.find_by_owner(SessionOwner("fresh-guest-token-0002")) is not None
    assert repo.find_by_owner(AccountOwner(1)) is not None
