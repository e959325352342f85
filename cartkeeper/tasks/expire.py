# cartkeeper/tasks/expire.py
from datetime import datetime, timezone

from cartkeeper.celery_worker import celery_app
from cartkeeper.data.database import SessionLocal
from cartkeeper.repos.cart_repo import CartRepo
from cartkeeper.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="cartkeeper.tasks.expire.expire_guest_carts_task")
def expire_guest_carts_task():
    logger.info("Expire guest carts task started")

    db = SessionLocal()
    try:
        removed = CartRepo(db).delete_expired(datetime.now(timezone.utc))
        logger.info(f"Removed {removed} expired guest carts")
        return removed
    finally:
        db.close()
