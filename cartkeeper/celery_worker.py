# cartkeeper/celery_worker.py
from celery import Celery

from cartkeeper.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "cart",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski musza byc zaimportowane, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "cartkeeper.tasks.expire",
)

# koszyki gosci po TTL, leniwy odczyt i tak je ukrywa
celery_app.conf.beat_schedule = {
    "expire-guest-carts-every-minute": {
        "task": "cartkeeper.tasks.expire.expire_guest_carts_task",
        "schedule": 60.0,
    },
}

celery_app.conf.timezone = "UTC"
