# drinkshop/celery_worker.py
from celery import Celery

from drinkshop.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "drinkshop",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAZNE: Explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "drinkshop.services.notification_service",
)

celery_app.conf.timezone = "Asia/Ho_Chi_Minh"
