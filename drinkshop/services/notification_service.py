# drinkshop/services/notification_service.py
from drinkshop.celery_worker import celery_app
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total: str):
        send_order_notification_task.delay(user_id, order_id, total)


@celery_app.task(name="drinkshop.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total: str):
    """
    Celery task - potwierdzenie zamowienia (email transakcyjny).
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} placed, total {total} VND")

    return {"user_id": user_id, "order_id": order_id, "total": total, "status": "sent"}
