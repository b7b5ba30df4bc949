# gifty/services/notification_service.py
from kombu.exceptions import OperationalError

from gifty.celery_worker import celery_app
from gifty.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    The order is already committed when these run, so a broker outage is
    logged and not propagated.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        try:
            send_order_notification_task.delay(user_id, order_id)
        except OperationalError as e:
            logger.warning(f"Could not queue notification for order {order_id}: {e}")

    @staticmethod
    def send_status_notification(user_id: int, order_id: int, status: str):
        try:
            send_status_notification_task.delay(user_id, order_id, status)
        except OperationalError as e:
            logger.warning(f"Could not queue status notification for order {order_id}: {e}")


@celery_app.task(name="gifty.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    A real deployment would hand this to an email/SMS gateway; for now it logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} has been placed")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="gifty.services.notification_service.send_status_notification_task")
def send_status_notification_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "order_status": status, "status": "sent"}
