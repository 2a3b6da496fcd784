"""Celery background tasks for booking email delivery."""

import asyncio
import logging

from celery import shared_task

from app.config import settings
from app.schemas.booking import BookingDetails
from app.services.notification_service import notification_service
from app.worker import celery_app  # noqa: F401  (binds shared tasks to the configured broker)

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


async def _deliver(kind: str, booking: BookingDetails) -> bool:
    try:
        return await notification_service.deliver_booking_email(kind, booking)
    finally:
        # Each asyncio.run gets a fresh loop; the pooled client must not outlive it
        await notification_service.close()


@shared_task(bind=True, max_retries=3)
def send_booking_email(self, kind: str, payload: dict):
    """Deliver a booking confirmation or cancellation email.

    Args:
        kind: NotificationService.BOOKING_CONFIRMED or BOOKING_CANCELLED
        payload: BookingDetails serialized to JSON-compatible values
    """
    booking = BookingDetails.model_validate(payload)
    sent = run_async(_deliver(kind, booking))

    if sent:
        return {"status": "sent", "pnr": booking.pnr}
    if not settings.sendgrid_api_key:
        return {"status": "skipped", "pnr": booking.pnr}

    logger.warning(f"{kind} email for PNR {booking.pnr} failed, retrying")
    raise self.retry(countdown=60)
