"""Booking email notifications.

Confirmation and cancellation emails are rendered as inline-styled HTML and
delivered through SendGrid. Delivery is fire-and-forget: it runs either as an
in-process background task or as a Celery task, and every failure is logged
and swallowed so it can never affect a booking that has already committed.
"""

import asyncio
import logging
from datetime import UTC, date, datetime
from html import escape
from typing import Any

import httpx

from app.config import settings
from app.core.background_tasks import run_in_background
from app.schemas.booking import BookingDetails

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


def _long_date(value: date) -> str:
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def _short_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def _field(label: str, value: str, extra: str = "") -> str:
    return f"""
        <div style="margin-bottom: 15px;">
            <div style="color: #6b7280; font-size: 12px; margin-bottom: 4px;">{label}</div>
            <div style="font-size: 16px; font-weight: 600; color: #1f2937;">{value}</div>
            {extra}
        </div>
    """


def _layout(title: str, accent: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; color: #333;">
        <div style="background: {accent}; color: white; padding: 30px; text-align: center;
                    border-radius: 8px 8px 0 0;">
            <h1 style="margin: 0; font-size: 28px;">{title}</h1>
            <p style="margin: 10px 0 0; font-size: 16px;">{escape(settings.email_from_name)} Rail Booking</p>
        </div>
        <div style="background: #f9fafb; padding: 30px; border-radius: 0 0 8px 8px;">
            {body}
            <p style="color: #9ca3af; font-size: 12px; margin-top: 24px; text-align: center;">
                &copy; {datetime.now(UTC).year} {escape(settings.email_from_name)}
            </p>
        </div>
    </body>
    </html>
    """


def render_confirmation_email(booking: BookingDetails) -> tuple[str, str]:
    """Render the booking receipt.

    Returns:
        tuple[str, str]: Subject line and HTML body
    """
    route = booking.route
    journey = "".join(
        [
            _field(
                "ROUTE",
                f"{escape(route.from_station)} → {escape(route.to_station)}",
                f'<div style="color: #6b7280; font-size: 14px;">{route.distance_km} km</div>',
            ),
            _field("TRAVEL DATE", _long_date(booking.travel_date)),
            _field(
                "COACH &amp; SEAT",
                f"{escape(booking.coach_name)} - Row {booking.row}, Seat {booking.seat_label}",
            ),
            _field(
                "PASSENGER",
                f"{escape(booking.passenger_name)} (Age: {booking.passenger_age})",
            ),
        ]
    )
    body = f"""
        <div style="background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px;
                    border: 2px solid #e5e7eb; text-align: center;">
            <h2 style="margin: 0 0 15px; color: #1f2937; font-size: 20px;">Your PNR</h2>
            <div style="font-family: 'Courier New', monospace; font-size: 32px; font-weight: bold;
                        color: #2563eb; letter-spacing: 2px;">{booking.pnr}</div>
            <p style="color: #6b7280; margin: 10px 0 0; font-size: 14px;">
                Save this PNR for future reference
            </p>
        </div>
        <div style="background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px;
                    border: 1px solid #e5e7eb;">
            <h2 style="margin: 0 0 15px; color: #1f2937; font-size: 18px;">Journey Details</h2>
            {journey}
            <div style="padding-top: 15px; border-top: 2px solid #e5e7eb;">
                <span style="color: #6b7280; font-size: 14px;">TOTAL FARE</span>
                <span style="float: right; font-size: 24px; font-weight: bold; color: #2563eb;">
                    {settings.currency_symbol}{booking.fare:.2f}
                </span>
                <div style="clear: both; text-align: right; margin-top: 5px; font-size: 12px;">
                    Pay at Station
                </div>
            </div>
        </div>
        <div style="background: #fef2f2; border: 1px solid #fecaca; padding: 15px; border-radius: 8px;">
            <h3 style="margin: 0 0 10px; color: #991b1b; font-size: 16px;">Important Instructions</h3>
            <ul style="margin: 0; padding-left: 20px; color: #7f1d1d; font-size: 14px; line-height: 1.8;">
                <li>Present this PNR at the station counter for payment before boarding</li>
                <li>Arrive at the station at least 30 minutes before departure</li>
                <li>Carry a valid government-issued ID for verification</li>
                <li>You can cancel this booking from your dashboard before the travel date</li>
            </ul>
        </div>
    """
    subject = f"Booking Confirmed - PNR: {booking.pnr}"
    return subject, _layout("Booking Confirmed!", "#2563eb", body)


def render_cancellation_email(booking: BookingDetails) -> tuple[str, str]:
    """Render the cancellation notice.

    Returns:
        tuple[str, str]: Subject line and HTML body
    """
    route = booking.route
    body = f"""
        <div style="background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px;
                    border: 1px solid #e5e7eb;">
            <p style="color: #374151; font-size: 16px; line-height: 1.6; margin: 0;">
                Your booking with PNR
                <strong style="color: #dc2626; font-family: 'Courier New', monospace;">{booking.pnr}</strong>
                has been successfully cancelled.
            </p>
        </div>
        <div style="background: white; padding: 20px; border-radius: 8px; margin-bottom: 20px;
                    border: 1px solid #e5e7eb;">
            <h2 style="margin: 0 0 15px; color: #1f2937; font-size: 18px;">Cancelled Journey Details</h2>
            {_field("ROUTE", f"{escape(route.from_station)} → {escape(route.to_station)}")}
            {_field("TRAVEL DATE", _short_date(booking.travel_date))}
            {_field("PASSENGER", escape(booking.passenger_name))}
        </div>
        <div style="background: #eff6ff; border: 1px solid #dbeafe; padding: 15px; border-radius: 8px;">
            <p style="margin: 0; color: #1e40af; font-size: 14px; line-height: 1.6;">
                Your seat has been released and is now available for other passengers.
                You can book a new ticket anytime from your dashboard.
            </p>
        </div>
    """
    subject = f"Booking Cancelled - PNR: {booking.pnr}"
    return subject, _layout("Booking Cancelled", "#dc2626", body)


class NotificationService:
    """Sends booking emails without blocking or failing the caller."""

    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"

    _renderers = {
        BOOKING_CONFIRMED: render_confirmation_email,
        BOOKING_CANCELLED: render_cancellation_email,
    }

    def __init__(self) -> None:
        """Initialize notification service."""
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    # ==================== EMAIL (SENDGRID) ====================

    async def send_email(self, to_email: str, subject: str, html_content: str) -> bool:
        """Send an email via SendGrid.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body

        Returns:
            bool: True if SendGrid accepted the message
        """
        if not settings.sendgrid_api_key:
            logger.warning("SendGrid API key not configured. Skipping email notification.")
            return False

        headers = {
            "Authorization": f"Bearer {settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }

        try:
            response = await self.http_client.post(SENDGRID_URL, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Email delivery to {to_email} failed: {e}")
            return False

        if response.status_code not in (200, 202):
            logger.error(
                f"Email delivery to {to_email} rejected: {response.status_code} {response.text}"
            )
            return False
        return True

    async def deliver_booking_email(self, kind: str, booking: BookingDetails) -> bool:
        """Render and send one booking email. Used by both dispatch backends."""
        subject, html_content = self._renderers[kind](booking)
        sent = await self.send_email(booking.user.email, subject, html_content)
        if sent:
            logger.info(f"{kind} email for PNR {booking.pnr} sent to {booking.user.email}")
        return sent

    # ==================== DISPATCH ====================

    def notify_booking_confirmed(self, booking: BookingDetails) -> None:
        """Submit the booking confirmation email. Never raises."""
        self._dispatch(self.BOOKING_CONFIRMED, booking)

    def notify_booking_cancelled(self, booking: BookingDetails) -> None:
        """Submit the cancellation email. Never raises."""
        self._dispatch(self.BOOKING_CANCELLED, booking)

    def _dispatch(self, kind: str, booking: BookingDetails) -> None:
        name = f"{kind}:{booking.pnr}"
        try:
            if settings.notification_backend == "celery":
                run_in_background(self._enqueue(kind, booking), name=name)
            else:
                run_in_background(self.deliver_booking_email(kind, booking), name=name)
        except Exception:
            logger.exception(f"Could not submit {kind} notification for PNR {booking.pnr}")

    async def _enqueue(self, kind: str, booking: BookingDetails) -> None:
        from app.tasks import send_booking_email

        payload = booking.model_dump(mode="json")
        # Publishing blocks on the broker connection; keep it off the event loop
        await asyncio.to_thread(send_booking_email.delay, kind, payload)


# Singleton instance
notification_service = NotificationService()
