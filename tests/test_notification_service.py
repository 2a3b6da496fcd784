import json
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest

import app.tasks
from app.config import settings
from app.core.background_tasks import drain_background_tasks
from app.schemas.booking import BookingDetails
from app.schemas.route import RouteResponse
from app.schemas.user import UserSummary
from app.services.notification_service import (
    SENDGRID_URL,
    NotificationService,
    render_cancellation_email,
    render_confirmation_email,
)


@pytest.fixture
def details() -> BookingDetails:
    route_id = uuid4()
    return BookingDetails(
        id=uuid4(),
        pnr="AB12CD34EF",
        user_id=uuid4(),
        route_id=route_id,
        travel_date=date(2026, 1, 5),
        coach="FIRST_CLASS",
        row=3,
        column=2,
        passenger_name="<b>Rue</b>",
        passenger_age=12,
        fare=Decimal("4900.00"),
        status="confirmed",
        created_at=datetime(2025, 12, 1, tzinfo=UTC),
        route=RouteResponse(
            id=route_id,
            name="Delhi to Mumbai Express",
            from_station="Delhi",
            to_station="Mumbai",
            distance_km=1400,
        ),
        user=UserSummary(username="rue", email="rue@example.com"),
        seat_label="B3",
        coach_name="1st Class",
    )


def test_confirmation_email(details):
    subject, html = render_confirmation_email(details)

    assert subject == "Booking Confirmed - PNR: AB12CD34EF"
    assert "Monday, January 5, 2026" in html
    assert "1400 km" in html
    assert "1st Class - Row 3, Seat B3" in html
    assert "4900.00" in html
    assert "&lt;b&gt;Rue&lt;/b&gt; (Age: 12)" in html
    assert "<b>Rue</b>" not in html


def test_cancellation_email(details):
    subject, html = render_cancellation_email(details)

    assert subject == "Booking Cancelled - PNR: AB12CD34EF"
    assert "January 5, 2026" in html
    assert "Delhi → Mumbai" in html
    assert "released" in html


async def test_send_email_skipped_without_api_key(monkeypatch, caplog):
    monkeypatch.setattr(settings, "sendgrid_api_key", None)

    sent = await NotificationService().send_email("rue@example.com", "Hi", "<p>Hi</p>")

    assert sent is False
    assert "not configured" in caplog.text


async def test_send_email_posts_to_sendgrid(monkeypatch, details):
    monkeypatch.setattr(settings, "sendgrid_api_key", "SG.test")
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(202)

    service = NotificationService()
    service._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    sent = await service.deliver_booking_email(NotificationService.BOOKING_CONFIRMED, details)
    await service.close()

    assert sent is True
    assert str(requests[0].url) == SENDGRID_URL
    assert requests[0].headers["Authorization"] == "Bearer SG.test"
    body = json.loads(requests[0].content)
    assert body["personalizations"][0]["to"][0]["email"] == "rue@example.com"
    assert body["subject"] == "Booking Confirmed - PNR: AB12CD34EF"


async def test_send_email_rejected_by_sendgrid(monkeypatch):
    monkeypatch.setattr(settings, "sendgrid_api_key", "SG.test")
    service = NotificationService()
    service._http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(401, text="bad key"))
    )

    assert await service.send_email("rue@example.com", "Hi", "<p>Hi</p>") is False
    await service.close()


async def test_inline_dispatch_runs_in_background(monkeypatch, details):
    monkeypatch.setattr(settings, "notification_backend", "inline")
    delivered = []
    service = NotificationService()

    async def fake_deliver(kind, booking):
        delivered.append((kind, booking.pnr))
        return True

    monkeypatch.setattr(service, "deliver_booking_email", fake_deliver)

    service.notify_booking_cancelled(details)
    assert delivered == []

    await drain_background_tasks()
    assert delivered == [(NotificationService.BOOKING_CANCELLED, "AB12CD34EF")]


async def test_celery_dispatch_enqueues_task(monkeypatch, details):
    monkeypatch.setattr(settings, "notification_backend", "celery")
    enqueued = []

    class FakeTask:
        def delay(self, kind, payload):
            enqueued.append((kind, payload))

    monkeypatch.setattr(app.tasks, "send_booking_email", FakeTask())

    NotificationService().notify_booking_confirmed(details)
    await drain_background_tasks()

    kind, payload = enqueued[0]
    assert kind == NotificationService.BOOKING_CONFIRMED
    assert payload["pnr"] == "AB12CD34EF"
    assert payload["travel_date"] == "2026-01-05"
    assert BookingDetails.model_validate(payload) == details


async def test_enqueue_failure_is_swallowed(monkeypatch, details, caplog):
    monkeypatch.setattr(settings, "notification_backend", "celery")

    class BrokenTask:
        def delay(self, kind, payload):
            raise ConnectionError("broker down")

    monkeypatch.setattr(app.tasks, "send_booking_email", BrokenTask())

    NotificationService().notify_booking_confirmed(details)
    await drain_background_tasks()

    assert "failed" in caplog.text


def test_celery_task_skips_without_api_key(monkeypatch, details):
    monkeypatch.setattr(settings, "sendgrid_api_key", None)

    result = app.tasks.send_booking_email(
        NotificationService.BOOKING_CONFIRMED, details.model_dump(mode="json")
    )

    assert result == {"status": "skipped", "pnr": "AB12CD34EF"}
