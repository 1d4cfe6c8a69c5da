"""Notification rules, dispatcher failure handling and queued delivery"""

import arq
import pytest

from app import worker
from app.domain.appointments.events import AppointmentEvent, AppointmentEventType, AppointmentSnapshot
from app.services import notification_service
from app.services.notification_service import NotificationDispatcher, build_messages
from tests.conftest import ADMIN_EMAIL, RecordingSender

SNAPSHOT = AppointmentSnapshot(
    appointment_id="APP-MBQ1X2Y3-ABCDE",
    status="pending",
    service_category="plumbing",
    service_description="Kitchen sink is leaking",
    appointment_date="2025-06-12",
    appointment_time="10:00 AM",
    estimated_hours=2,
    hourly_rate=500,
    price=1000,
    customer_name="Asha Customer",
    customer_email="asha@example.com",
    provider_name="Ram Plumber",
    provider_email="ram@example.com",
    customer_notes="Gate code 1234",
    location="Ward 4, birtamode",
)


def event(kind, previous_status=None, **extra):
    return AppointmentEvent(kind, SNAPSHOT, previous_status=previous_status, extra=extra)


@pytest.mark.parametrize(
    "kind, audiences",
    [
        (AppointmentEventType.CREATED, ["admin"]),
        (AppointmentEventType.ADMIN_APPROVED, ["provider", "customer"]),
        (AppointmentEventType.ADMIN_REJECTED, ["customer"]),
        (AppointmentEventType.PROVIDER_ACCEPTED, ["customer", "admin"]),
        (AppointmentEventType.PROVIDER_REJECTED, ["customer", "admin"]),
        (AppointmentEventType.COMPLETED, []),
    ],
)
def test_audiences_per_event(kind, audiences):
    messages = build_messages(event(kind), ADMIN_EMAIL)
    assert [m.audience for m in messages] == audiences


@pytest.mark.parametrize(
    "previous, audiences",
    [
        ("pending", ["admin"]),
        ("admin_approved", ["admin", "provider"]),
        ("provider_accepted", ["admin", "provider"]),
    ],
)
def test_cancellation_reaches_provider_only_once_involved(previous, audiences):
    messages = build_messages(event(AppointmentEventType.CANCELLED, previous, cancelled_by="customer"), ADMIN_EMAIL)
    assert [m.audience for m in messages] == audiences


def test_user_supplied_text_is_escaped():
    hostile = AppointmentSnapshot(**{**SNAPSHOT.__dict__, "customer_notes": "<script>alert(1)</script>"})
    [message] = build_messages(AppointmentEvent(AppointmentEventType.CREATED, hostile), ADMIN_EMAIL)
    assert "<script>" not in message.mjml_content
    assert "&lt;script&gt;" in message.mjml_content


async def test_failures_are_counted_not_raised():
    sender = RecordingSender(fail_for={"asha@example.com"})
    dispatcher = NotificationDispatcher(sender, admin_email=ADMIN_EMAIL)

    result = await dispatcher.dispatch([event(AppointmentEventType.PROVIDER_ACCEPTED)])

    assert result == {"sent": 1, "failed": 1, "skipped": 0}
    assert sender.recipients() == [ADMIN_EMAIL]


async def test_missing_admin_address_is_skipped():
    sender = RecordingSender()
    dispatcher = NotificationDispatcher(sender, admin_email=None)

    result = await dispatcher.dispatch([event(AppointmentEventType.CREATED)])

    assert result == {"sent": 0, "failed": 0, "skipped": 1}
    assert sender.sent == []


def test_payload_survives_the_queue():
    original = event(AppointmentEventType.CANCELLED, "admin_approved", cancelled_by="admin", reason="Storm")
    assert AppointmentEvent.from_payload(original.to_payload()) == original


async def test_worker_delivers_queued_events(monkeypatch):
    sender = RecordingSender()
    monkeypatch.setattr(
        notification_service,
        "NotificationDispatcher",
        lambda: NotificationDispatcher(sender, admin_email=ADMIN_EMAIL),
    )
    payloads = [event(AppointmentEventType.ADMIN_APPROVED).to_payload(), {"type": "appointment.unknown"}]

    result = await worker.deliver_appointment_notifications({}, payloads)

    assert result == {"status": "completed", "sent": 2, "failed": 0, "skipped": 0}
    assert sender.recipients() == ["ram@example.com", "asha@example.com"]


class FakePool:
    def __init__(self, fail=False):
        self.jobs = []
        self.closed = False
        self.fail = fail

    async def enqueue_job(self, name, payloads):
        if self.fail:
            raise ConnectionError("redis went away")
        self.jobs.append((name, payloads))

    async def close(self):
        self.closed = True


@pytest.mark.parametrize("fail", [False, True])
async def test_enqueue_always_releases_the_pool(monkeypatch, fail):
    pool = FakePool(fail=fail)

    async def fake_create_pool(settings):
        return pool

    monkeypatch.setattr(arq, "create_pool", fake_create_pool)

    await notification_service.enqueue_appointment_events([event(AppointmentEventType.CREATED)])

    assert pool.closed
    assert len(pool.jobs) == (0 if fail else 1)
    if not fail:
        assert pool.jobs[0][0] == "deliver_appointment_notifications"
