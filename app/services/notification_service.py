"""
Appointment Notification Service
Turns committed lifecycle events into emails for customer, provider and admin.

Delivery is fire-and-forget: every message is attempted once, failures are
logged and counted, and nothing propagates back to the booking that caused it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from ..config import ADMIN_EMAIL
from ..domain.appointments.events import AppointmentEvent, AppointmentEventType
from ..email_templates import (
    appointment_approved_customer_template,
    appointment_approved_provider_template,
    appointment_cancelled_template,
    appointment_rejected_customer_template,
    new_appointment_admin_template,
    provider_accepted_customer_template,
    provider_declined_customer_template,
    provider_response_admin_template,
)
from ..enums import AppointmentStatus

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    async def send(self, recipient: str, subject: str, mjml_content: str) -> None: ...


@dataclass(frozen=True)
class OutboundEmail:
    audience: str  # customer | provider | admin
    recipient: Optional[str]
    subject: str
    mjml_content: str


# Statuses after which the provider already knows about the booking
_PROVIDER_INVOLVED = {AppointmentStatus.ADMIN_APPROVED.value, AppointmentStatus.PROVIDER_ACCEPTED.value}


def _on_created(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
    a = event.appointment
    return [
        OutboundEmail(
            "admin",
            admin_email,
            f"New appointment request {a.appointment_id}",
            new_appointment_admin_template(a),
        )
    ]


def _on_admin_approved(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
    a = event.appointment
    return [
        OutboundEmail(
            "provider",
            a.provider_email,
            f"New job request {a.appointment_id}",
            appointment_approved_provider_template(a),
        ),
        OutboundEmail(
            "customer",
            a.customer_email,
            "Your appointment was approved",
            appointment_approved_customer_template(a),
        ),
    ]


def _on_admin_rejected(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
    a = event.appointment
    return [
        OutboundEmail(
            "customer",
            a.customer_email,
            "Your appointment could not be approved",
            appointment_rejected_customer_template(a),
        )
    ]


def _on_provider_response(accepted: bool):
    def build(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
        a = event.appointment
        customer_template = (
            provider_accepted_customer_template if accepted else provider_declined_customer_template
        )
        return [
            OutboundEmail(
                "customer",
                a.customer_email,
                "Your appointment is confirmed" if accepted else "Your provider is unavailable",
                customer_template(a),
            ),
            OutboundEmail(
                "admin",
                admin_email,
                f"Provider {'accepted' if accepted else 'declined'} {a.appointment_id}",
                provider_response_admin_template(a, accepted),
            ),
        ]

    return build


def _on_cancelled(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
    a = event.appointment
    cancelled_by = event.extra.get("cancelled_by", "customer")
    reason = event.extra.get("reason")
    messages = [
        OutboundEmail(
            "admin",
            admin_email,
            f"Appointment {a.appointment_id} cancelled",
            appointment_cancelled_template(a, None, cancelled_by, reason),
        )
    ]
    if event.previous_status in _PROVIDER_INVOLVED:
        messages.append(
            OutboundEmail(
                "provider",
                a.provider_email,
                f"Appointment {a.appointment_id} cancelled",
                appointment_cancelled_template(a, a.provider_name, cancelled_by, reason),
            )
        )
    return messages


def _nothing(event: AppointmentEvent, admin_email: Optional[str]) -> list[OutboundEmail]:
    return []


NOTIFICATION_RULES: dict[AppointmentEventType, Callable[[AppointmentEvent, Optional[str]], list[OutboundEmail]]] = {
    AppointmentEventType.CREATED: _on_created,
    AppointmentEventType.ADMIN_APPROVED: _on_admin_approved,
    AppointmentEventType.ADMIN_REJECTED: _on_admin_rejected,
    AppointmentEventType.PROVIDER_ACCEPTED: _on_provider_response(accepted=True),
    AppointmentEventType.PROVIDER_REJECTED: _on_provider_response(accepted=False),
    AppointmentEventType.CANCELLED: _on_cancelled,
    AppointmentEventType.COMPLETED: _nothing,
}


def build_messages(event: AppointmentEvent, admin_email: Optional[str] = ADMIN_EMAIL) -> list[OutboundEmail]:
    return NOTIFICATION_RULES[event.type](event, admin_email)


class NotificationDispatcher:
    """Delivers the emails for a batch of appointment events"""

    def __init__(self, sender: Optional[NotificationSender] = None, admin_email: Optional[str] = ADMIN_EMAIL):
        if sender is None:
            from ..email_service import EmailSender

            sender = EmailSender()
        self.sender = sender
        self.admin_email = admin_email

    async def dispatch(self, events: Iterable[AppointmentEvent]) -> dict:
        result = {"sent": 0, "failed": 0, "skipped": 0}
        for event in events:
            try:
                messages = build_messages(event, self.admin_email)
            except Exception as e:
                logger.error(f"❌ Failed to render notifications for {event.type.value}: {e}")
                result["failed"] += 1
                continue

            for message in messages:
                if not message.recipient:
                    logger.debug(
                        f"⚠️ No {message.audience} address for {event.type.value} "
                        f"({event.appointment.appointment_id})"
                    )
                    result["skipped"] += 1
                    continue
                try:
                    logger.info(f"📧 Sending {event.type.value} email to {message.audience} {message.recipient}")
                    await self.sender.send(message.recipient, message.subject, message.mjml_content)
                    result["sent"] += 1
                except Exception as e:
                    result["failed"] += 1
                    logger.error(
                        f"❌ Failed to send {event.type.value} email to {message.recipient}: {e}"
                    )
        return result


async def enqueue_appointment_events(events: list[AppointmentEvent]) -> None:
    """Hand events to the ARQ worker; falls back to logging if Redis is unavailable"""
    from arq import create_pool

    from ..worker import get_redis_settings

    try:
        pool = await create_pool(get_redis_settings())
    except Exception as e:
        logger.warning(f"⚠️ Failed to queue appointment notifications: {e}")
        return

    try:
        await pool.enqueue_job(
            "deliver_appointment_notifications", [event.to_payload() for event in events]
        )
        logger.info(f"📋 Queued {len(events)} appointment notification event(s)")
    except Exception as e:
        logger.warning(f"⚠️ Failed to queue appointment notifications: {e}")
    finally:
        await pool.close()
