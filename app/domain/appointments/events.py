"""Lifecycle events emitted after an appointment change is committed"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from ...enums import AppointmentStatus


class AppointmentEventType(str, Enum):
    CREATED = "appointment.created"
    ADMIN_APPROVED = "appointment.admin_approved"
    ADMIN_REJECTED = "appointment.admin_rejected"
    PROVIDER_ACCEPTED = "appointment.provider_accepted"
    PROVIDER_REJECTED = "appointment.provider_rejected"
    COMPLETED = "appointment.completed"
    CANCELLED = "appointment.cancelled"


EVENT_FOR_STATUS = {
    AppointmentStatus.ADMIN_APPROVED: AppointmentEventType.ADMIN_APPROVED,
    AppointmentStatus.ADMIN_REJECTED: AppointmentEventType.ADMIN_REJECTED,
    AppointmentStatus.PROVIDER_ACCEPTED: AppointmentEventType.PROVIDER_ACCEPTED,
    AppointmentStatus.PROVIDER_REJECTED: AppointmentEventType.PROVIDER_REJECTED,
    AppointmentStatus.COMPLETED: AppointmentEventType.COMPLETED,
    AppointmentStatus.CANCELLED: AppointmentEventType.CANCELLED,
}


@dataclass(frozen=True)
class AppointmentSnapshot:
    """Plain copy of what notifications need; safe to hand to a background task or queue"""

    appointment_id: str
    status: str
    service_category: str
    service_description: str
    appointment_date: str
    appointment_time: str
    estimated_hours: int
    hourly_rate: float
    price: float
    customer_name: str
    customer_email: str
    provider_name: str
    provider_email: str
    customer_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    provider_notes: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentSnapshot":
        location = ", ".join(
            part for part in (appointment.location_address, appointment.location_district) if part
        )
        return cls(
            appointment_id=appointment.appointment_id,
            status=appointment.status,
            service_category=appointment.service_category,
            service_description=appointment.service_description,
            appointment_date=appointment.appointment_date.isoformat(),
            appointment_time=appointment.appointment_time,
            estimated_hours=appointment.estimated_hours,
            hourly_rate=appointment.hourly_rate,
            price=appointment.price,
            customer_name=appointment.customer.name,
            customer_email=appointment.customer.email,
            provider_name=appointment.provider.name,
            provider_email=appointment.provider.email,
            customer_notes=appointment.customer_notes,
            admin_notes=appointment.admin_notes,
            provider_notes=appointment.provider_notes,
            location=location or None,
        )


@dataclass(frozen=True)
class AppointmentEvent:
    type: AppointmentEventType
    appointment: AppointmentSnapshot
    # Status the appointment left; lets cancellation decide whether the provider was involved
    previous_status: Optional[str] = None
    extra: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "type": self.type.value,
            "appointment": asdict(self.appointment),
            "previous_status": self.previous_status,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "AppointmentEvent":
        return cls(
            type=AppointmentEventType(payload["type"]),
            appointment=AppointmentSnapshot(**payload["appointment"]),
            previous_status=payload.get("previous_status"),
            extra=payload.get("extra") or {},
        )
