"""
Appointment service - the booking lifecycle engine.

Creation snapshots the provider's rate and computes the price once. Every later
change goes through status.check_transition before anything is written, so a
rejected request leaves the stored appointment untouched. Events are emitted
only after the commit succeeds, and emission problems are logged, never raised.
"""

import logging
import math
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import MAX_BOOKING_DAYS_AHEAD
from ...enums import (
    MAX_ESTIMATED_HOURS,
    MIN_ESTIMATED_HOURS,
    AppointmentStatus,
    ProviderStatus,
    Role,
)
from ...errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from ...models import Appointment, User
from ...shared.clock import Clock, default_clock
from ...shared.pagination import PageRequest
from ...shared.validators import validate_booking_date
from ...utils.ids import generate_appointment_id
from ..identity.principal import Admin, Customer, Principal, Provider
from ..identity.repository import IdentityRepository
from .events import EVENT_FOR_STATUS, AppointmentEvent, AppointmentEventType, AppointmentSnapshot
from .repository import AppointmentRepository
from .schemas import AppointmentCreate
from .status import PROVIDER_VISIBLE_STATUSES, check_transition

logger = logging.getLogger(__name__)

EventSink = Callable[[list[AppointmentEvent]], None]

MAX_ID_ATTEMPTS = 3
RECENT_LIMIT = 5

# Lifecycle timestamp written when an appointment enters the status
STATUS_STAMPS = {
    AppointmentStatus.ADMIN_APPROVED: "admin_approved_at",
    AppointmentStatus.PROVIDER_ACCEPTED: "provider_accepted_at",
    AppointmentStatus.COMPLETED: "completed_at",
    AppointmentStatus.CANCELLED: "cancelled_at",
}

NOTES_FIELD = {
    Role.ADMIN: "admin_notes",
    Role.PROVIDER: "provider_notes",
}


def _discard_events(events: list[AppointmentEvent]) -> None:
    logger.debug(f"No event sink configured, dropping {len(events)} event(s)")


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        emit: Optional[EventSink] = None,
        id_factory: Callable[..., str] = generate_appointment_id,
    ):
        self.db = db
        self.repo = AppointmentRepository()
        self.users = IdentityRepository()
        self.clock = clock or default_clock
        self.emit = emit or _discard_events
        self.id_factory = id_factory

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _bookable_provider(self, provider_id: int) -> User:
        provider = self.users.get_user_by_id(self.db, provider_id)
        if not provider or provider.role != Role.PROVIDER.value or provider.provider_profile is None:
            raise NotFoundError("Provider not found")

        profile = provider.provider_profile
        if profile.status != ProviderStatus.APPROVED.value:
            raise PreconditionError("Provider account is not approved")

        rate = profile.hourly_rate
        if rate is None or isinstance(rate, bool) or not isinstance(rate, (int, float)) or math.isnan(rate) or rate <= 0:
            raise PreconditionError("Provider hourly rate is not set or invalid")
        return provider

    def create_appointment(self, customer: Customer, data: AppointmentCreate) -> Appointment:
        """Book a provider; the new appointment waits for admin approval"""
        if data.estimatedHours < MIN_ESTIMATED_HOURS or data.estimatedHours > MAX_ESTIMATED_HOURS:
            raise ValidationError(
                f"Estimated hours must be between {MIN_ESTIMATED_HOURS} and {MAX_ESTIMATED_HOURS} hours"
            )
        validate_booking_date(data.appointmentDate, self.clock.today(), MAX_BOOKING_DAYS_AHEAD)

        provider = self._bookable_provider(data.providerId)
        profile = provider.provider_profile
        hourly_rate = profile.hourly_rate
        price = hourly_rate * data.estimatedHours

        location = data.location
        fields = dict(
            customer_id=customer.id,
            provider_id=provider.id,
            service_category=profile.service_category,
            service_description=data.serviceDescription,
            appointment_date=data.appointmentDate,
            appointment_time=data.appointmentTime,
            estimated_hours=data.estimatedHours,
            hourly_rate=hourly_rate,
            price=price,
            customer_notes=data.customerNotes,
            location_address=location.address if location else None,
            location_district=location.district if location else None,
            location_lat=location.coordinates.lat if location and location.coordinates else None,
            location_lng=location.coordinates.lng if location and location.coordinates else None,
            status=AppointmentStatus.PENDING.value,
        )

        appointment = None
        for attempt in range(1, MAX_ID_ATTEMPTS + 1):
            candidate = Appointment(appointment_id=self.id_factory(self.clock.now()), **fields)
            try:
                appointment = self.repo.insert(self.db, candidate)
                break
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(
                    f"⚠️ Appointment id collision on {candidate.appointment_id} (attempt {attempt}/{MAX_ID_ATTEMPTS}): {e}"
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"❌ Failed to store appointment for customer {customer.id}: {e}")
                raise InternalError("Server error while creating appointment") from e

        if appointment is None:
            raise ConflictError("Could not allocate a unique appointment id, please retry")

        logger.info(
            f"✅ Appointment {appointment.appointment_id} booked: customer={customer.id} "
            f"provider={provider.id} {data.estimatedHours}h x {hourly_rate} = {price}"
        )
        self._emit(appointment, AppointmentEventType.CREATED)
        return appointment

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _get(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_by_appointment_id(self.db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def _apply(
        self,
        appointment: Appointment,
        role: Role,
        target: str,
        notes: Optional[str] = None,
        extra: Optional[dict] = None,
    ) -> Appointment:
        new_status = check_transition(role, appointment.status, target)
        previous_status = appointment.status
        now = self.clock.now()

        appointment.status = new_status.value
        notes_field = NOTES_FIELD.get(role)
        if notes_field and notes is not None:
            setattr(appointment, notes_field, notes)
        stamp = STATUS_STAMPS.get(new_status)
        if stamp and getattr(appointment, stamp) is None:
            setattr(appointment, stamp, now)
        if new_status == AppointmentStatus.COMPLETED:
            profile = appointment.provider.provider_profile
            if profile is not None:
                profile.completed_jobs = (profile.completed_jobs or 0) + 1

        try:
            appointment = self.repo.save(self.db, appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update appointment {appointment.appointment_id}: {e}")
            raise InternalError("Server error while updating appointment") from e

        logger.info(
            f"🔄 Appointment {appointment.appointment_id}: {previous_status} → {new_status.value} by {role.value}"
        )
        self._emit(appointment, EVENT_FOR_STATUS[new_status], previous_status, extra)
        return appointment

    def update_appointment_status(
        self, admin: Admin, appointment_id: str, status: str, admin_notes: Optional[str] = None
    ) -> Appointment:
        """Admin decision: approve/reject a pending booking, complete, or cancel"""
        appointment = self._get(appointment_id)
        extra = {"cancelled_by": Role.ADMIN.value} if status == AppointmentStatus.CANCELLED.value else None
        return self._apply(appointment, Role.ADMIN, status, admin_notes, extra)

    def update_provider_appointment_status(
        self, provider: Provider, appointment_id: str, status: str, provider_notes: Optional[str] = None
    ) -> Appointment:
        """Provider accepts or declines an admin-approved booking addressed to them"""
        appointment = self._get(appointment_id)
        if appointment.provider_id != provider.id:
            raise NotFoundError("Appointment not found")
        return self._apply(appointment, Role.PROVIDER, status, provider_notes)

    def cancel_appointment(self, customer: Customer, appointment_id: str, reason: Optional[str] = None) -> Appointment:
        """Customer withdraws a booking before the provider has committed to it"""
        appointment = self._get(appointment_id)
        if appointment.customer_id != customer.id:
            raise ForbiddenError("Access denied")
        return self._apply(
            appointment,
            Role.CUSTOMER,
            AppointmentStatus.CANCELLED.value,
            extra={"cancelled_by": Role.CUSTOMER.value, "reason": reason},
        )

    def _emit(
        self,
        appointment: Appointment,
        event_type: AppointmentEventType,
        previous_status: Optional[str] = None,
        extra: Optional[dict] = None,
    ) -> None:
        try:
            event = AppointmentEvent(
                type=event_type,
                appointment=AppointmentSnapshot.from_appointment(appointment),
                previous_status=previous_status,
                extra={k: v for k, v in (extra or {}).items() if v is not None},
            )
            self.emit([event])
        except Exception as e:
            logger.error(f"❌ Failed to emit {event_type.value} for {appointment.appointment_id}: {e}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_appointment(self, principal: Principal, appointment_id: str) -> Appointment:
        appointment = self._get(appointment_id)
        if isinstance(principal, Customer) and appointment.customer_id != principal.id:
            raise ForbiddenError("Access denied")
        if isinstance(principal, Provider):
            if appointment.provider_id != principal.id:
                raise ForbiddenError("Access denied")
            if AppointmentStatus(appointment.status) not in PROVIDER_VISIBLE_STATUSES:
                raise NotFoundError("Appointment not found")
        return appointment

    def list_customer_appointments(
        self, customer: Customer, page: PageRequest, status: Optional[str] = None
    ) -> tuple[list[Appointment], int, list[Appointment]]:
        statuses = None
        if status and status != "all":
            if not AppointmentStatus.has_value(status):
                raise ValidationError(f"Invalid status: {status}")
            statuses = [status]
        items, total = self.repo.find(
            self.db, customer_id=customer.id, statuses=statuses, offset=page.offset, limit=page.limit
        )
        recent, _ = self.repo.find(self.db, customer_id=customer.id, offset=0, limit=RECENT_LIMIT)
        return items, total, recent

    def list_provider_appointments(
        self, provider: Provider, page: PageRequest, status: Optional[str] = None
    ) -> tuple[list[Appointment], int]:
        statuses = list(PROVIDER_VISIBLE_STATUSES)
        # A filter outside the visible set is ignored rather than widening the view
        if status and status != "all" and status in {s.value for s in PROVIDER_VISIBLE_STATUSES}:
            statuses = [status]
        return self.repo.find(
            self.db, provider_id=provider.id, statuses=statuses, offset=page.offset, limit=page.limit
        )

    def list_all_appointments(
        self,
        page: PageRequest,
        status: Optional[str] = None,
        provider_id: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> tuple[list[Appointment], int, dict[str, int]]:
        statuses = None
        if status and status != "all":
            if not AppointmentStatus.has_value(status):
                raise ValidationError(f"Invalid status: {status}")
            statuses = [status]
        items, total = self.repo.find(
            self.db,
            customer_id=customer_id,
            provider_id=provider_id,
            statuses=statuses,
            offset=page.offset,
            limit=page.limit,
        )
        counts = self.repo.count_by_status(self.db)
        stats = {"total": sum(counts.values())}
        for s in AppointmentStatus:
            stats[s.value] = counts.get(s.value, 0)
        return items, total, stats
