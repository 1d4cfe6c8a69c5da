"""Appointment repository - Database operations for appointments"""

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def _with_parties(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.customer),
            joinedload(Appointment.provider),
        )

    @staticmethod
    def get_by_appointment_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return (
            AppointmentRepository._with_parties(db)
            .filter(Appointment.appointment_id == appointment_id)
            .first()
        )

    @staticmethod
    def insert(db: Session, appointment: Appointment) -> Appointment:
        """Insert and commit; IntegrityError propagates so callers can regenerate the identifier"""
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def find(
        db: Session,
        customer_id: Optional[int] = None,
        provider_id: Optional[int] = None,
        statuses: Optional[Iterable[str]] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Appointment], int]:
        """Filter, newest first, paginate; returns (page, total matching)"""
        query = db.query(Appointment)
        if customer_id is not None:
            query = query.filter(Appointment.customer_id == customer_id)
        if provider_id is not None:
            query = query.filter(Appointment.provider_id == provider_id)
        if statuses is not None:
            query = query.filter(Appointment.status.in_([str(getattr(s, "value", s)) for s in statuses]))

        total = query.count()
        page = (
            query.options(joinedload(Appointment.customer), joinedload(Appointment.provider))
            .order_by(Appointment.created_at.desc(), Appointment.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return page, total

    @staticmethod
    def count_by_status(db: Session) -> dict[str, int]:
        rows = (
            db.query(Appointment.status, func.count(Appointment.id))
            .group_by(Appointment.status)
            .all()
        )
        return {status: count for status, count in rows}
