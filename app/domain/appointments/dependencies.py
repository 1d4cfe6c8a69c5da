"""FastAPI wiring for the appointment service: clock, notification sink, session"""

import logging

from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...config import NOTIFICATION_QUEUE_ENABLED
from ...database import get_db
from ...services.notification_service import NotificationDispatcher, enqueue_appointment_events
from ...shared.clock import Clock, default_clock
from .events import AppointmentEvent
from .service import AppointmentService

logger = logging.getLogger(__name__)


def get_clock() -> Clock:
    return default_clock


def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher()


def get_appointment_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> AppointmentService:
    """Dependency injection for AppointmentService; notifications run after the response is sent"""

    def emit(events: list[AppointmentEvent]) -> None:
        if NOTIFICATION_QUEUE_ENABLED:
            background_tasks.add_task(enqueue_appointment_events, events)
        else:
            background_tasks.add_task(dispatcher.dispatch, events)

    return AppointmentService(db, clock=clock, emit=emit)
