"""Appointment router - booking and lifecycle endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ...auth import get_current_principal, require_admin, require_customer, require_provider
from ...shared.pagination import PageRequest, page_params
from ..identity.principal import Admin, Customer, Principal, Provider
from .dependencies import get_appointment_service
from .schemas import (
    AdminAppointmentListResponse,
    AdminStatusUpdate,
    AppointmentCreate,
    AppointmentEnvelope,
    AppointmentListResponse,
    CancelRequest,
    CustomerAppointmentListResponse,
    ProviderStatusUpdate,
    appointment_to_response,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])

# Messages shown to the actor after each transition
STATUS_MESSAGES = {
    "admin_approved": "Appointment approved and sent to provider",
    "admin_rejected": "Appointment rejected",
    "provider_accepted": "Appointment accepted",
    "provider_rejected": "Appointment declined",
    "completed": "Appointment marked as completed",
    "cancelled": "Appointment cancelled",
}


@router.post("", response_model=AppointmentEnvelope, status_code=201)
@router.post("/", response_model=AppointmentEnvelope, status_code=201, include_in_schema=False)
async def create_appointment(
    data: AppointmentCreate,
    customer: Customer = Depends(require_customer),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an approved provider; the appointment starts pending admin approval"""
    appointment = service.create_appointment(customer, data)
    return AppointmentEnvelope(
        message="Appointment booked successfully. Waiting for admin approval.",
        appointment=appointment_to_response(appointment),
    )


@router.get("/my-appointments", response_model=CustomerAppointmentListResponse)
async def get_my_appointments(
    status: Optional[str] = None,
    page: PageRequest = Depends(page_params),
    customer: Customer = Depends(require_customer),
    service: AppointmentService = Depends(get_appointment_service),
):
    items, total, recent = service.list_customer_appointments(customer, page, status)
    return CustomerAppointmentListResponse(
        appointments=[appointment_to_response(a) for a in items],
        recentAppointments=[appointment_to_response(a) for a in recent],
        pagination=page.meta(total),
    )


@router.get("/provider/my-appointments", response_model=AppointmentListResponse)
async def get_provider_appointments(
    status: Optional[str] = None,
    page: PageRequest = Depends(page_params),
    provider: Provider = Depends(require_provider),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments addressed to the provider once an admin has approved them"""
    items, total = service.list_provider_appointments(provider, page, status)
    return AppointmentListResponse(
        appointments=[appointment_to_response(a) for a in items],
        pagination=page.meta(total),
    )


@router.get("/admin/all", response_model=AdminAppointmentListResponse)
async def get_all_appointments(
    status: Optional[str] = None,
    providerId: Optional[int] = None,
    customerId: Optional[int] = None,
    page: PageRequest = Depends(page_params),
    _admin: Admin = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    items, total, stats = service.list_all_appointments(page, status, providerId, customerId)
    return AdminAppointmentListResponse(
        appointments=[appointment_to_response(a) for a in items],
        pagination=page.meta(total),
        stats=stats,
    )


@router.put("/admin/{appointment_id}", response_model=AppointmentEnvelope)
async def admin_update_appointment(
    appointment_id: str,
    data: AdminStatusUpdate,
    admin: Admin = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_appointment_status(admin, appointment_id, data.status, data.adminNotes)
    return AppointmentEnvelope(
        message=STATUS_MESSAGES.get(appointment.status),
        appointment=appointment_to_response(appointment),
    )


@router.put("/provider/{appointment_id}", response_model=AppointmentEnvelope)
async def provider_update_appointment(
    appointment_id: str,
    data: ProviderStatusUpdate,
    provider: Provider = Depends(require_provider),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_provider_appointment_status(
        provider, appointment_id, data.status, data.providerNotes
    )
    return AppointmentEnvelope(
        message=STATUS_MESSAGES.get(appointment.status),
        appointment=appointment_to_response(appointment),
    )


@router.put("/{appointment_id}/cancel", response_model=AppointmentEnvelope)
async def cancel_appointment(
    appointment_id: str,
    data: Optional[CancelRequest] = None,
    customer: Customer = Depends(require_customer),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.cancel_appointment(customer, appointment_id, data.reason if data else None)
    return AppointmentEnvelope(
        message=STATUS_MESSAGES["cancelled"],
        appointment=appointment_to_response(appointment),
    )


@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
async def get_appointment(
    appointment_id: str,
    principal: Principal = Depends(get_current_principal),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.get_appointment(principal, appointment_id)
    return AppointmentEnvelope(appointment=appointment_to_response(appointment))
