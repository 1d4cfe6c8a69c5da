"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...utils.sanitization import clean_text


class Coordinates(BaseModel):
    lat: float
    lng: float


class LocationIn(BaseModel):
    address: Optional[str] = Field(default=None, max_length=500)
    district: Optional[str] = Field(default=None, max_length=100)
    coordinates: Optional[Coordinates] = None


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment; date window and hour bounds are checked by the service"""

    providerId: int
    serviceDescription: str = Field(min_length=1, max_length=2000)
    appointmentDate: date
    appointmentTime: str = Field(min_length=1, max_length=50)
    estimatedHours: int
    customerNotes: Optional[str] = Field(default=None, max_length=2000)
    location: Optional[LocationIn] = None

    @field_validator("serviceDescription")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        v = clean_text(v)
        if not v:
            raise ValueError("Service description is required")
        return v

    @field_validator("customerNotes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class AdminStatusUpdate(BaseModel):
    status: str
    adminNotes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("adminNotes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class ProviderStatusUpdate(BaseModel):
    status: str
    providerNotes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("providerNotes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class CancelRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("reason")
    @classmethod
    def clean_reason(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class PartySummary(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None


class LocationOut(BaseModel):
    address: Optional[str] = None
    district: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class AppointmentResponse(BaseModel):
    appointmentId: str
    status: str
    customer: PartySummary
    provider: PartySummary
    serviceCategory: str
    serviceDescription: str
    appointmentDate: date
    appointmentTime: str
    estimatedHours: int
    hourlyRate: float
    price: float
    location: Optional[LocationOut] = None
    customerNotes: Optional[str] = None
    adminNotes: Optional[str] = None
    providerNotes: Optional[str] = None
    adminApprovedAt: Optional[datetime] = None
    providerAcceptedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None
    cancelledAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    totalCount: int


class AppointmentEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    success: bool = True
    appointments: list[AppointmentResponse]
    pagination: Pagination


class CustomerAppointmentListResponse(AppointmentListResponse):
    recentAppointments: list[AppointmentResponse]


class AdminAppointmentListResponse(AppointmentListResponse):
    stats: dict[str, int]


def _party(user) -> PartySummary:
    return PartySummary(id=user.id, name=user.name, email=user.email, phone=user.phone)


def appointment_to_response(appointment) -> AppointmentResponse:
    location = None
    if appointment.location_address or appointment.location_district or appointment.location_lat is not None:
        coordinates = None
        if appointment.location_lat is not None and appointment.location_lng is not None:
            coordinates = Coordinates(lat=appointment.location_lat, lng=appointment.location_lng)
        location = LocationOut(
            address=appointment.location_address,
            district=appointment.location_district,
            coordinates=coordinates,
        )
    return AppointmentResponse(
        appointmentId=appointment.appointment_id,
        status=appointment.status,
        customer=_party(appointment.customer),
        provider=_party(appointment.provider),
        serviceCategory=appointment.service_category,
        serviceDescription=appointment.service_description,
        appointmentDate=appointment.appointment_date,
        appointmentTime=appointment.appointment_time,
        estimatedHours=appointment.estimated_hours,
        hourlyRate=appointment.hourly_rate,
        price=appointment.price,
        location=location,
        customerNotes=appointment.customer_notes,
        adminNotes=appointment.admin_notes,
        providerNotes=appointment.provider_notes,
        adminApprovedAt=appointment.admin_approved_at,
        providerAcceptedAt=appointment.provider_accepted_at,
        completedAt=appointment.completed_at,
        cancelledAt=appointment.cancelled_at,
        createdAt=appointment.created_at,
        updatedAt=appointment.updated_at,
    )
