"""Lifecycle transition table"""

import pytest

from app.domain.appointments.status import (
    NON_TERMINAL_STATUSES,
    PROVIDER_VISIBLE_STATUSES,
    TERMINAL_STATUSES,
    check_transition,
    is_terminal,
)
from app.enums import AppointmentStatus as S
from app.enums import Role
from app.errors import InvalidTransitionError, ValidationError


@pytest.mark.parametrize(
    "role,current,target",
    [
        (Role.ADMIN, S.PENDING, S.ADMIN_APPROVED),
        (Role.ADMIN, S.PENDING, S.ADMIN_REJECTED),
        (Role.ADMIN, S.PROVIDER_ACCEPTED, S.COMPLETED),
        (Role.ADMIN, S.PENDING, S.CANCELLED),
        (Role.ADMIN, S.ADMIN_APPROVED, S.CANCELLED),
        (Role.ADMIN, S.PROVIDER_ACCEPTED, S.CANCELLED),
        (Role.PROVIDER, S.ADMIN_APPROVED, S.PROVIDER_ACCEPTED),
        (Role.PROVIDER, S.ADMIN_APPROVED, S.PROVIDER_REJECTED),
        (Role.CUSTOMER, S.PENDING, S.CANCELLED),
        (Role.CUSTOMER, S.ADMIN_APPROVED, S.CANCELLED),
    ],
)
def test_allowed_transitions(role, current, target):
    assert check_transition(role, current.value, target.value) == target


def test_provider_cannot_accept_pending_appointment():
    with pytest.raises(InvalidTransitionError) as exc:
        check_transition(Role.PROVIDER, "pending", "provider_accepted")
    assert exc.value.message == "Appointment must be approved by admin first"


def test_provider_reject_requires_admin_approval_too():
    with pytest.raises(InvalidTransitionError):
        check_transition(Role.PROVIDER, "pending", "provider_rejected")


def test_admin_cannot_approve_twice():
    with pytest.raises(InvalidTransitionError):
        check_transition(Role.ADMIN, "admin_approved", "admin_approved")


def test_completion_requires_provider_acceptance():
    with pytest.raises(InvalidTransitionError):
        check_transition(Role.ADMIN, "admin_approved", "completed")


def test_customer_cannot_cancel_after_provider_accepted():
    with pytest.raises(InvalidTransitionError):
        check_transition(Role.CUSTOMER, "provider_accepted", "cancelled")


@pytest.mark.parametrize("terminal", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
@pytest.mark.parametrize("role,target", [(Role.ADMIN, S.CANCELLED), (Role.ADMIN, S.ADMIN_APPROVED)])
def test_terminal_statuses_are_final(terminal, role, target):
    with pytest.raises(InvalidTransitionError) as exc:
        check_transition(role, terminal.value, target.value)
    assert "cannot be changed" in exc.value.message


def test_role_may_not_request_foreign_status():
    with pytest.raises(ValidationError):
        check_transition(Role.PROVIDER, "admin_approved", "completed")
    with pytest.raises(ValidationError):
        check_transition(Role.ADMIN, "admin_approved", "provider_accepted")


def test_unknown_status_is_validation_error():
    with pytest.raises(ValidationError) as exc:
        check_transition(Role.ADMIN, "pending", "approved")
    assert "Invalid status" in exc.value.message


def test_status_partitions():
    assert TERMINAL_STATUSES | NON_TERMINAL_STATUSES == set(S)
    assert not TERMINAL_STATUSES & NON_TERMINAL_STATUSES
    assert is_terminal("completed")
    assert not is_terminal("provider_accepted")
    assert S.PENDING not in PROVIDER_VISIBLE_STATUSES
    assert S.ADMIN_REJECTED not in PROVIDER_VISIBLE_STATUSES
