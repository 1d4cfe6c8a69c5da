"""
Appointment lifecycle state machine.

The transition table below is the only place that decides whether a status
change is legal. Admin, provider and customer paths all go through
`check_transition`.

    pending ──admin──▶ admin_approved ──provider──▶ provider_accepted ──admin──▶ completed
       │                    │
       ├──admin──▶ admin_rejected
       │                    └──provider──▶ provider_rejected
       └── any non-terminal ──admin/customer──▶ cancelled
"""

from ...enums import AppointmentStatus, Role
from ...errors import InvalidTransitionError, ValidationError

S = AppointmentStatus

TERMINAL_STATUSES = frozenset({S.ADMIN_REJECTED, S.PROVIDER_REJECTED, S.COMPLETED, S.CANCELLED})

NON_TERMINAL_STATUSES = frozenset(set(S) - TERMINAL_STATUSES)

# Appointments a provider may see; pending and admin_rejected never reach them
PROVIDER_VISIBLE_STATUSES = (
    S.ADMIN_APPROVED,
    S.PROVIDER_ACCEPTED,
    S.PROVIDER_REJECTED,
    S.COMPLETED,
)

# role -> target status -> statuses it may be reached from
TRANSITIONS: dict[Role, dict[AppointmentStatus, frozenset]] = {
    Role.ADMIN: {
        S.ADMIN_APPROVED: frozenset({S.PENDING}),
        S.ADMIN_REJECTED: frozenset({S.PENDING}),
        S.COMPLETED: frozenset({S.PROVIDER_ACCEPTED}),
        S.CANCELLED: NON_TERMINAL_STATUSES,
    },
    Role.PROVIDER: {
        S.PROVIDER_ACCEPTED: frozenset({S.ADMIN_APPROVED}),
        S.PROVIDER_REJECTED: frozenset({S.ADMIN_APPROVED}),
    },
    Role.CUSTOMER: {
        S.CANCELLED: frozenset({S.PENDING, S.ADMIN_APPROVED}),
    },
}

# Messages for the common mistakes; anything else gets the generic wording
_PRECONDITION_MESSAGES = {
    (Role.PROVIDER, S.PROVIDER_ACCEPTED): "Appointment must be approved by admin first",
    (Role.PROVIDER, S.PROVIDER_REJECTED): "Appointment must be approved by admin first",
    (Role.ADMIN, S.ADMIN_APPROVED): "Only pending appointments can be approved",
    (Role.ADMIN, S.ADMIN_REJECTED): "Only pending appointments can be rejected",
    (Role.ADMIN, S.COMPLETED): "Only appointments accepted by the provider can be completed",
    (Role.CUSTOMER, S.CANCELLED): "Appointment can no longer be cancelled",
}


def is_terminal(status) -> bool:
    return AppointmentStatus(status) in TERMINAL_STATUSES


def allowed_targets(role: Role) -> tuple:
    """Statuses the given role may ever request"""
    return tuple(TRANSITIONS.get(role, {}).keys())


def parse_target(role: Role, target) -> AppointmentStatus:
    """Turn a requested status into an AppointmentStatus the role is allowed to request"""
    try:
        status = AppointmentStatus(target)
    except ValueError as e:
        raise ValidationError(f"Invalid status: {target}") from e
    if status not in TRANSITIONS.get(role, {}):
        allowed = ", ".join(s.value for s in allowed_targets(role))
        raise ValidationError(f"Status must be one of: {allowed}")
    return status


def check_transition(role: Role, current, target) -> AppointmentStatus:
    """
    Validate current -> target for the acting role and return the target status.

    Raises:
        ValidationError: the role may never request this target
        InvalidTransitionError: the appointment is terminal or not in a source state
    """
    current = AppointmentStatus(current)
    target = parse_target(role, target)

    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            f"Appointment is already {current.value.replace('_', ' ')} and cannot be changed"
        )
    if current not in TRANSITIONS[role][target]:
        message = _PRECONDITION_MESSAGES.get(
            (role, target),
            f"Cannot change appointment from {current.value} to {target.value}",
        )
        raise InvalidTransitionError(message)
    return target
