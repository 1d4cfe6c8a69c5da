"""
Booking error taxonomy.

Services raise these instead of HTTPException so the same rules hold when the
lifecycle engine runs outside a request (CLI, worker, tests). main.py renders
them into the {"success": false, "message": ..., "error": ...} envelope.
"""


class BookingError(Exception):
    """Base class for caller-visible booking errors"""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed or out-of-range input (date bounds, hour bounds, rate bounds)"""

    status_code = 400
    code = "validation_error"


class PreconditionError(BookingError):
    """Referenced provider is not eligible to be booked"""

    status_code = 400
    code = "precondition_failed"


class InvalidTransitionError(BookingError):
    """Status change violates the appointment lifecycle ordering"""

    status_code = 400
    code = "invalid_transition"


class NotFoundError(BookingError):
    status_code = 404
    code = "not_found"


class ForbiddenError(BookingError):
    status_code = 403
    code = "forbidden"


class AuthenticationError(BookingError):
    status_code = 401
    code = "not_authenticated"


class ConflictError(BookingError):
    """Unique constraint collision (appointment identifier, registered email)"""

    status_code = 409
    code = "conflict"


class InternalError(BookingError):
    """Storage or delivery infrastructure failure; detail stays in the server log"""

    status_code = 500
    code = "internal_error"
