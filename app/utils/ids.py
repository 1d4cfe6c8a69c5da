"""Human-readable identifiers"""

import secrets
import string
from datetime import datetime, timezone
from typing import Callable, Optional

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_appointment_id(
    now: Optional[datetime] = None,
    choice: Callable[[str], str] = secrets.choice,
    suffix_length: int = 5,
) -> str:
    """
    Build an appointment identifier: APP-<base36 epoch millis>-<random base36>.

    Not guaranteed unique; the unique index on appointments.appointment_id is
    the real guard and callers regenerate on collision.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    millis = int(now.timestamp() * 1000)
    suffix = "".join(choice(BASE36_ALPHABET) for _ in range(suffix_length))
    return f"APP-{to_base36(millis)}-{suffix}"
