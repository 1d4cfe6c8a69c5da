"""Shared validation utilities"""

import re
from datetime import date, timedelta
from typing import Optional

from ..errors import ValidationError


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number.

    Args:
        phone: Phone number string in various formats

    Returns:
        Digits only, with a leading + when one was given

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    phone = phone.strip()
    has_plus = phone.startswith("+")
    digits = re.sub(r"\D", "", phone)

    if len(digits) < 7 or len(digits) > 15:
        raise ValueError("Phone number must have between 7 and 15 digits")

    return f"+{digits}" if has_plus else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_booking_date(requested: date, today: date, max_days_ahead: int) -> date:
    """
    Check a requested appointment date against the booking window.

    Both ends are inclusive: today itself and today + max_days_ahead are bookable.

    Raises:
        ValidationError: If the date is in the past or too far ahead
    """
    if requested < today:
        raise ValidationError("Appointment date cannot be in the past")
    if requested > today + timedelta(days=max_days_ahead):
        raise ValidationError(
            f"Appointment date cannot be more than {max_days_ahead} days from today"
        )
    return requested
