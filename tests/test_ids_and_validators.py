import re
from datetime import date, datetime, timezone

import pytest

from app.errors import ValidationError
from app.shared.validators import validate_booking_date, validate_phone
from app.utils.ids import generate_appointment_id, to_base36


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)


def test_appointment_id_format():
    now = datetime(2025, 6, 10, 9, 30, tzinfo=timezone.utc)
    appointment_id = generate_appointment_id(now, choice=lambda alphabet: "K")
    millis = int(now.timestamp() * 1000)
    assert appointment_id == f"APP-{to_base36(millis)}-KKKKK"
    assert re.fullmatch(r"APP-[0-9A-Z]+-[0-9A-Z]{5}", generate_appointment_id())


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime(2025, 6, 10, 9, 30)
    aware = naive.replace(tzinfo=timezone.utc)
    pick = lambda alphabet: "0"  # noqa: E731
    assert generate_appointment_id(naive, pick) == generate_appointment_id(aware, pick)


class TestBookingWindow:
    today = date(2025, 6, 10)

    def test_today_and_last_day_are_bookable(self):
        assert validate_booking_date(self.today, self.today, 7) == self.today
        assert validate_booking_date(date(2025, 6, 17), self.today, 7) == date(2025, 6, 17)

    def test_past_date_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_booking_date(date(2025, 6, 9), self.today, 7)
        assert exc.value.message == "Appointment date cannot be in the past"

    def test_beyond_window_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_booking_date(date(2025, 6, 18), self.today, 7)
        assert "more than 7 days" in exc.value.message


def test_validate_phone():
    assert validate_phone("+977 980-000-0000") == "+9779800000000"
    assert validate_phone("9800000000") == "9800000000"
    with pytest.raises(ValueError):
        validate_phone("12345")
