from datetime import date, datetime
from decimal import Decimal

import pytest

from src.store_ops.store_ops.attendance.classifier.standard_classifier import StandardDayClassifier
from src.store_ops.store_ops.attendance.model import AttendanceRecord
from src.store_ops.store_ops.core.enums import DayStatus


@pytest.mark.parametrize(
    "hours,expected",
    [
        ("9.00", DayStatus.PRESENT),
        ("10.5", DayStatus.PRESENT),
        ("8.99", DayStatus.SHORT_HOURS),
        ("8.00", DayStatus.SHORT_HOURS),
        ("7.99", DayStatus.VERY_SHORT),
        ("0", DayStatus.VERY_SHORT),
    ],
)
def test_classify_by_hours(hours, expected):
    classifier = StandardDayClassifier()

    assert classifier.classify(has_record=True, has_logout=True, hours=Decimal(hours)) == expected


def test_missing_record_is_absent_and_missing_logout_is_clocked_in_only():
    classifier = StandardDayClassifier()

    assert classifier.classify(has_record=False, has_logout=False, hours=None) == DayStatus.ABSENT
    assert classifier.classify(has_record=True, has_logout=False, hours=None) == DayStatus.CLOCKED_IN_ONLY


def test_status_colors():
    assert DayStatus.PRESENT.color == "green"
    assert DayStatus.SHORT_HOURS.color == "orange"
    assert DayStatus.VERY_SHORT.color == "red"
    assert DayStatus.CLOCKED_IN_ONLY.color == "yellow"
    assert DayStatus.ABSENT.color == "red"


def test_missing_hours_never_negative():
    classifier = StandardDayClassifier()

    assert classifier.missing_hours(Decimal("8.5")) == Decimal("0.5")
    assert classifier.missing_hours(Decimal("11")) == Decimal("0")


def test_record_with_logout_must_carry_duration():
    with pytest.raises(ValueError):
        AttendanceRecord(
            attendance_id=1,
            user_id=1,
            store_id=1,
            attendance_date=date(2025, 3, 14),
            login_time=datetime(2025, 3, 14, 9, 0),
            logout_time=datetime(2025, 3, 14, 10, 0),
        )
