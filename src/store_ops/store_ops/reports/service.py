from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional, Sequence

from ..attendance.classifier.base import DayClassifier
from ..attendance.classifier.standard_classifier import StandardDayClassifier
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import date_range, parse_iso_date
from ..common.validators import require_id
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import DayCell, SummaryMatrix, SummaryRow, UserSummary

HUNDREDTHS = Decimal("0.01")
SUMMARY_ROLES = (Role.STAFF, Role.MANAGER)


def _hours(minutes: int) -> Decimal:
    return (Decimal(minutes) / 60).quantize(HUNDREDTHS, rounding=ROUND_HALF_UP)


class AttendanceSummaryService:
    """Date x user attendance matrix for payroll review.

    Every eligible user gets a cell for every date in the range, including
    dates without any attendance record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        classifier: Optional[DayClassifier] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._classifier = classifier or StandardDayClassifier()

    def build_summary_matrix(
        self,
        *,
        start_date: Any,
        end_date: Any,
        store_id: Any = None,
        user_id: Any = None,
    ) -> SummaryMatrix:
        if not start_date or not end_date:
            raise ValidationError("start_date and end_date are required parameters")
        start = parse_iso_date(start_date, "start_date")
        end = parse_iso_date(end_date, "end_date")
        store_id = require_id(store_id, "store_id") if store_id else None
        user_id = require_id(user_id, "user_id") if user_id else None

        columns = date_range(start, end)
        users = list(self._users.list_by_roles(roles=SUMMARY_ROLES, store_id=store_id, user_id=user_id))
        records = self._attendance.list_in_range(
            start_date=start,
            end_date=end,
            user_ids=[u.user_id for u in users],
        )

        by_user_day: dict[tuple[int, date], list[AttendanceRecord]] = defaultdict(list)
        for r in records:
            by_user_day[(r.user_id, r.attendance_date)].append(r)

        rows = [self._build_row(u, columns, by_user_day) for u in users]
        return SummaryMatrix(start_date=start, end_date=end, columns=columns, rows=rows, store_id=store_id)

    def _build_row(
        self,
        user: User,
        columns: Sequence[date],
        by_user_day: dict[tuple[int, date], list[AttendanceRecord]],
    ) -> SummaryRow:
        cells = [self.build_cell(day, by_user_day.get((user.user_id, day), ())) for day in columns]
        return SummaryRow(
            user_id=user.user_id,
            full_name=user.full_name,
            username=user.username,
            cells=cells,
            summary=self.summarize(cells),
        )

    def build_cell(self, day: date, records: Iterable[AttendanceRecord]) -> DayCell:
        """Fold a day's sessions into one cell.

        Closed sessions add up; a day with only an open session is
        ``clocked_in_only``.
        """

        records = sorted(records, key=lambda r: r.login_time)
        if not records:
            return DayCell(date=day, status=self._classifier.classify(has_record=False, has_logout=False, hours=None))

        closed = [r for r in records if not r.is_open]
        minutes = sum(r.work_duration_minutes for r in closed)
        hours = _hours(minutes)
        status = self._classifier.classify(
            has_record=True,
            has_logout=bool(closed),
            hours=Decimal(minutes) / 60,
        )
        return DayCell(
            date=day,
            status=status,
            hours=hours,
            minutes=minutes,
            attendance_id=records[0].attendance_id,
            login_time=records[0].login_time,
            logout_time=max((r.logout_time for r in closed), default=None),
        )

    def summarize(self, cells: Sequence[DayCell]) -> UserSummary:
        worked = [c for c in cells if not c.is_absent]
        present_days = len(worked)
        total_hours = sum((c.hours for c in worked), Decimal("0.00"))
        missing_hours = sum((self._classifier.missing_hours(c.hours) for c in worked), Decimal("0.00"))
        average = (total_hours / present_days).quantize(HUNDREDTHS, rounding=ROUND_HALF_UP) if present_days else Decimal("0.00")
        return UserSummary(
            total_days=len(cells),
            present_days=present_days,
            total_hours=total_hours.quantize(HUNDREDTHS),
            missing_hours=missing_hours.quantize(HUNDREDTHS),
            average_hours=average,
        )
