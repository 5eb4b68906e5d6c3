from __future__ import annotations

import csv
import io

from .model import SummaryMatrix

CSV_HEADER = (
    "user_id",
    "full_name",
    "username",
    "date",
    "status",
    "hours",
    "minutes",
    "login_time",
    "logout_time",
)


def summary_matrix_csv(matrix: SummaryMatrix) -> str:
    """One line per (user, date) cell, users in matrix order."""
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(CSV_HEADER)
    for row in matrix.rows:
        for cell in row.cells:
            writer.writerow(
                [
                    row.user_id,
                    row.full_name,
                    row.username,
                    cell.date.isoformat(),
                    cell.status.value,
                    str(cell.hours),
                    cell.minutes,
                    cell.login_time.strftime("%Y-%m-%d %H:%M:%S") if cell.login_time else "",
                    cell.logout_time.strftime("%Y-%m-%d %H:%M:%S") if cell.logout_time else "",
                ]
            )
    return out.getvalue()
