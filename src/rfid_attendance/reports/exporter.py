from __future__ import annotations

import csv
import io

import pandas as pd

from .service import REPORT_FIELDS, ReportData

SUMMARY_FIELDS = ["user_id", "user_name", "user_type", "visits", "days_present", "total_time"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def to_excel_bytes(data: ReportData) -> io.BytesIO:
    """Two sheets: one row per session, and one row per user."""

    output = io.BytesIO()
    rows = pd.DataFrame(data.rows, columns=REPORT_FIELDS)
    summary = pd.DataFrame(data.summary, columns=SUMMARY_FIELDS)
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        rows.to_excel(writer, index=False, sheet_name="Attendance")
        summary.to_excel(writer, index=False, sheet_name="Summary")
    output.seek(0)
    return output


def to_csv_bytes(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
