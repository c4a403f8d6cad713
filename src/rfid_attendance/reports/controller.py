from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.decorators import admin_required
from ..core.constants import DATE_FORMAT
from ..core.enums import UserType
from ..core.exceptions import ValidationError
from ..container import Container
from .exporter import XLSX_MIMETYPE, to_csv_bytes, to_excel_bytes

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _filters():
        today = now_local(app.config.get("TIMEZONE")).date()
        start_s = request.args.get("start") or today.replace(day=1).strftime(DATE_FORMAT)
        end_s = request.args.get("end") or today.strftime(DATE_FORMAT)
        type_s = request.args.get("user_type") or ""

        try:
            start = parse_iso_date(start_s)
            end = parse_iso_date(end_s)
        except ValueError:
            raise ValidationError("Dates must be in YYYY-MM-DD format.")
        try:
            user_type = UserType(type_s) if type_s else None
        except ValueError:
            raise ValidationError("Unknown user type.")
        return start, end, user_type

    @app.route("/reports", methods=["GET"], endpoint="reports")
    @admin_required
    def reports():
        try:
            start, end, user_type = _filters()
            data = container.report_service.build_attendance_report(start=start, end=end, user_type=user_type)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("reports"))

        return render_template(
            "admin/reports.html",
            start=start.strftime(DATE_FORMAT),
            end=end.strftime(DATE_FORMAT),
            user_type=user_type.value if user_type else "",
            rows=data.rows,
            summary=data.summary,
            active_page="reports",
        )

    def _export(kind: str):
        try:
            start, end, user_type = _filters()
            data = container.report_service.build_attendance_report(start=start, end=end, user_type=user_type)
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("reports"))

        suffix = f"_{user_type.value}" if user_type else ""
        filename = f"attendance{suffix}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.{kind}"
        logger.info("Exporting %s report %s (%d rows)", kind, filename, len(data.rows))

        if kind == "xlsx":
            return send_file(to_excel_bytes(data), download_name=filename, as_attachment=True, mimetype=XLSX_MIMETYPE)
        return app.response_class(
            to_csv_bytes(data),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/reports.xlsx", methods=["GET"], endpoint="reports_xlsx")
    @admin_required
    def reports_xlsx():
        return _export("xlsx")

    @app.route("/reports.csv", methods=["GET"], endpoint="reports_csv")
    @admin_required
    def reports_csv():
        return _export("csv")
