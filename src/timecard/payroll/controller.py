from __future__ import annotations

import csv
import io
from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import ok
from ..common.validators import require_positive_int
from ..container import Container
from ..core import constants
from ..core.exceptions import ValidationError
from .service import REPORT_FIELDS, ReportData


def register(app: Flask, container: Container) -> None:
    service = container.payroll_report_service

    def _report_args():
        today = now_local().date()
        start_s = request.args.get("start") or (today - timedelta(days=constants.DEFAULT_REPORT_DAYS)).strftime("%Y-%m-%d")
        end_s = request.args.get("end") or today.strftime("%Y-%m-%d")
        user_id = request.args.get("user_id")
        return (
            parse_iso_date(start_s),
            parse_iso_date(end_s),
            require_positive_int(user_id, "user_id") if user_id else None,
        )

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        # BOM so spreadsheet apps detect UTF-8 names.
        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/report", methods=["GET"], endpoint="admin_report")
    def admin_report():
        start, end, user_id = _report_args()
        data = service.build_attendance_report(start=start, end=end, user_id=user_id)
        return ok(
            start=start.strftime("%Y-%m-%d"),
            end=end.strftime("%Y-%m-%d"),
            rows=data.rows,
            summary=data.summary,
        )

    @app.route("/api/admin/report.csv", methods=["GET"], endpoint="admin_report_csv")
    def admin_report_csv():
        if not request.args.get("start") or not request.args.get("end"):
            raise ValidationError("start and end are required")
        start, end, user_id = _report_args()
        data = service.build_attendance_report(start=start, end=end, user_id=user_id)
        filename = f"attendance_report_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)

    @app.route("/api/admin/monthly-summary", methods=["GET"], endpoint="admin_monthly_summary")
    def monthly_summary():
        today = now_local().date()
        year = request.args.get("year", type=int) or today.year
        month = request.args.get("month", type=int) or today.month
        return ok(year=year, month=month, employees=service.build_monthly_summary(year=year, month=month))
