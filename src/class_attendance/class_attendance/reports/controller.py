from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import filter_from_query, status_map
from ..container import Container
from ..core.enums import GroupBy
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/summary", methods=["GET"], endpoint="reports_summary")
    def summary():
        s = reports.summary(filter_from_query())
        return jsonify({"total": s.total, "counts": status_map(s.counts), "percentages": status_map(s.percentages)})

    @app.route("/api/reports/trends", methods=["GET"], endpoint="reports_trends")
    def trends():
        try:
            group_by = GroupBy(request.args.get("period", GroupBy.DAILY.value))
        except ValueError:
            raise ValidationError("period must be daily, weekly or monthly") from None

        buckets = reports.trend(filter_from_query(), group_by)
        return jsonify(
            {
                "period": group_by.value,
                "trends": [
                    {
                        "date": b.key,
                        "total": b.total,
                        "counts": status_map(b.counts),
                        "percentages": status_map(b.percentages),
                    }
                    for b in buckets
                ],
            }
        )

    @app.route("/api/reports/people", methods=["GET"], endpoint="reports_people")
    def people():
        rows = reports.person_breakdown(filter_from_query())
        return jsonify(
            [
                {
                    "person_id": s.person_id,
                    "name": s.full_name,
                    "external_code": s.external_code,
                    "total": s.total,
                    "counts": status_map(s.counts),
                    "attendance_rate": s.attendance_rate,
                }
                for s in rows
            ]
        )

    @app.route("/api/reports/courses", methods=["GET"], endpoint="reports_courses")
    def courses():
        rows = reports.course_breakdown(filter_from_query())
        return jsonify(
            [{"course_id": c.course_id, "code": c.code, "total": c.total, "counts": status_map(c.counts)} for c in rows]
        )
