from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_person_id, json_body
from ..container import Container
from ..core.exceptions import ValidationError
from .model import BatchEntryResult


def result_to_json(r: BatchEntryResult) -> dict:
    item = {"index": r.index, "outcome": r.outcome.value}
    if r.reason:
        item["reason"] = r.reason.value
    if r.message:
        item["message"] = r.message
    if r.record:
        item["attendance_id"] = r.record.attendance_id
        item["status"] = r.record.status.value
    return item


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="attendance_bulk")
    def bulk():
        current_person_id()
        entries = json_body().get("attendance")
        if not isinstance(entries, list) or not entries:
            raise ValidationError("attendance array is required")
        if not all(isinstance(e, dict) for e in entries):
            raise ValidationError("attendance entries must be objects")

        result = container.batch_reconciler.reconcile_batch(entries)
        return jsonify(
            {
                "success": True,
                "results": [result_to_json(r) for r in result.results],
                "success_count": result.success_count,
            }
        )
