from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_month
from ..common.http import current_role, json_body, json_endpoint
from ..core.exceptions import ValidationError
from ..container import Container


def _store_id_arg(value):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("store_id harus berupa angka") from None


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/employees/<employee_id>/attendance/<int:year>/<int:month>",
        methods=["GET"],
        endpoint="api_attendance_month",
    )
    @json_endpoint
    def api_attendance_month(employee_id: str, year: int, month: int):
        grid = container.attendance_service.get_monthly_grid(
            employee_id,
            format_month(year, month),
            store_id=_store_id_arg(request.args.get("store_id")),
        )
        return jsonify({"success": True, **grid.to_dict()})

    @app.route(
        "/api/employees/<employee_id>/attendance/<int:year>/<int:month>",
        methods=["PUT"],
        endpoint="api_attendance_save",
    )
    @json_endpoint
    def api_attendance_save(employee_id: str, year: int, month: int):
        data = json_body()
        rows = data.get("attendance_data")
        if not isinstance(rows, list):
            raise ValidationError("attendance_data harus berupa list")

        store_id = _store_id_arg(data.get("store_id"))
        saved = container.attendance_service.save_grid(
            current_role=current_role(),
            employee_id=employee_id,
            rows=rows,
            store_id=store_id,
        )
        grid = container.attendance_service.get_monthly_grid(employee_id, format_month(year, month), store_id=store_id)
        return jsonify({"success": True, "message": "Data absensi berhasil disimpan", "saved": saved, **grid.to_dict()})

    @app.route("/api/attendance/recalculate", methods=["POST"], endpoint="api_attendance_recalculate")
    @json_endpoint
    def api_attendance_recalculate():
        data = json_body()
        row = data.get("row")
        if not isinstance(row, dict):
            raise ValidationError("row harus berupa objek")
        record = container.attendance_service.preview_row(
            str(data.get("employee_id") or ""),
            row,
            store_id=_store_id_arg(data.get("store_id")),
        )
        return jsonify({"success": True, "row": record.to_dict()})
