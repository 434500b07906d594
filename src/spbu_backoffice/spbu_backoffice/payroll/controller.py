from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_month, now_local
from ..common.http import current_role, json_body, json_endpoint
from ..core.enums import SuggestionKind
from ..core.exceptions import ValidationError
from ..container import Container
from .suggestions import SuggestionSelection

_KINDS = {"bonuses": SuggestionKind.BONUS, "deductions": SuggestionKind.DEDUCTION}


def _store_ids_arg(raw) -> list[int]:
    if raw in (None, ""):
        raise ValidationError("store_id wajib diisi")
    try:
        return [int(part) for part in str(raw).split(",") if part.strip()]
    except ValueError:
        raise ValidationError("store_id harus berupa angka") from None


def _kind(value: str) -> SuggestionKind:
    kind = _KINDS.get(value)
    if kind is None:
        raise ValidationError(f"Jenis item tidak dikenal: {value}")
    return kind


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="api_payroll_list")
    @json_endpoint
    def api_payroll_list():
        today = now_local()
        month = request.args.get("month") or format_month(today.year, today.month)
        store_ids = _store_ids_arg(request.args.get("store_id"))
        records = service.list_month(store_ids=store_ids, month=month)
        summary = service.summarize(store_ids=store_ids, month=month)
        return jsonify({"success": True, "payrolls": [r.to_dict() for r in records], "summary": summary.to_dict()})

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="api_payroll_generate")
    @json_endpoint
    def api_payroll_generate():
        data = json_body()
        store_ids = _store_ids_arg(data.get("store_id"))
        if len(store_ids) != 1:
            raise ValidationError("Pilih satu toko untuk generate gaji")
        report = service.generate_monthly(
            current_role=current_role(),
            month=str(data.get("month") or ""),
            store_id=store_ids[0],
        )
        return jsonify({"success": True, "message": "Gaji bulanan berhasil dibuat", "report": report.to_dict()})

    @app.route("/api/payroll/<payroll_id>", methods=["GET"], endpoint="api_payroll_detail")
    @json_endpoint
    def api_payroll_detail(payroll_id: str):
        return jsonify({"success": True, "payroll": service.get(payroll_id).to_dict()})

    @app.route("/api/payroll/<payroll_id>/slip", methods=["GET"], endpoint="api_payroll_slip")
    @json_endpoint
    def api_payroll_slip(payroll_id: str):
        return jsonify({"success": True, "slip": service.salary_slip(payroll_id).to_dict()})

    @app.route("/api/payroll/<payroll_id>", methods=["PATCH"], endpoint="api_payroll_update")
    @json_endpoint
    def api_payroll_update(payroll_id: str):
        data = json_body()
        record = service.update_amounts(
            current_role=current_role(),
            payroll_id=payroll_id,
            base_salary=data.get("base_salary"),
            overtime_pay=data.get("overtime_pay"),
            expected_version=data.get("version"),
        )
        return jsonify({"success": True, "payroll": record.to_dict()})

    @app.route("/api/payroll/<payroll_id>/suggestions", methods=["GET"], endpoint="api_payroll_suggestions")
    @json_endpoint
    def api_payroll_suggestions(payroll_id: str):
        result = service.get_suggestions(payroll_id)
        selection = SuggestionSelection.initial(result.items)
        return jsonify(
            {
                "success": True,
                "suggestions": [item.to_dict() for item in result.items],
                "selected_ids": sorted(selection.selected_ids),
                "totals": selection.totals(result.items).to_dict(),
                "empty_reason": result.empty_reason,
            }
        )

    @app.route("/api/payroll/<payroll_id>/suggestions/apply", methods=["POST"], endpoint="api_payroll_apply")
    @json_endpoint
    def api_payroll_apply(payroll_id: str):
        data = json_body()
        selected_ids = data.get("selected_ids")
        if not isinstance(selected_ids, list):
            raise ValidationError("selected_ids harus berupa list")
        record = service.apply_suggestions(
            current_role=current_role(),
            payroll_id=payroll_id,
            selected_ids=[str(i) for i in selected_ids],
            expected_version=data.get("version"),
        )
        return jsonify({"success": True, "message": "Usulan berhasil diterapkan", "payroll": record.to_dict()})

    @app.route("/api/payroll/<payroll_id>/<kind>", methods=["POST"], endpoint="api_payroll_add_item")
    @json_endpoint
    def api_payroll_add_item(payroll_id: str, kind: str):
        data = json_body()
        record = service.add_line_item(
            current_role=current_role(),
            payroll_id=payroll_id,
            kind=_kind(kind),
            name=str(data.get("name") or ""),
            amount=data.get("amount"),
            expected_version=data.get("version"),
        )
        return jsonify({"success": True, "payroll": record.to_dict()})

    @app.route("/api/payroll/<payroll_id>/<kind>/<int:index>", methods=["DELETE"], endpoint="api_payroll_remove_item")
    @json_endpoint
    def api_payroll_remove_item(payroll_id: str, kind: str, index: int):
        record = service.remove_line_item(
            current_role=current_role(),
            payroll_id=payroll_id,
            kind=_kind(kind),
            index=index,
            expected_version=request.args.get("version", type=int),
        )
        return jsonify({"success": True, "payroll": record.to_dict()})

    @app.route("/api/payroll/<payroll_id>/pay", methods=["POST"], endpoint="api_payroll_pay")
    @json_endpoint
    def api_payroll_pay(payroll_id: str):
        record = service.mark_paid(current_role=current_role(), payroll_id=payroll_id)
        return jsonify({"success": True, "message": "Gaji ditandai sudah dibayar", "payroll": record.to_dict()})
