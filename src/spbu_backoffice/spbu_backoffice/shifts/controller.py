from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_endpoint
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/stores/<int:store_id>/shifts", methods=["GET"], endpoint="api_store_shifts")
    @json_endpoint
    def api_store_shifts(store_id: int):
        schedule = container.shift_resolver.resolve(store_id)
        return jsonify({"success": True, "is_default": schedule.is_default, "shifts": schedule.to_list()})
