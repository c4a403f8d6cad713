from __future__ import annotations

import logging

from flask import Flask, jsonify, render_template, request
from flask_socketio import emit

from ..common.decorators import admin_required
from ..container import Container
from ..core.enums import SocketEvent
from ..extensions import socketio

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="dashboard")
    def dashboard():
        try:
            data = container.scan_service.dashboard()
            logs, counts, today = data.logs, data.counts, data.date
        except Exception:
            logger.exception("Dashboard load error")
            logs, counts, today = [], {}, ""
        return render_template("dashboard.html", logs=logs, counts=counts, today=today, active_page="dashboard")

    @app.route("/api/today", methods=["GET"], endpoint="api_today")
    def api_today():
        try:
            data = container.scan_service.dashboard()
        except Exception:
            logger.exception("Dashboard snapshot error")
            return jsonify({"success": False, "message": "Could not load today's attendance."}), 500
        return jsonify({"success": True, "date": data.date, "logs": data.logs, "counts": data.counts})

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @admin_required
    def api_scan():
        """Manual entry of a card UID, for when the reader is offline."""

        data = request.get_json(silent=True) or request.form
        uid = (data.get("uid") or "").strip()
        if not uid:
            return jsonify({"success": False, "message": "UID is required."}), 400

        event = container.scan_service.submit(uid)
        return jsonify({"success": True, "event": event.to_payload()})

    @socketio.on("connect")
    def on_connect():
        # New dashboards get the current counts without waiting for the next login.
        try:
            emit(SocketEvent.COUNTS.value, container.scan_service.today_branch_counts())
        except Exception:
            logger.exception("Could not send counts to new client")
