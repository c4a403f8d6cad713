from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.decorators import admin_required
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/register", methods=["GET"], endpoint="register_card")
    @admin_required
    def register_card():
        try:
            bindings = container.card_service.list_bindings()
        except Exception:
            logger.exception("Could not load card bindings")
            bindings = []
        return render_template("admin/register.html", bindings=bindings, active_page="register_card")

    @app.route("/add", methods=["POST"], endpoint="add_card")
    @admin_required
    def add_card():
        try:
            container.card_service.bind(user_id=request.form.get("user_id", ""), uid=request.form.get("uid", ""))
            flash("Registration successful!", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Card registration failed")
            flash("Database error.", "danger")
        return redirect(url_for("register_card"))

    @app.route("/cards/<path:uid>/delete", methods=["POST"], endpoint="delete_card")
    @admin_required
    def delete_card(uid: str):
        try:
            container.card_service.unbind(uid)
            flash("Card removed.", "success")
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Card removal failed")
            flash("Database error.", "danger")
        return redirect(url_for("register_card"))
