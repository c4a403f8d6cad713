from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from flask import Flask, current_app, flash, redirect, render_template, request, session, url_for
from werkzeug.utils import secure_filename

from ..common.decorators import admin_required
from ..core.exceptions import AuthenticationError, DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if "admin_id" in session:
            return redirect(url_for("manage_users"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_admin = container.auth_service.authenticate(username, password)

                session.permanent = bool(remember)

                session["admin_id"] = s_admin.admin_id
                session["name"] = s_admin.full_name

                flash("Logged in successfully.", "success")
                next_url = request.args.get("next") or ""
                # Only follow local paths.
                if next_url.startswith("/") and not next_url.startswith("//"):
                    return redirect(next_url)
                return redirect(url_for("manage_users"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Login failed for %r", username)
                flash("System error while logging in.", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("dashboard"))

    @app.route("/manage-users", endpoint="manage_users")
    @admin_required
    def manage_users():
        try:
            programs = container.roster_service.list_programs()
            departments = container.roster_service.list_departments()
        except Exception:
            logger.exception("Could not load programs/departments")
            flash("Could not load page data.", "danger")
            programs, departments = [], []
        return render_template(
            "admin/manage_users.html",
            programs=programs,
            departments=departments,
            active_page="manage_users",
        )

    @app.route("/users", endpoint="users_list")
    @admin_required
    def users_list():
        try:
            users = container.roster_service.list_roster()
        except Exception:
            logger.exception("Could not load roster")
            flash("Could not load page data.", "danger")
            users = []
        return render_template("admin/users.html", users=users, active_page="users_list")

    @app.route("/add-student-manual", methods=["POST"], endpoint="add_student_manual")
    @admin_required
    def add_student_manual():
        try:
            container.roster_service.add_student(
                user_id=request.form.get("user_id", ""),
                user_name=request.form.get("user_name", ""),
                year=request.form.get("year"),
                program_id=request.form.get("program_id"),
            )
            flash("Student added successfully!", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Failed to add student")
            flash("Failed to add student.", "danger")
        return redirect(url_for("manage_users"))

    @app.route("/add-faculty-manual", methods=["POST"], endpoint="add_faculty_manual")
    @admin_required
    def add_faculty_manual():
        try:
            container.roster_service.add_faculty(
                user_id=request.form.get("user_id", ""),
                user_name=request.form.get("user_name", ""),
                designation=request.form.get("designation"),
                department_id=request.form.get("department_id"),
            )
            flash("Faculty added successfully!", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Failed to add faculty")
            flash("Failed to add faculty.", "danger")
        return redirect(url_for("manage_users"))

    def _save_upload(upload) -> Path:
        folder = Path(current_app.config["UPLOAD_FOLDER"])
        folder.mkdir(parents=True, exist_ok=True)
        name = secure_filename(upload.filename or "") or "upload.xlsx"
        path = folder / f"{uuid.uuid4().hex}_{name}"
        upload.save(path)
        return path

    def _import(kind: str, importer, success_message: str):
        upload = request.files.get("userFile")
        if upload is None or not upload.filename:
            flash(f"No {kind} Excel file was uploaded.", "danger")
            return redirect(url_for("manage_users"))

        path = _save_upload(upload)
        try:
            count = importer(path)
            flash(success_message.format(count=count), "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception as e:
            logger.exception("%s import failed", kind)
            flash(str(e), "danger")
        finally:
            try:
                os.remove(path)
            except OSError:
                logger.error("Error deleting temp file %s", path)
        return redirect(url_for("manage_users"))

    @app.route("/upload-students-excel", methods=["POST"], endpoint="upload_students_excel")
    @admin_required
    def upload_students_excel():
        return _import("student", container.roster_service.import_students, "{count} students uploaded!")

    @app.route("/upload-faculty-excel", methods=["POST"], endpoint="upload_faculty_excel")
    @admin_required
    def upload_faculty_excel():
        return _import("faculty", container.roster_service.import_faculty, "{count} faculty members uploaded!")
