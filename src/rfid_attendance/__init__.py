"""RFID attendance terminal.

This package is organized by feature modules (users, cards, attendance, reports, ...)
with a thin Flask controller layer and service/repository layers. Card scans
arrive from a serial reader thread and are pushed to dashboards over Socket.IO.
"""

from .main import create_app, run

__all__ = ["create_app", "run"]
