"""
handlers/health_handler.py
--------------------------
Liveness report.
"""

from flask import Blueprint, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/", methods=["GET"])
def report_health():
    """Report that the process is up. Does not touch the database."""
    return jsonify({"status": "so healthy right now!"})
