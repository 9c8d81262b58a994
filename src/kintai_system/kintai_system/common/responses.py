from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import ClockInRejected, DomainError, NoDataToExportError, NotFoundError

logger = logging.getLogger(__name__)


def ok(payload: dict | None = None, status: int = 200):
    return jsonify({"success": True, **(payload or {})}), status


def error_response(e: Exception):
    """Map domain errors to JSON responses; anything else is a 500."""
    if isinstance(e, ClockInRejected):
        body = {"success": False, "message": str(e), "reason": e.reason}
        if e.minutes_since is not None:
            body["minutes_since"] = e.minutes_since
        return jsonify(body), 409
    if isinstance(e, NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404
    if isinstance(e, NoDataToExportError):
        return jsonify({"success": False, "message": str(e)}), 404
    if isinstance(e, DomainError):
        return jsonify({"success": False, "message": str(e)}), 400

    logger.exception("[api] unexpected error: %s", e)
    return jsonify({"success": False, "message": "システムエラーが発生しました"}), 500
