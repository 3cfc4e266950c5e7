"""
handlers/common.py
------------------
Request parsing, response helpers, and the error-to-status translation
shared by all blueprints.
"""

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from repositories.neighborhood_repo import NeighborhoodRepository
from utils.errors import ErrorKind, NeighborhoodError, validation_error
from utils.logger import get_logger

logger = get_logger(__name__)

# Path ids are read as 32-bit signed integers.
MAX_ID = 2**31 - 1

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_TREE: 400,
    ErrorKind.TREE_STANDING: 400,
    ErrorKind.NO_TREES_AT_HOUSE: 400,
    ErrorKind.NO_SUCH_RECORD: 404,
    ErrorKind.EMPTY_RESULT: 404,
    ErrorKind.PERSISTENCE: 500,
}


def get_repo() -> NeighborhoodRepository:
    """Return the repository injected into the running app."""
    return current_app.neighborhood_repo


def parse_id(raw: str, name: str) -> int:
    """
    Parse a path parameter as a positive, non-zero decimal id.

    Raises:
        NeighborhoodError: VALIDATION when the value is not usable.
    """
    value = int(raw) if raw.isascii() and raw.isdigit() else 0
    if value <= 0 or value > MAX_ID:
        raise validation_error(f"param {name} must be a valid, non-zero numeral")
    return value


def read_json_object(entity: str) -> dict:
    """
    Decode the request body as a JSON object.

    Raises:
        NeighborhoodError: VALIDATION when the body is not a JSON object.
    """
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise validation_error(f"error decoding request body as {entity}")
    return body


def require_text(body: dict, key: str, label: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value.strip():
        raise validation_error(f"must specify {label}")
    return value


def optional_text(body: dict, key: str, label: str) -> str:
    value = body.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise validation_error(f"{label} must be a string")
    return value


def require_house(house_id: int) -> None:
    """Raise NO_SUCH_RECORD unless the house exists."""
    if not get_repo().house_exists(house_id):
        raise NeighborhoodError(ErrorKind.NO_SUCH_RECORD, f"no House exists with ID {house_id}")


def error_response(message: str, status: int):
    return jsonify({"message": message}), status


def handle_neighborhood_error(error: NeighborhoodError):
    """Translate a NeighborhoodError into a JSON error response."""
    status = STATUS_BY_KIND.get(error.kind, 500)
    if status >= 500:
        logger.error(
            f"{request.method} {request.path} failed: {error.message}",
            exc_info=error,
        )
        return error_response("internal server error", status)
    return error_response(error.message, status)


def handle_http_error(error: HTTPException):
    """Render routing errors (404, 405, ...) as JSON."""
    if error.code is None or error.code < 400:
        return error
    return error_response(error.description or error.name, error.code or 500)
