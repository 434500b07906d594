from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError, WriteConflictError

logger = logging.getLogger(__name__)


def current_role() -> Role:
    """Role of the logged-in operator, taken from the session."""

    raw = session.get("role")
    if not raw:
        raise AuthorizationError("Silakan login terlebih dahulu")
    try:
        return Role(str(raw).lower())
    except ValueError:
        raise AuthorizationError("Peran pengguna tidak dikenal") from None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Body harus berupa objek JSON")
    return data


def error_response(message: str, status: int, **extra):
    payload = {"success": False, "message": message}
    payload.update(extra)
    return jsonify(payload), status


def json_endpoint(view):
    """Map domain errors to the JSON error envelope."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except WriteConflictError as e:
            return error_response(str(e), 409, conflict=e.to_dict())
        except NotFoundError as e:
            return error_response(str(e), 404)
        except AuthorizationError as e:
            return error_response(str(e), 403)
        except ValidationError as e:
            return error_response(str(e), 400)
        except DomainError as e:
            return error_response(str(e), 400)
        except HTTPException as e:
            return error_response(e.description or e.name, e.code or 500)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return error_response("Terjadi kesalahan sistem", 500)

    return wrapper
