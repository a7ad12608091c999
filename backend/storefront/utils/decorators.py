from functools import wraps
from flask import current_app, jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request


def roles_required(*allowed_roles):
    """Reject the request unless the token's ``role`` claim is allowed."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return current_app.ensure_sync(fn)(*args, **kwargs)
        return wrapper
    return decorator
