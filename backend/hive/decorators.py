# Overview: Request and capability decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import token_service


def require_auth(f):
    """
    Require a valid bearer token. Sets g.current_user and g.token.

    Returns 401 if the header is missing, the token is invalid, expired,
    revoked, or the account is deactivated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        user = token_service.validate_token(token)

        if not user:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = user
        g.token = token

        return f(*args, **kwargs)

    return decorated_function


def require_capability(check):
    """
    Require that a policy function from permissions.py allows the current user.
    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not hasattr(g, "current_user"):
                return jsonify({"error": "Authentication required"}), 401

            if not check(g.current_user):
                return jsonify({
                    "error": "Permission denied",
                    "required_capability": check.__name__,
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator
