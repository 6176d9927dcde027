from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .tokens import TokenIssuer


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header:
        raise AuthenticationError("Authorization header is required")

    scheme, _, token = header.partition(" ")
    token = token.strip() if scheme.lower() == "bearer" else header.strip()
    if not token:
        raise AuthenticationError("Token is required")
    return token


def bearer_required(tokens: TokenIssuer, *, role: Optional[Role] = None):
    """Reject the request unless it carries a valid token (with ``role`` if given).

    The decoded claims are available as ``g.claims`` inside the view.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            claims = tokens.verify(_bearer_token())
            if role is not None and claims.role != role:
                raise AuthorizationError(f"This action requires a {role.value} account")
            g.claims = claims
            return view(*args, **kwargs)

        return wrapper

    return decorator
