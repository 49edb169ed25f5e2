"""
Bearer-token checks for the API.

Staff log in with the shared password and get a `user` token; administrators
log in with their own account and get an `admin` token. Both are HS256 JWTs
signed with SECRET_KEY. Admin tokens are accepted wherever a user token is.
"""

import hmac
from datetime import timedelta
from functools import wraps

import jwt
from flask import current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import Conflict, Forbidden, Unauthorized, ValidationError
from .models import Admin, db
from .policy import utcnow_naive

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def issue_token(role: str, subject: str, ttl_hours: int) -> str:
    now = utcnow_naive()
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token, current_app.config["SECRET_KEY"], algorithms=["HS256"]
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith("bearer "):
        raise Unauthorized("Missing bearer token")
    token = header.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Missing bearer token")
    return token


def current_claims() -> dict:
    claims = decode_token(_bearer_token())
    if claims.get("role") not in (ROLE_USER, ROLE_ADMIN):
        raise Unauthorized("Invalid token")
    return claims


def require_auth(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.claims = current_claims()
        return view(*args, **kwargs)

    return wrapper


def require_admin(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        claims = current_claims()
        if claims.get("role") != ROLE_ADMIN:
            raise Forbidden("Admin access required")
        g.claims = claims
        return view(*args, **kwargs)

    return wrapper


def is_admin_request() -> bool:
    claims = getattr(g, "claims", None) or {}
    return claims.get("role") == ROLE_ADMIN


def login_with_password(password) -> str:
    expected = current_app.config.get("SHARED_PASSWORD") or ""
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")
    if not expected or not hmac.compare_digest(
        password.encode("utf-8"), expected.encode("utf-8")
    ):
        current_app.logger.warning("[auth] failed shared-password login")
        raise Unauthorized("Wrong password")
    return issue_token(
        ROLE_USER, "staff", int(current_app.config.get("TOKEN_TTL_HOURS", 720))
    )


def login_admin(username, password) -> str:
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username and password are required")
    if not isinstance(password, str) or not password:
        raise ValidationError("Username and password are required")
    admin = Admin.query.filter_by(username=username.strip()).first()
    if admin is None or not check_password_hash(admin.password_hash, password):
        current_app.logger.warning("[auth] failed admin login user=%s", username)
        raise Unauthorized("Invalid username or password")
    return issue_token(
        ROLE_ADMIN,
        admin.username,
        int(current_app.config.get("ADMIN_TOKEN_TTL_HOURS", 24)),
    )


def create_admin(username: str, password: str) -> Admin:
    if not username or not username.strip() or not password:
        raise ValidationError("Username and password are required")
    if Admin.query.filter_by(username=username.strip()).first() is not None:
        raise Conflict("Username already exists")
    admin = Admin(
        username=username.strip(),
        password_hash=generate_password_hash(password),
        created_at=utcnow_naive(),
    )
    db.session.add(admin)
    db.session.commit()
    return admin
