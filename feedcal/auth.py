"""Authentication gate for the feed transport."""

import base64
import binascii
import hmac
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from feedcal.config import AuthConfig

logger = logging.getLogger(__name__)

REALM = "feedcal"
CHALLENGE = {"WWW-Authenticate": f'Basic realm="{REALM}"'}


@dataclass(frozen=True)
class AuthDecision:
    """Outcome of checking one request."""

    allowed: bool
    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    message: str = ""


ALLOW = AuthDecision(True)


def _unauthorized() -> AuthDecision:
    return AuthDecision(False, 401, dict(CHALLENGE), "Unauthorized")


def _forbidden() -> AuthDecision:
    return AuthDecision(False, 403, {}, "Forbidden")


def _matches(supplied: Optional[str], expected: str) -> bool:
    if supplied is None:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def basic_password(authorization: str) -> Optional[str]:
    """Password part of a Basic Authorization header, if well-formed."""
    if not authorization.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(authorization[6:].strip(), validate=True)
    except (binascii.Error, ValueError):
        return None
    _, sep, password = decoded.decode("utf-8", errors="replace").partition(":")
    return password if sep else None


def bearer_token(authorization: str) -> Optional[str]:
    if not authorization.startswith("Bearer "):
        return None
    return authorization[7:].strip()


def check_auth(headers: Mapping[str, str], auth: AuthConfig | None) -> AuthDecision:
    """
    Check request headers against the configured mode.

    Modes:
        none: every request is allowed
        token: "Bearer <token>", or Basic auth whose password is the token
        password: Basic auth with the configured password
        trusted-proxy: required headers and a user header set by the proxy,
            optionally restricted to an allow-list of users

    A token or password mode without a configured secret allows everything.
    """
    if auth is None or auth.mode == "none":
        return ALLOW

    lowered = {k.lower(): v for k, v in headers.items()}
    authorization = lowered.get("authorization", "")

    if auth.mode == "token":
        token = (auth.token or "").strip()
        if not token:
            return ALLOW
        if _matches(bearer_token(authorization), token) or _matches(
            basic_password(authorization), token
        ):
            return ALLOW
        logger.info("Rejected request with missing or invalid token")
        return _unauthorized()

    if auth.mode == "password":
        password = (auth.password or "").strip()
        if not password:
            return ALLOW
        if _matches(basic_password(authorization), password):
            return ALLOW
        logger.info("Rejected request with missing or invalid password")
        return _unauthorized()

    if auth.mode == "trusted-proxy":
        proxy = auth.trusted_proxy
        if proxy is None:
            return ALLOW
        for header in proxy.required_headers:
            if not lowered.get(header.lower()):
                logger.info(f"Rejected request without proxy header {header}")
                return _forbidden()
        user = lowered.get(proxy.user_header.lower())
        if not user:
            logger.info("Rejected request without proxy user")
            return _forbidden()
        if proxy.allow_users and user not in proxy.allow_users:
            logger.info(f"Rejected proxy user {user!r}")
            return _forbidden()
        return ALLOW

    return ALLOW
