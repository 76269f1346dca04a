"""Issuing and resolving session tokens.

A session token is an HS256 JWT with the claims ``userId``, ``email``, ``iat``
and ``exp``. It is valid for ``SESSION_DURATION`` after issue. Nothing is
stored on the server, so logging out is done by the client dropping the token.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt

from . import config
from .db import Database
from .domain import SessionClaims, UserView, VerifiedIdentity
from .exceptions import (ConfigurationError, InvalidSessionToken,
                         Unauthenticated, UserNotFound)
from .userstore import getuser, to_view, upsert_user

log = logging.getLogger(__name__)

ALGORITHM = "HS256"

SESSION_DURATION = timedelta(days=config.SESSION_DURATION_DAYS)


def require_secret(secret: Optional[str]) -> str:
    if not secret:
        log.error("The app is misconfigured or no JWT secret has been set")
        raise ConfigurationError("JWT secret not configured")
    return secret


def encode(user_id: str, email: str, secret: str,
           issued_at: Optional[datetime] = None,
           duration: timedelta = SESSION_DURATION) -> str:
    """Encode a session token"""
    issued_at = issued_at or datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + duration,
    }
    return jwt.encode(payload, require_secret(secret), algorithm=ALGORITHM)


def decode(token: str, secret: str) -> SessionClaims:
    """Decode a session token, checking signature and expiry."""
    try:
        data = jwt.decode(token, require_secret(secret), algorithms=[ALGORITHM],
                          options={"require": ["exp", "iat"]})
    except jwt.ExpiredSignatureError as ex:
        # normal course of token expiring
        raise InvalidSessionToken("Token has expired") from ex
    except jwt.InvalidTokenError as ex:
        log.debug("session token rejected: %s", ex)
        raise InvalidSessionToken(str(ex) or "Token verification failed") from ex

    if not data.get("userId") or not data.get("email"):
        raise InvalidSessionToken("Token is missing session claims")
    return SessionClaims(user_id=str(data["userId"]), email=str(data["email"]))


def bearer_token(authorization: Optional[str]) -> str:
    """Gets the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        log.debug("Authorization header failed, lacked bearer")
        raise Unauthenticated()
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated()
    return token


def issue_session(identity: VerifiedIdentity, database: Database,
                  secret: Optional[str],
                  duration: timedelta = SESSION_DURATION) -> Tuple[str, UserView]:
    """Find or create the identity's user and mint a session token for it.

    The secret is checked before the store is touched so that a misconfigured
    server never writes a user it cannot issue a token for.
    """
    secret = require_secret(secret)
    with database.session() as db:
        user = upsert_user(db, identity)
        view = to_view(user)
    token = encode(view.id, view.email, secret, duration=duration)
    log.info("issued session for user %s", view.id)
    return token, view


def resolve(authorization: Optional[str], database: Database,
            secret: Optional[str]) -> UserView:
    """Resolve an ``Authorization`` header to the user it was issued for."""
    token = bearer_token(authorization)
    claims = decode(token, require_secret(secret))
    with database.session() as db:
        user = getuser(db, claims.user_id)
        if not user:
            log.debug("resolve() failed: user %s does not exist", claims.user_id)
            raise UserNotFound()
        return to_view(user)
