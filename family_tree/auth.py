"""FastAPI dependencies for the caller's session."""
import logging
from typing import Optional

from fastapi import Depends, Header, Request

from .db import Database, get_database
from .domain import UserView
from .sessions import resolve

log = logging.getLogger(__name__)


def jwt_secret(request: Request) -> Optional[str]:
    """Gets the JWT secret, None when unset"""
    secret = request.app.extra.get('JWT_SECRET')
    if hasattr(secret, "get_secret_value"):
        return secret.get_secret_value()
    return secret


def current_user(
    Authorization: Optional[str] = Header(None),
    secret: Optional[str] = Depends(jwt_secret),
    database: Database = Depends(get_database),
) -> UserView:
    """The user of the bearer session token, raises if there is none."""
    user = resolve(Authorization, database, secret)
    log.debug("request authenticated as %s", user.id)
    return user
