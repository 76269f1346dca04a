"""Verification of Firebase ID tokens issued after a Google sign in.

The browser signs the user in with Firebase Authentication and posts the
resulting ID token to ``/api/auth/google``. The token is an RS256 JWT signed
by Google; its audience is the Firebase project id and its issuer is
``https://securetoken.google.com/<project id>``.

Google's public certificates are fetched over HTTP with a ``cachecontrol``
session so that they are reused until their cache headers expire.
"""
import logging
from contextlib import contextmanager
from threading import RLock
from typing import Optional, Union

import cachecontrol
import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.id_token
import requests

from .domain import VerifiedIdentity
from .exceptions import ConfigurationError, DependencyUnavailable, InvalidToken

log = logging.getLogger(__name__)

ISSUER_PREFIX = "https://securetoken.google.com/"

_sess = None
"""Session with caching.
See https://google-auth.readthedocs.io/en/stable/reference/google.oauth2.id_token.html
"""

_lock = RLock()
"""Lock for using the session, it is not thread safe"""


@contextmanager
def locked_session():
    """Get a session with caching of certs from Google"""
    global _sess
    with _lock:
        if not _sess:
            _sess = cachecontrol.CacheControl(requests.session())
        yield _sess


def verify_token(audience: str, token: Union[str, bytes]) -> Optional[dict]:
    """Call out to Google to verify a Firebase ID token, returns its claims."""
    with locked_session() as session:
        request = google.auth.transport.requests.Request(session=session)
        return google.oauth2.id_token.verify_firebase_token(token, request, audience)


def identity_from_idinfo(idinfo: dict, project_id: str) -> VerifiedIdentity:
    """Checks the issuer and email of verified claims."""
    if idinfo.get('iss') != ISSUER_PREFIX + project_id:
        raise InvalidToken("Token was not issued for this project")
    email = idinfo.get('email')
    if not email:
        raise InvalidToken("Token has no email claim")
    return VerifiedIdentity(
        email=email,
        name=idinfo.get('name') or None,
        avatar_url=idinfo.get('picture') or None,
        provider_subject_id=idinfo.get('sub') or None,
    )


def verify_identity_token(raw_token: Optional[str], project_id: Optional[str]) -> VerifiedIdentity:
    """Verify ``raw_token`` and return the identity it asserts.

    Raises
    ------
    InvalidToken
        The token is empty, malformed, expired, for another audience or
        issuer, or has no email.
    ConfigurationError
        No Firebase project id is configured.
    DependencyUnavailable
        Google's certificates could not be fetched.
    """
    if not project_id:
        log.error("FIREBASE_PROJECT_ID is not set, cannot verify identity tokens")
        raise ConfigurationError("Identity provider is not configured")
    if not raw_token:
        raise InvalidToken("No token provided")

    try:
        idinfo = verify_token(project_id, raw_token)
    except google.auth.exceptions.TransportError as ex:
        log.warning("Could not fetch identity provider certificates: %s", ex)
        raise DependencyUnavailable("Identity provider is unreachable",
                                    error="Identity provider unavailable") from ex
    except (ValueError, google.auth.exceptions.GoogleAuthError) as ex:
        log.debug("identity token rejected: %s", ex)
        raise InvalidToken(str(ex)) from ex

    if not idinfo:
        raise InvalidToken("Token could not be verified")
    identity = identity_from_idinfo(idinfo, project_id)
    log.debug("identity token verified for %s", identity.email[:10])
    return identity
