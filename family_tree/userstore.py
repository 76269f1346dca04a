"""Reads and writes of users."""

import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .domain import UserView, VerifiedIdentity
from .exceptions import ValidationError
from .tables import User, utcnow

log = logging.getLogger(__name__)


def to_view(user: User) -> UserView:
    """Public view of a user row"""
    return UserView(
        id=user.id,
        name=user.name,
        email=user.email,
        profile_image=user.profile_image,
    )


def getuser(db: Session, user_id: str) -> Optional[User]:
    """Gets a user by id"""
    return db.query(User).filter(User.id == user_id).first()


def getuser_by_email(db: Session, email: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        log.debug("no user found in DB for email %s", email[:10])
    return user


def default_name(email: str) -> str:
    """Name for a new user whose provider sent none, the local part of the email."""
    return email.split('@')[0]


def upsert_user(db: Session, identity: VerifiedIdentity) -> User:
    """Find the user with the identity's email or create one.

    An existing user keeps its id. Its provider id, name and avatar are only
    replaced by non-empty values from ``identity``.

    The change is committed and the returned row is read back from the
    database, so it reflects what was stored.
    """
    user = getuser_by_email(db, identity.email)
    if user:
        user_id = user.id
        if identity.provider_subject_id:
            user.google_id = identity.provider_subject_id
        if identity.name:
            user.name = identity.name
        if identity.avatar_url:
            user.profile_image = identity.avatar_url
        log.info("updating user %s on login", user_id)
    else:
        user_id = str(uuid4())
        db.add(User(
            id=user_id,
            email=identity.email,
            name=identity.name or default_name(identity.email),
            google_id=identity.provider_subject_id,
            profile_image=identity.avatar_url,
            created_at=utcnow(),
        ))
        log.info("creating user %s for email %s", user_id, identity.email[:10])

    try:
        db.commit()
    except IntegrityError as ex:
        db.rollback()
        if not user and getuser_by_email(db, identity.email):
            # another login created the user first
            log.info("user for %s created concurrently, updating it", identity.email[:10])
            return upsert_user(db, identity)
        log.warning("user upsert for %s violated a unique constraint", identity.email[:10])
        raise ValidationError("This account is already linked to another user",
                              error="Invalid account") from ex

    db.expire_all()
    return db.query(User).filter(User.id == user_id).one()
