"""SQLAlchemy tables for users, family trees and members.

``parent_id``, ``root_id``, ``family_tree_id`` and the relationship targets are
logical references only. No foreign keys are declared for them, so rows may
point at members or trees that no longer exist.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)  # uuid4 string
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    google_id = Column(String, unique=True, nullable=True)
    profile_image = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class FamilyTree(Base):
    __tablename__ = "family_trees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=True)
    root_id = Column(Text, nullable=True)
    user_id = Column(Text, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Member(Base):
    __tablename__ = "members"

    id = Column(Text, primary_key=True)  # supplied by the client
    name = Column(Text, nullable=False)
    relation = Column(Text, nullable=False)
    parent_id = Column(Text, nullable=True)
    birth_date = Column(Text, nullable=True)
    death_date = Column(Text, nullable=True)
    gender = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    relationships = Column(JSON, nullable=False, default=list)
    family_tree_id = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
