"""Reads and writes of family trees and their members."""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .domain import FamilyTreeData, FamilyTreeSummary, Gender, MemberData, Relationship
from .exceptions import FamilyTreeNotFound, ValidationError
from .tables import FamilyTree, Member, utcnow

log = logging.getLogger(__name__)

DEFAULT_TREE_NAME = 'Unnamed Family Tree'

GENDERS = {gender.value for gender in Gender}


def to_summary(tree: FamilyTree) -> FamilyTreeSummary:
    return FamilyTreeSummary(
        id=tree.id,
        name=tree.name,
        root_id=tree.root_id,
        created_at=tree.created_at,
        updated_at=tree.updated_at,
    )


def to_member_data(member: Member) -> MemberData:
    return MemberData(
        id=member.id,
        name=member.name,
        relation=member.relation,
        parent_id=member.parent_id,
        birth_date=member.birth_date,
        death_date=member.death_date,
        gender=member.gender if member.gender in GENDERS else None,
        description=member.description,
        relationships=[Relationship.model_validate(rel) for rel in member.relationships or []],
    )


def list_family_trees(db: Session, user_id: str) -> List[FamilyTreeSummary]:
    """Trees owned by the user, newest first"""
    trees = (db.query(FamilyTree)
             .filter(FamilyTree.user_id == user_id)
             .order_by(FamilyTree.created_at.desc(), FamilyTree.id.desc())
             .all())
    return [to_summary(tree) for tree in trees]


def get_family_tree(db: Session, tree_id: int, user_id: str) -> FamilyTreeData:
    """The tree with its members if it exists and the user owns it."""
    tree = (db.query(FamilyTree)
            .filter(FamilyTree.id == tree_id, FamilyTree.user_id == user_id)
            .first())
    if not tree:
        raise FamilyTreeNotFound(
            'Family tree not found or you do not have permission to access it')

    members = (db.query(Member)
               .filter(Member.family_tree_id == str(tree_id))
               .order_by(Member.created_at, Member.id)
               .all())
    return FamilyTreeData(
        members=[to_member_data(member) for member in members],
        name=tree.name,
        root_id=tree.root_id,
        created_at=tree.created_at,
        updated_at=tree.updated_at,
    )


def save_family_tree(db: Session, user_id: str, tree: FamilyTreeData) -> int:
    """Store ``tree`` as a new family tree owned by the user, returns its id.

    Member ids are global, so a member id stored by any earlier tree is
    rejected with ``ValidationError``.
    """
    ids = [member.id for member in tree.members]
    in_use = [row[0] for row in db.query(Member.id).filter(Member.id.in_(ids)).all()] if ids else []
    if in_use:
        raise ValidationError('A member id is already in use',
                              errors={f'id.{member_id}': 'Member id is already in use'
                                      for member_id in in_use})

    now = utcnow()
    record = FamilyTree(
        name=tree.name or DEFAULT_TREE_NAME,
        root_id=tree.root_id,
        user_id=user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(record)
    db.flush()
    tree_id = record.id
    log.info("saving family tree %s for user %s with %d members",
             tree_id, user_id, len(tree.members))

    for member in tree.members:
        db.add(Member(
            id=member.id,
            name=member.name,
            relation=member.relation,
            parent_id=member.parent_id,
            birth_date=member.birth_date,
            death_date=member.death_date,
            gender=member.gender.value if member.gender else None,
            description=member.description,
            relationships=[rel.model_dump(mode='json', by_alias=True, exclude_none=True)
                           for rel in member.relationships],
            family_tree_id=str(tree_id),
            created_at=now,
            updated_at=now,
        ))
    try:
        db.commit()
    except IntegrityError as ex:
        db.rollback()
        log.warning("saving family tree for user %s failed on a member id", user_id)
        raise ValidationError('A member id is already in use') from ex
    return tree_id
