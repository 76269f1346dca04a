"""Checks on relationships between members of one family tree.

Relationship targets and parent ids are not enforced by the database, so a
member may point at someone who is not in the tree. Such dangling references
are never treated as errors here: a conflict check skips them and a lineage
walk ends at them with ``UNKNOWN``.
"""
import logging
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Set

from .domain import FamilyTreeData, MemberData, Relationship, RelationType

log = logging.getLogger(__name__)

UNKNOWN = "unknown"
"""Marks a lineage link whose member is missing from the tree."""


class ConflictType(str, Enum):
    SELF_REFERENCE = 'self_reference'
    DUPLICATE = 'duplicate'
    ROLE_CONFLICT = 'role_conflict'
    CYCLE = 'cycle'


class Conflict(NamedTuple):
    type: ConflictType
    message: str


def members_by_id(tree: FamilyTreeData) -> Dict[str, MemberData]:
    return {member.id: member for member in tree.members}


def is_ancestor(tree: FamilyTreeData, member_id: str, potential_ancestor_id: str) -> bool:
    """Whether ``potential_ancestor_id`` is reachable from ``member_id``
    through parent relationships. A member counts as its own ancestor."""
    members = members_by_id(tree)
    seen: Set[str] = set()
    stack = [member_id]
    while stack:
        current = stack.pop()
        if current == potential_ancestor_id:
            return True
        if current in seen:
            continue
        seen.add(current)
        member = members.get(current)
        if member is None:
            continue
        stack.extend(rel.target_id for rel in member.relationships
                     if rel.type == RelationType.PARENT)
    return False


def check_relationship_conflict(tree: FamilyTreeData, member_id: str,
                                relationship: Relationship) -> Optional[Conflict]:
    """Check adding ``relationship`` to the member ``member_id``.

    Returns the first conflict found or None.
    """
    if member_id == relationship.target_id:
        return Conflict(ConflictType.SELF_REFERENCE,
                        'Cannot create a relationship with yourself')

    members = members_by_id(tree)
    member = members.get(member_id)
    if member is None or relationship.target_id not in members:
        log.debug("relationship %s -> %s is dangling, not checked",
                  member_id, relationship.target_id)
        return None

    existing = member.relationships
    if any(r.target_id == relationship.target_id and r.type == relationship.type
           for r in existing):
        return Conflict(ConflictType.DUPLICATE,
                        f'This {relationship.type.value} relationship already exists')

    if relationship.type == RelationType.PARENT:
        if any(r.target_id == relationship.target_id and r.type == RelationType.CHILD
               for r in existing):
            return Conflict(ConflictType.ROLE_CONFLICT,
                            'Cannot set as parent: this member is already your child')
        if is_ancestor(tree, relationship.target_id, member_id):
            return Conflict(ConflictType.CYCLE,
                            'Cannot set as parent: this would create a cycle in the family tree')

    if relationship.type == RelationType.CHILD:
        if any(r.target_id == relationship.target_id and r.type == RelationType.PARENT
               for r in existing):
            return Conflict(ConflictType.ROLE_CONFLICT,
                            'Cannot set as child: this member is already your parent')
        if is_ancestor(tree, member_id, relationship.target_id):
            return Conflict(ConflictType.CYCLE,
                            'Cannot set as child: this would create a cycle in the family tree')

    return None


def replay_conflicts(tree: FamilyTreeData) -> Dict[str, str]:
    """Check every member's relationships as if they were added one by one.

    Returns a mapping of ``relationships.<member id>`` to the first conflict
    message for that member.
    """
    errors: Dict[str, str] = {}
    for index, member in enumerate(tree.members):
        for position, relationship in enumerate(member.relationships):
            partial = member.model_copy(
                update={'relationships': member.relationships[:position]})
            members = list(tree.members)
            members[index] = partial
            conflict = check_relationship_conflict(
                tree.model_copy(update={'members': members}), member.id, relationship)
            if conflict:
                errors[f'relationships.{member.id}'] = conflict.message
                break
    return errors


def lineage(tree: FamilyTreeData, member_id: str) -> List[str]:
    """Ids from ``member_id`` up through ``parent_id`` links.

    A parent id that is not in the tree, or one that loops back, ends the list
    with ``UNKNOWN``.
    """
    members = members_by_id(tree)
    if member_id not in members:
        return [UNKNOWN]
    chain = [member_id]
    current = members[member_id]
    while current.parent_id:
        parent = members.get(current.parent_id)
        if parent is None or parent.id in chain:
            chain.append(UNKNOWN)
            break
        chain.append(parent.id)
        current = parent
    return chain
