"""Validation of member and family tree data sent by clients."""

import re
from datetime import date, datetime
from typing import Dict, Optional

from .domain import FamilyTreeData, MemberData
from .exceptions import ValidationError
from .relationships import replay_conflicts

MAX_NAME = 100
MAX_RELATION = 100
MAX_DESCRIPTION = 1000

ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
US_DATE = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$')
HTML_TAG = re.compile(r'<[^>]*>')

DATE_FORMAT_MESSAGE = 'Invalid {} date format. Use YYYY-MM-DD or MM/DD/YYYY'


def parse_date(value: str) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` or ``MM/DD/YYYY``, None if neither or not a real date."""
    if ISO_DATE.match(value):
        fmt = '%Y-%m-%d'
    elif US_DATE.match(value):
        fmt = '%m/%d/%Y'
    else:
        return None
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError:
        return None


def contains_html(value: str) -> bool:
    return bool(HTML_TAG.search(value))


def validate_member(member: MemberData) -> Dict[str, str]:
    """Field errors for a member, empty if it is valid."""
    errors: Dict[str, str] = {}

    if not member.name or not member.name.strip():
        errors['name'] = 'Name is required'
    elif len(member.name) > MAX_NAME:
        errors['name'] = f'Name is too long (maximum {MAX_NAME} characters)'
    elif contains_html(member.name):
        errors['name'] = 'Name cannot contain HTML tags'

    if not member.relation or not member.relation.strip():
        errors['relation'] = 'Relation is required'
    elif len(member.relation) > MAX_RELATION:
        errors['relation'] = f'Relation is too long (maximum {MAX_RELATION} characters)'
    elif contains_html(member.relation):
        errors['relation'] = 'Relation cannot contain HTML tags'

    birth = death = None
    if member.birth_date:
        birth = parse_date(member.birth_date)
        if birth is None:
            errors['birthDate'] = DATE_FORMAT_MESSAGE.format('birth')
    if member.death_date:
        death = parse_date(member.death_date)
        if death is None:
            errors['deathDate'] = DATE_FORMAT_MESSAGE.format('death')
    if birth and death and birth > death:
        errors['deathDate'] = 'Death date cannot be earlier than birth date'

    if member.description:
        if len(member.description) > MAX_DESCRIPTION:
            errors['description'] = f'Description is too long (maximum {MAX_DESCRIPTION} characters)'
        elif contains_html(member.description):
            errors['description'] = 'Description cannot contain HTML tags'

    return errors


def validate_family_tree(tree: Optional[FamilyTreeData]) -> FamilyTreeData:
    """Raise ``ValidationError`` with every problem found in ``tree``.

    Errors of a member are keyed ``<field>.<member id>``.
    """
    if tree is None or 'members' not in tree.model_fields_set:
        raise ValidationError('Family tree data with members is required')

    errors: Dict[str, str] = {}
    seen = set()
    for member in tree.members:
        if not member.id:
            errors['id'] = 'Member id is required'
        elif member.id in seen:
            errors[f'id.{member.id}'] = 'Duplicate member id'
        seen.add(member.id)
        for field, message in validate_member(member).items():
            errors[f'{field}.{member.id}'] = message

    errors.update(replay_conflicts(tree))

    if errors:
        raise ValidationError('Member data validation failed', errors=errors)
    return tree
