"""Wire and domain models.

JSON bodies use camelCase keys, the Python attributes use snake_case.
"""
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerifiedIdentity(BaseModel):
    """Subject extracted from a verified identity provider token."""

    email: str
    """Verified email, always present"""

    name: Optional[str] = None
    """Display name from the provider"""

    avatar_url: Optional[str] = None
    """``picture`` claim"""

    provider_subject_id: Optional[str] = None
    """``sub`` claim, the provider's id for the account"""


class SessionClaims(CamelModel):
    """Claims carried in a session token."""

    user_id: str
    email: str


class UserView(CamelModel):
    """Public view of a user."""

    id: str
    name: Optional[str] = None
    email: str
    profile_image: Optional[str] = None


class Gender(str, Enum):
    MALE = 'male'
    FEMALE = 'female'
    OTHER = 'other'


class RelationType(str, Enum):
    PARENT = 'parent'
    CHILD = 'child'
    SPOUSE = 'spouse'
    SIBLING = 'sibling'
    OTHER = 'other'


class Relationship(CamelModel):
    type: RelationType
    target_id: str
    description: Optional[str] = None


class MemberData(CamelModel):
    """A family tree member as sent by the client.

    ``name`` and ``relation`` are required by the store but only checked by
    ``family_tree.validation`` so that all field errors are reported together.
    """

    id: str
    name: str = ''
    relation: str = ''
    parent_id: Optional[str] = None
    birth_date: Optional[str] = None
    death_date: Optional[str] = None
    gender: Optional[Gender] = None
    description: Optional[str] = None
    relationships: List[Relationship] = Field(default_factory=list)


class FamilyTreeData(CamelModel):
    members: List[MemberData] = Field(default_factory=list)
    root_id: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FamilyTreeSummary(CamelModel):
    id: int
    name: Optional[str] = None
    root_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Request and response bodies

class GoogleAuthRequest(BaseModel):
    token: Optional[str] = None


class AuthResponse(BaseModel):
    token: str
    user: UserView


class VerifyResponse(BaseModel):
    user: UserView


class SaveFamilyTreeRequest(CamelModel):
    family_tree: Optional[FamilyTreeData] = None


class SaveFamilyTreeResponse(CamelModel):
    success: bool = True
    family_tree_id: int


class FamilyTreeListResponse(CamelModel):
    family_trees: List[FamilyTreeSummary]


ChartType = Literal['ancestry', 'descendants', 'full']


class ChartResponse(BaseModel):
    chart: str
