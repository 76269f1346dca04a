"""Contains route information."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .auth import current_user, jwt_secret
from .chart import render_chart
from .db import Database, get_database
from .domain import (AuthResponse, ChartResponse, ChartType, FamilyTreeData,
                     FamilyTreeListResponse, GoogleAuthRequest,
                     SaveFamilyTreeRequest, SaveFamilyTreeResponse, UserView,
                     VerifyResponse)
from .exceptions import ValidationError
from .identity import verify_identity_token
from .sessions import issue_session
from .treestore import get_family_tree, list_family_trees, save_family_tree
from .validation import validate_family_tree

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/auth/google", response_model=AuthResponse)
def google_login(payload: GoogleAuthRequest, request: Request,
                 secret: Optional[str] = Depends(jwt_secret),
                 database: Database = Depends(get_database)):
    """Exchange a Firebase ID token for a session token.

    The user with the token's email is created on first login and refreshed
    on later ones.
    """
    log.info("Received token for verification")
    identity = verify_identity_token(payload.token, request.app.extra.get('FIREBASE_PROJECT_ID'))
    token, user = issue_session(identity, database, secret)
    return AuthResponse(token=token, user=user)


@router.get("/auth/verify", response_model=VerifyResponse)
def verify(user: UserView = Depends(current_user)):
    """The user the bearer token belongs to."""
    return VerifyResponse(user=user)


@router.post("/auth/logout")
def logout():
    """Sessions are stateless, the client discards its token."""
    return {"success": True}


@router.get("/family-trees", response_model=FamilyTreeListResponse)
def family_trees(user: UserView = Depends(current_user),
                 database: Database = Depends(get_database)):
    with database.session() as db:
        return FamilyTreeListResponse(family_trees=list_family_trees(db, user.id))


def parse_tree_id(tree_id: str) -> int:
    try:
        return int(tree_id)
    except ValueError as ex:
        raise ValidationError(f"'{tree_id[:20]}' is not a family tree id",
                              error='Invalid family tree ID') from ex


@router.get("/family-trees/{tree_id}", response_model=FamilyTreeData)
def family_tree(tree_id: str,
                user: UserView = Depends(current_user),
                database: Database = Depends(get_database)):
    """A family tree of the caller with its members."""
    with database.session() as db:
        return get_family_tree(db, parse_tree_id(tree_id), user.id)


@router.get("/family-trees/{tree_id}/chart", response_model=ChartResponse)
def family_tree_chart(tree_id: str,
                      chart_type: ChartType = Query('full', alias='chartType'),
                      user: UserView = Depends(current_user),
                      database: Database = Depends(get_database)):
    """Mermaid flowchart of a family tree of the caller."""
    with database.session() as db:
        tree = get_family_tree(db, parse_tree_id(tree_id), user.id)
    return ChartResponse(chart=render_chart(tree.members, chart_type, tree.root_id))


@router.post("/save-family-tree", response_model=SaveFamilyTreeResponse)
def save(payload: SaveFamilyTreeRequest,
         user: UserView = Depends(current_user),
         database: Database = Depends(get_database)):
    """Save the posted family tree as a new tree of the caller."""
    tree = validate_family_tree(payload.family_tree)
    with database.session() as db:
        tree_id = save_family_tree(db, user.id, tree)
    log.info("Family tree saved successfully, ID: %s", tree_id)
    return SaveFamilyTreeResponse(family_tree_id=tree_id)


@router.get("/db-test")
def db_test(database: Database = Depends(get_database)):
    """Check the database can be queried."""
    database.ping()
    return {"success": True, "message": "Database connection successful"}
