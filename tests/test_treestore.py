import pytest

from family_tree import treestore
from family_tree.domain import FamilyTreeData, Gender, RelationType
from family_tree.exceptions import FamilyTreeNotFound, ValidationError
from family_tree.tables import Member

TREE = {
    "name": "Lovelace",
    "rootId": "george",
    "members": [
        {"id": "george", "name": "George", "relation": "father", "gender": "male"},
        {"id": "ada", "name": "Ada", "relation": "daughter", "gender": "female",
         "parentId": "george", "birthDate": "1815-12-10",
         "relationships": [{"type": "parent", "targetId": "george",
                            "description": "father"}]},
    ],
}


def test_save_and_get(database):
    with database.session() as db:
        tree_id = treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))

    with database.session() as db:
        tree = treestore.get_family_tree(db, tree_id, "u1")
    assert tree.name == "Lovelace"
    assert tree.root_id == "george"
    assert tree.created_at is not None
    by_id = {m.id: m for m in tree.members}
    assert set(by_id) == {"george", "ada"}
    ada = by_id["ada"]
    assert ada.parent_id == "george"
    assert ada.gender == Gender.FEMALE
    assert ada.birth_date == "1815-12-10"
    assert ada.relationships[0].type == RelationType.PARENT
    assert ada.relationships[0].target_id == "george"
    assert ada.relationships[0].description == "father"


def test_stored_relationships_use_camel_case(database):
    with database.session() as db:
        treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))
        ada = db.query(Member).filter(Member.id == "ada").one()
        assert ada.relationships == [
            {"type": "parent", "targetId": "george", "description": "father"}]
        assert ada.family_tree_id.isdigit()


def test_default_name(database):
    with database.session() as db:
        tree_id = treestore.save_family_tree(db, "u1", FamilyTreeData())
        assert treestore.get_family_tree(db, tree_id, "u1").name == "Unnamed Family Tree"


def test_owner_only(database):
    with database.session() as db:
        tree_id = treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))
        with pytest.raises(FamilyTreeNotFound):
            treestore.get_family_tree(db, tree_id, "u2")
        with pytest.raises(FamilyTreeNotFound):
            treestore.get_family_tree(db, tree_id + 100, "u1")


def test_list(database):
    with database.session() as db:
        first = treestore.save_family_tree(db, "u1", FamilyTreeData(name="First"))
        second = treestore.save_family_tree(db, "u1", FamilyTreeData(name="Second"))
        treestore.save_family_tree(db, "u2", FamilyTreeData(name="Not mine"))

        trees = treestore.list_family_trees(db, "u1")
        assert [t.id for t in trees] == [second, first]
        assert treestore.list_family_trees(db, "nobody") == []


def test_member_id_in_use(database):
    with database.session() as db:
        treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))
        with pytest.raises(ValidationError):
            treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))
        assert len(treestore.list_family_trees(db, "u1")) == 1


def test_unknown_stored_gender_reads_as_unset(database):
    with database.session() as db:
        tree_id = treestore.save_family_tree(db, "u1", FamilyTreeData.model_validate(TREE))
        db.query(Member).filter(Member.id == "ada").update({"gender": "unset"})
        db.commit()
        ada = [m for m in treestore.get_family_tree(db, tree_id, "u1").members
               if m.id == "ada"][0]
        assert ada.gender is None
