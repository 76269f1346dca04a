import pytest

from family_tree.domain import FamilyTreeData, MemberData
from family_tree.exceptions import ValidationError
from family_tree.validation import parse_date, validate_family_tree, validate_member


def member(**kwargs):
    data = {"id": "m1", "name": "Ada", "relation": "self"}
    data.update(kwargs)
    return MemberData.model_validate(data)


def test_valid_member():
    assert validate_member(member(birthDate="1815-12-10", deathDate="11/27/1852",
                                  gender="female", description="Mathematician")) == {}


def test_required_fields():
    errors = validate_member(member(name="  ", relation=""))
    assert errors == {"name": "Name is required", "relation": "Relation is required"}


def test_lengths():
    errors = validate_member(member(name="x" * 101, relation="y" * 101,
                                    description="z" * 1001))
    assert set(errors) == {"name", "relation", "description"}
    assert validate_member(member(name="x" * 100, relation="y" * 100,
                                  description="z" * 1000)) == {}


def test_html_rejected():
    errors = validate_member(member(name="<b>Ada</b>", description="<script>x</script>"))
    assert errors["name"] == "Name cannot contain HTML tags"
    assert errors["description"] == "Description cannot contain HTML tags"


@pytest.mark.parametrize("value", ["1815-12-10", "12/10/1815", "1/2/1900"])
def test_parse_date(value):
    assert parse_date(value) is not None


@pytest.mark.parametrize("value", ["1815/12/10", "Dec 10 1815", "1815-13-01",
                                   "02/30/1900", "10-12-1815"])
def test_parse_date_invalid(value):
    assert parse_date(value) is None


def test_dates():
    errors = validate_member(member(birthDate="yesterday"))
    assert "birthDate" in errors
    errors = validate_member(member(birthDate="1900-01-02", deathDate="1900-01-01"))
    assert errors == {"deathDate": "Death date cannot be earlier than birth date"}


def test_validate_family_tree():
    tree = FamilyTreeData.model_validate({
        "name": "Lovelace",
        "members": [
            {"id": "a", "name": "Ada", "relation": "self",
             "relationships": [{"type": "parent", "targetId": "b"}]},
            {"id": "b", "name": "George", "relation": "father",
             "relationships": [{"type": "child", "targetId": "a"}]},
            {"id": "c", "name": "Someone", "relation": "cousin", "parentId": "not-in-tree",
             "relationships": [{"type": "sibling", "targetId": "also-not-in-tree"}]},
        ],
    })
    assert validate_family_tree(tree) is tree


def test_validate_family_tree_missing():
    with pytest.raises(ValidationError):
        validate_family_tree(None)
    with pytest.raises(ValidationError):
        validate_family_tree(FamilyTreeData.model_validate({"name": "No members"}))
    assert validate_family_tree(FamilyTreeData.model_validate({"members": []})).members == []


def test_validate_family_tree_collects_errors():
    tree = FamilyTreeData.model_validate({
        "members": [
            {"id": "a", "name": "", "relation": "self"},
            {"id": "a", "name": "Copy", "relation": "self"},
            {"id": "b", "name": "Bee", "relation": "self",
             "relationships": [{"type": "spouse", "targetId": "b"}]},
        ],
    })
    with pytest.raises(ValidationError) as info:
        validate_family_tree(tree)
    errors = info.value.errors
    assert errors["name.a"] == "Name is required"
    assert errors["id.a"] == "Duplicate member id"
    assert errors["relationships.b"] == "Cannot create a relationship with yourself"
    assert info.value.to_dict()["errors"] == errors
