import pytest

from family_tree import userstore
from family_tree.domain import VerifiedIdentity
from family_tree.exceptions import ValidationError
from family_tree.tables import User, utcnow


def test_userstore(database, identity):
    with database.session() as db:
        assert userstore.getuser(db, "no-such-id") is None
        assert userstore.getuser_by_email(db, "nobody@example.com") is None

        user = userstore.upsert_user(db, identity)
        assert user.id
        assert userstore.getuser(db, user.id).email == identity.email
        assert userstore.getuser_by_email(db, identity.email).id == user.id

        view = userstore.to_view(user)
        assert view.model_dump(by_alias=True) == {
            "id": user.id,
            "name": "Alice Liddell",
            "email": "alice@example.com",
            "profileImage": "https://example.com/alice.png",
        }


def test_default_name():
    assert userstore.default_name("joe.bloggs@example.com") == "joe.bloggs"


def test_provider_id_linked_to_other_user(database, identity):
    with database.session() as db:
        userstore.upsert_user(db, identity)
        other = VerifiedIdentity(email="mallory@example.com",
                                 provider_subject_id=identity.provider_subject_id)
        with pytest.raises(ValidationError):
            userstore.upsert_user(db, other)
        assert userstore.getuser_by_email(db, "mallory@example.com") is None


def test_first_login_created_concurrently(database, identity, mocker):
    with database.session() as db:
        db.add(User(id="created-first", email=identity.email, name="alice",
                    created_at=utcnow()))
        db.commit()

    lookup = userstore.getuser_by_email
    calls = []

    def missed_first_time(db, email):
        calls.append(email)
        return None if len(calls) == 1 else lookup(db, email)

    mocker.patch("family_tree.userstore.getuser_by_email", side_effect=missed_first_time)
    with database.session() as db:
        user = userstore.upsert_user(db, identity)
        assert user.id == "created-first"
        assert user.google_id == "google-sub-alice"
        assert user.name == "Alice Liddell"
        assert db.query(User).count() == 1
