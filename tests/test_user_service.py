from pymongo.errors import DuplicateKeyError
import pytest

from notepad.repositories import user_repo
from notepad.services import user_service


def test_resolve_twice_returns_same_user(db):
    first = user_service.resolve_or_create("uid-1", "ana@example.com", "Ana")
    second = user_service.resolve_or_create("uid-1", "ana@example.com", "Ana")

    assert first["_id"] == second["_id"]
    assert db["user"].count_documents({}) == 1


def test_uid_match_does_not_overwrite_profile(db):
    user_service.resolve_or_create("uid-1", "ana@example.com", "Ana")
    again = user_service.resolve_or_create("uid-1", "other@example.com", "Someone Else")

    assert again["email"] == "ana@example.com"
    assert again["name"] == "Ana"


def test_attaches_uid_to_existing_email_user(db):
    legacy = user_repo.insert_user(email="ana@example.com", name="ana")

    user = user_service.resolve_or_create("uid-9", "ana@example.com", "Ana Pérez")

    assert user["_id"] == legacy["_id"]
    assert user["firebase_uid"] == "uid-9"
    assert user["name"] == "Ana Pérez"
    assert db["user"].count_documents({}) == 1


def test_attach_keeps_name_when_token_has_none(db):
    user_repo.insert_user(email="ana@example.com", name="Ana")

    user = user_service.resolve_or_create("uid-9", "ana@example.com", "")

    assert user["name"] == "Ana"


def test_new_user_name_falls_back_to_email_local_part(db):
    user = user_service.resolve_or_create("uid-2", "Carlos.R@Example.com", None)

    assert user["name"] == "carlos.r"
    assert user["email"] == "carlos.r@example.com"
    assert user["firebase_uid"] == "uid-2"


def test_concurrent_first_login_returns_existing_row(db, monkeypatch):
    winner = user_service.resolve_or_create("uid-3", "race@example.com", "Race")

    # Simula lecturas obsoletas: el otro request aún no veía la fila
    real_by_uid = user_repo.find_by_firebase_uid
    real_by_email = user_repo.find_by_email
    calls = {"uid": 0, "email": 0}

    def stale_by_uid(uid):
        calls["uid"] += 1
        return None if calls["uid"] == 1 else real_by_uid(uid)

    def stale_by_email(email):
        calls["email"] += 1
        return None if calls["email"] == 1 else real_by_email(email)

    monkeypatch.setattr(user_repo, "find_by_firebase_uid", stale_by_uid)
    monkeypatch.setattr(user_repo, "find_by_email", stale_by_email)

    loser = user_service.resolve_or_create("uid-3", "race@example.com", "Race")

    assert loser["_id"] == winner["_id"]
    assert db["user"].count_documents({}) == 1


def test_duplicate_without_recoverable_row_propagates(db, monkeypatch):
    def boom(**kwargs):
        raise DuplicateKeyError("E11000 duplicate key")

    monkeypatch.setattr(user_repo, "insert_user", boom)

    with pytest.raises(DuplicateKeyError):
        user_service.resolve_or_create("uid-4", "ghost@example.com", "Ghost")


def test_unique_indexes_reject_duplicates(db):
    user_repo.insert_user(email="dup@example.com", name="a", firebase_uid="uid-x")

    with pytest.raises(DuplicateKeyError):
        user_repo.insert_user(email="dup@example.com", name="b")
    with pytest.raises(DuplicateKeyError):
        user_repo.insert_user(email="other@example.com", name="c", firebase_uid="uid-x")

    # Varios usuarios sin uid federado conviven (índice sparse)
    user_repo.insert_user(email="p1@example.com", name="p1")
    user_repo.insert_user(email="p2@example.com", name="p2")


def test_user_repo_exposes_only_directory_lookups():
    # Los usuarios se resuelven por uid o email; no hay lookup por id
    assert not hasattr(user_repo, "get_user_by_id")
