import pytest
from pydantic import ValidationError

from task_tracker_api.app.core.errors import AuthenticationError, NotFoundError
from task_tracker_api.app.schemas.task import TaskCreate
from task_tracker_api.app.services.task_service import TaskService
from task_tracker_api.app.services.user_service import UserService


def test_get_all_orders_by_name(run, identity, alice, bob, make_user):
    make_user("zed@example.com", "zed")
    make_user("anon@example.com")

    users = run(UserService.get_all(identity(bob)))

    assert [u.email for u in users] == [
        "alice@example.com",
        "bob@example.com",
        "zed@example.com",
        "anon@example.com",
    ]


def test_search_is_case_insensitive_on_name_and_email(run, identity, alice, bob, make_user):
    make_user("carol@corp.test", "Carol")

    by_name = run(UserService.search("ALI", identity(bob)))
    by_email = run(UserService.search("Corp.TEST", identity(bob)))

    assert [u.id for u in by_name] == [alice["id"]]
    assert [u.name for u in by_email] == ["Carol"]


def test_search_folds_non_ascii_case(run, identity, alice, make_user):
    make_user("zoe@example.com", "Ölaf Émile")

    assert [u.name for u in run(UserService.search("ölaf", identity(alice)))] == ["Ölaf Émile"]
    assert [u.name for u in run(UserService.search("ÉMILE", identity(alice)))] == ["Ölaf Émile"]


def test_email_lookup_folds_non_ascii_case(make_user):
    from task_tracker_api.app.core.db import transaction
    from task_tracker_api.app.repositories import user_repository

    created = make_user("jörg@example.com", "Jörg")

    with transaction() as conn:
        found = user_repository.find_by_email(conn, "JÖRG@example.com")

    assert found["id"] == created["id"]


def test_search_treats_wildcards_literally(run, identity, alice, make_user):
    make_user("under_score@example.com", "Under")

    assert [u.name for u in run(UserService.search("_", identity(alice)))] == ["Under"]
    assert run(UserService.search("%", identity(alice))) == []


def test_search_rejects_blank_query(run, identity, alice):
    with pytest.raises(ValidationError):
        run(UserService.search("   ", identity(alice)))


def test_get_by_id_attaches_tasks_and_notifications(run, identity, alice, bob):
    created = run(TaskService.create(TaskCreate(title="Ship", assigned_to_id=bob["id"]), identity(alice)))

    bob_detail = run(UserService.get_by_id(bob["id"], identity(alice)))
    alice_detail = run(UserService.get_by_id(alice["id"], identity(bob)))

    assert [t.id for t in bob_detail.assigned_tasks] == [created.id]
    assert bob_detail.created_tasks == []
    assert len(bob_detail.notifications) == 1
    assert [t.id for t in alice_detail.created_tasks] == [created.id]


def test_get_by_id_unknown_user_fails(run, identity, alice):
    with pytest.raises(NotFoundError):
        run(UserService.get_by_id(404, identity(alice)))


def test_get_current_user_returns_own_record(run, identity, alice):
    me = run(UserService.get_current_user(identity(alice)))

    assert me.id == alice["id"]
    assert me.email == "alice@example.com"


def test_directory_requires_identity(run):
    with pytest.raises(AuthenticationError):
        run(UserService.get_all(None))
    with pytest.raises(AuthenticationError):
        run(UserService.get_current_user({}))
