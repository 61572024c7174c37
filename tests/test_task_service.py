import pytest
from pydantic import ValidationError

from task_tracker_api.app.core.db import transaction
from task_tracker_api.app.core.errors import AuthenticationError, NotFoundError
from task_tracker_api.app.schemas.project import ProjectCreate
from task_tracker_api.app.schemas.task import (
    CommentCreate,
    TagCreate,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from task_tracker_api.app.services.project_service import ProjectService
from task_tracker_api.app.services.tag_service import TagService
from task_tracker_api.app.services.task_service import TaskService


def _task_count():
    with transaction() as conn:
        return conn.execute("SELECT COUNT(*) AS n FROM tasks").fetchone()["n"]


def test_create_defaults(run, identity, alice):
    task = run(TaskService.create(TaskCreate(title="Write spec"), identity(alice)))

    assert task.status == TaskStatus.TODO
    assert task.priority == TaskPriority.MEDIUM
    assert task.created_by_id == alice["id"]
    assert task.created_by.email == alice["email"]
    assert task.assigned_to is None
    assert task.deadline is None
    assert task.tags == []
    assert task.comments == []


@pytest.mark.parametrize("title", ["", "  "])
def test_empty_title_is_rejected_by_schema(title):
    with pytest.raises(ValidationError):
        TaskCreate(title=title)


def test_unknown_enum_values_are_rejected():
    with pytest.raises(ValidationError):
        TaskCreate(title="x", status="BLOCKED")
    with pytest.raises(ValidationError):
        TaskUpdate(priority="URGENT")


def test_create_requires_identity(run):
    with pytest.raises(AuthenticationError):
        run(TaskService.create(TaskCreate(title="x"), None))


def test_task_without_project_never_appears_in_project_listing(run, identity, alice):
    project = run(ProjectService.create(ProjectCreate(name="Alpha"), identity(alice)))
    loose = run(TaskService.create(TaskCreate(title="Loose"), identity(alice)))
    filed = run(TaskService.create(TaskCreate(title="Filed", project_id=project.id), identity(alice)))

    assert loose.project is None
    assert loose.project_id is None
    listed = run(TaskService.get_by_project_id(project.id, identity(alice)))
    assert [t.id for t in listed] == [filed.id]


def test_create_with_unknown_references_writes_nothing(run, identity, alice):
    for data in (
        TaskCreate(title="x", project_id=404),
        TaskCreate(title="x", assigned_to_id=404),
        TaskCreate(title="x", tag_ids=[404]),
    ):
        with pytest.raises(NotFoundError):
            run(TaskService.create(data, identity(alice)))

    assert _task_count() == 0


def test_create_links_assignee_project_and_tags(run, identity, alice, bob):
    project = run(ProjectService.create(ProjectCreate(name="Alpha"), identity(alice)))
    tag = run(TagService.create(TagCreate(name="backend"), identity(alice)))

    task = run(TaskService.create(
        TaskCreate(
            title="Wire it up",
            priority="HIGH",
            deadline="2026-11-01T17:00:00Z",
            assigned_to_id=bob["id"],
            tag_ids=[tag.id, tag.id],
            project_id=project.id,
        ),
        identity(alice),
    ))

    assert task.assigned_to.id == bob["id"]
    assert task.project.name == "Alpha"
    assert [t.name for t in task.tags] == ["backend"]
    assert task.deadline.year == 2026
    assert task.priority == TaskPriority.HIGH


def test_update_with_empty_tag_ids_keeps_existing_tags(run, identity, alice):
    tag = run(TagService.create(TagCreate(name="backend"), identity(alice)))
    task = run(TaskService.create(TaskCreate(title="x", tag_ids=[tag.id]), identity(alice)))

    updated = run(TaskService.update(task.id, TaskUpdate(tag_ids=[]), identity(alice)))

    assert [t.id for t in updated.tags] == [tag.id]


def test_update_tag_ids_adds_without_duplicates(run, identity, alice):
    backend = run(TagService.create(TagCreate(name="backend"), identity(alice)))
    urgent = run(TagService.create(TagCreate(name="urgent"), identity(alice)))
    task = run(TaskService.create(TaskCreate(title="x", tag_ids=[backend.id]), identity(alice)))

    updated = run(TaskService.update(task.id, TaskUpdate(tag_ids=[urgent.id, backend.id]), identity(alice)))

    assert sorted(t.name for t in updated.tags) == ["backend", "urgent"]


def test_status_can_move_freely(run, identity, alice):
    task = run(TaskService.create(TaskCreate(title="Flip", status="TODO"), identity(alice)))

    done = run(TaskService.update(task.id, TaskUpdate(status="DONE"), identity(alice)))
    reopened = run(TaskService.update(task.id, TaskUpdate(status="TODO"), identity(alice)))

    assert done.status == TaskStatus.DONE
    assert reopened.status == TaskStatus.TODO


def test_partial_update_leaves_other_fields(run, identity, alice, bob, make_user):
    carol = make_user("carol@example.com", "Carol")
    project = run(ProjectService.create(ProjectCreate(name="Alpha"), identity(alice)))
    task = run(TaskService.create(
        TaskCreate(title="Keep", description="d", assigned_to_id=bob["id"], project_id=project.id),
        identity(alice),
    ))

    updated = run(TaskService.update(task.id, TaskUpdate(title="Renamed"), identity(alice)))
    assert updated.title == "Renamed"
    assert updated.description == "d"
    assert updated.assigned_to_id == bob["id"]
    assert updated.project_id == project.id

    reassigned = run(TaskService.update(task.id, TaskUpdate(assigned_to_id=carol["id"]), identity(alice)))
    assert reassigned.assigned_to.id == carol["id"]
    assert reassigned.created_by_id == alice["id"]


def test_update_unknown_task_fails(run, identity, alice):
    with pytest.raises(NotFoundError):
        run(TaskService.update(404, TaskUpdate(title="x"), identity(alice)))


def test_delete_unknown_task_leaves_store_unchanged(run, identity, alice):
    run(TaskService.create(TaskCreate(title="Stay"), identity(alice)))

    with pytest.raises(NotFoundError):
        run(TaskService.delete(404, identity(alice)))

    assert _task_count() == 1


def test_delete_removes_task_tags_and_comments(run, identity, alice):
    tag = run(TagService.create(TagCreate(name="backend"), identity(alice)))
    task = run(TaskService.create(TaskCreate(title="Gone", tag_ids=[tag.id]), identity(alice)))
    run(TaskService.add_comment(task.id, CommentCreate(text="bye"), identity(alice)))

    result = run(TaskService.delete(task.id, identity(alice)))

    assert result.success is True
    with transaction() as conn:
        assert conn.execute("SELECT COUNT(*) AS n FROM task_tags").fetchone()["n"] == 0
        assert conn.execute("SELECT COUNT(*) AS n FROM comments").fetchone()["n"] == 0
    # The tag itself is shared and survives
    assert [t.name for t in run(TagService.get_all(identity(alice)))] == ["backend"]


def test_get_all_returns_created_or_assigned_newest_first(run, identity, alice, bob, make_user):
    carol = make_user("carol@example.com", "Carol")
    mine = run(TaskService.create(TaskCreate(title="mine"), identity(alice)))
    for_me = run(TaskService.create(TaskCreate(title="for me", assigned_to_id=alice["id"]), identity(bob)))
    run(TaskService.create(TaskCreate(title="not mine", assigned_to_id=carol["id"]), identity(bob)))

    tasks = run(TaskService.get_all(identity(alice)))

    assert [t.id for t in tasks] == [for_me.id, mine.id]
    assert tasks[0].created_by.id == bob["id"]


def test_assigned_pagination_pages_are_disjoint_and_ordered(run, identity, alice, bob):
    created = [
        run(TaskService.create(TaskCreate(title=f"task {i}", assigned_to_id=bob["id"]), identity(alice)))
        for i in range(13)
    ]
    newest_first = [t.id for t in reversed(created)]

    first = run(TaskService.get_assigned_to_user(bob["id"], identity(alice), skip=0, take=10))
    second = run(TaskService.get_assigned_to_user(bob["id"], identity(alice), skip=10, take=10))

    assert len(first) == 10
    assert len(second) == 3
    assert not {t.id for t in first} & {t.id for t in second}
    assert [t.id for t in first + second] == newest_first


def test_default_page_size_is_ten(run, identity, alice, bob):
    for i in range(12):
        run(TaskService.create(TaskCreate(title=f"task {i}", assigned_to_id=bob["id"]), identity(alice)))

    assert len(run(TaskService.get_assigned_to_user(bob["id"], identity(alice)))) == 10


def test_reported_by_user_filters_on_creator(run, identity, alice, bob):
    by_alice = run(TaskService.create(TaskCreate(title="a"), identity(alice)))
    run(TaskService.create(TaskCreate(title="b", assigned_to_id=alice["id"]), identity(bob)))

    reported = run(TaskService.get_reported_by_user(alice["id"], identity(bob)))

    assert [t.id for t in reported] == [by_alice.id]


def test_invalid_page_window_is_rejected(run, identity, alice):
    with pytest.raises(ValidationError):
        run(TaskService.get_assigned_to_user(alice["id"], identity(alice), skip=-1))
    with pytest.raises(ValidationError):
        run(TaskService.get_reported_by_user(alice["id"], identity(alice), take=0))


def test_get_by_project_id_includes_comment_authors(run, identity, alice, bob):
    project = run(ProjectService.create(ProjectCreate(name="Alpha"), identity(alice)))
    task = run(TaskService.create(TaskCreate(title="Discuss", project_id=project.id), identity(alice)))
    run(TaskService.add_comment(task.id, CommentCreate(text="first"), identity(bob)))

    listed = run(TaskService.get_by_project_id(project.id, identity(alice)))

    assert listed[0].comments[0].text == "first"
    assert listed[0].comments[0].created_by.email == bob["email"]


def test_add_comment_to_unknown_task_fails(run, identity, alice):
    with pytest.raises(NotFoundError):
        run(TaskService.add_comment(404, CommentCreate(text="hello"), identity(alice)))


def test_get_by_id_unknown_task_fails(run, identity, alice):
    with pytest.raises(NotFoundError):
        run(TaskService.get_by_id(404, identity(alice)))


def test_assignment_notifies_assignee_but_not_self(run, identity, alice, bob):
    from task_tracker_api.app.services.user_service import UserService

    run(TaskService.create(TaskCreate(title="Review", assigned_to_id=bob["id"]), identity(alice)))
    run(TaskService.create(TaskCreate(title="Self", assigned_to_id=alice["id"]), identity(alice)))

    bob_detail = run(UserService.get_current_user(identity(bob)))
    alice_detail = run(UserService.get_current_user(identity(alice)))

    assert [n.content for n in bob_detail.notifications] == ["You have been assigned to task 'Review'"]
    assert alice_detail.notifications == []
