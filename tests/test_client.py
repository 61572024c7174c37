from unittest.mock import MagicMock

import requests

from task_tracker_client import TaskTrackerClient


def _response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}" if payload is not None else b""
    response.json.return_value = payload
    response.text = text
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


def _client(response):
    session = MagicMock()
    session.request.return_value = response
    return TaskTrackerClient(base_url="http://tracker.test/", api_key="token", session=session), session


def test_create_project_sends_bearer_token_and_body():
    client, session = _client(_response(201, {"id": 1, "name": "Alpha"}))

    data, error = client.create_project("Alpha", member_ids=[2])

    assert error is None
    assert data == {"id": 1, "name": "Alpha"}
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://tracker.test/api/v1/projects/"
    assert kwargs["json"] == {"name": "Alpha", "member_ids": [2]}
    assert kwargs["headers"] == {"Authorization": "Bearer token"}


def test_update_task_omits_unset_fields():
    client, session = _client(_response(200, {"id": 3}))

    client.update_task(3, status="DONE", title=None)

    assert session.request.call_args.kwargs["json"] == {"status": "DONE"}


def test_paginated_listing_passes_window():
    client, session = _client(_response(200, [{"id": 9}]))

    tasks, error = client.list_assigned_tasks(4, skip=10, take=5)

    assert error is None
    assert tasks == [{"id": 9}]
    kwargs = session.request.call_args.kwargs
    assert kwargs["url"] == "http://tracker.test/api/v1/tasks/assigned/4"
    assert kwargs["params"] == {"skip": 10, "take": 5}


def test_http_error_returns_status_and_detail():
    client, _ = _client(_response(404, {"detail": "Project 7 not found"}))

    data, error = client.get_project(7)

    assert data is None
    assert error == {"status_code": 404, "message": "Project 7 not found"}


def test_listing_error_returns_empty_list():
    client, _ = _client(_response(401, {"detail": "Not authenticated"}))

    users, error = client.list_users()

    assert users == []
    assert error["status_code"] == 401


def test_connection_error_is_reported():
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("refused")
    client = TaskTrackerClient(base_url="http://tracker.test", session=session)

    data, error = client.list_tags()

    assert data == []
    assert error == {"status_code": None, "message": "refused"}
    assert "headers" in session.request.call_args.kwargs
    assert session.request.call_args.kwargs["headers"] == {}
