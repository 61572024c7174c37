"""Task Tracker API client.

This module defines a small client wrapper around the Task Tracker REST
API (``/api/v1``).  It uses the ``requests`` library internally and is
meant for scripts, bots and other services that drive the tracker.

Every method returns a tuple ``(data, error)``.  On success ``data``
holds the parsed JSON response and ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for listings) and ``error`` is a
dictionary with keys ``status_code`` and ``message``.

There is no push channel: after a mutation, call the matching getter
again to observe the new state.

Authentication uses a bearer token issued by the identity provider::

    client = TaskTrackerClient(base_url="http://localhost:8000", api_key=token)
    project, error = client.create_project("Alpha")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]
ListResult = Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]


class TaskTrackerClient:
    """Client for interacting with the Task Tracker API."""

    API_PREFIX = "/api/v1"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``https://tracker.example.com``.
            api_key: Bearer token.  If set, an ``Authorization`` header with
                the value ``Bearer <api_key>`` is sent with every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path below ``/api/v1`` (e.g. ``/projects/``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{self.API_PREFIX}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    message = detail if isinstance(detail, str) else str(detail or err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, *, params: Dict[str, Any] | None = None) -> ListResult:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return (data if isinstance(data, list) else []), None

    @staticmethod
    def _body(**fields: Any) -> Dict[str, Any]:
        """Drop ``None`` values so partial updates leave those fields alone."""
        return {key: value for key, value in fields.items() if value is not None}

    # ------------------------------------------------------------------
    # Project operations
    # ------------------------------------------------------------------
    def create_project(
        self, name: str, description: Optional[str] = None, member_ids: Optional[List[int]] = None
    ) -> Result:
        return self._request(
            "POST", "/projects/", json_body=self._body(name=name, description=description, member_ids=member_ids)
        )

    def list_projects(self) -> ListResult:
        return self._list("/projects/")

    def get_project(self, project_id: int) -> Result:
        return self._request("GET", f"/projects/{project_id}")

    def update_project(
        self,
        project_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        member_ids: Optional[List[int]] = None,
    ) -> Result:
        """Update a project.  ``member_ids`` replaces the member set."""
        return self._request(
            "PUT",
            f"/projects/{project_id}",
            json_body=self._body(name=name, description=description, member_ids=member_ids),
        )

    def add_project_member(self, project_id: int, email: str) -> Result:
        return self._request("POST", f"/projects/{project_id}/members", json_body={"email": email})

    def delete_project(self, project_id: int) -> Result:
        return self._request("DELETE", f"/projects/{project_id}")

    def list_project_tasks(self, project_id: int) -> ListResult:
        return self._list(f"/projects/{project_id}/tasks")

    # ------------------------------------------------------------------
    # Task operations
    # ------------------------------------------------------------------
    def create_task(self, title: str, **fields: Any) -> Result:
        """Create a task.

        Optional keyword fields: ``description``, ``priority``, ``status``,
        ``deadline`` (ISO string), ``assigned_to_id``, ``tag_ids`` and
        ``project_id``.
        """
        return self._request("POST", "/tasks/", json_body=self._body(title=title, **fields))

    def list_my_tasks(self) -> ListResult:
        return self._list("/tasks/")

    def get_task(self, task_id: int) -> Result:
        return self._request("GET", f"/tasks/{task_id}")

    def update_task(self, task_id: int, **fields: Any) -> Result:
        """Update a task.  ``tag_ids`` adds tags to the existing ones."""
        return self._request("PUT", f"/tasks/{task_id}", json_body=self._body(**fields))

    def delete_task(self, task_id: int) -> Result:
        return self._request("DELETE", f"/tasks/{task_id}")

    def add_comment(self, task_id: int, text: str) -> Result:
        return self._request("POST", f"/tasks/{task_id}/comments", json_body={"text": text})

    def list_assigned_tasks(self, user_id: int, skip: int = 0, take: int = 10) -> ListResult:
        return self._list(f"/tasks/assigned/{user_id}", params={"skip": skip, "take": take})

    def list_reported_tasks(self, user_id: int, skip: int = 0, take: int = 10) -> ListResult:
        return self._list(f"/tasks/reported/{user_id}", params={"skip": skip, "take": take})

    # ------------------------------------------------------------------
    # Users and tags
    # ------------------------------------------------------------------
    def list_users(self) -> ListResult:
        return self._list("/users/")

    def get_current_user(self) -> Result:
        return self._request("GET", "/users/me")

    def get_user(self, user_id: int) -> Result:
        return self._request("GET", f"/users/{user_id}")

    def search_users(self, query: str) -> ListResult:
        return self._list("/users/search", params={"query": query})

    def list_tags(self) -> ListResult:
        return self._list("/tags/")

    def create_tag(self, name: str) -> Result:
        return self._request("POST", "/tags/", json_body={"name": name})
