# src/vitatasks/api/client.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.session import SessionStore
from ..tasks.task_models import Task, TaskDecodeError, decode_task_list
from .errors import (
    ApiDecodeError,
    ApiStatusError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    TransportError,
    UsernameTakenError,
)

logger = logging.getLogger(__name__)

_BODY_PREVIEW = 200


@dataclass(slots=True, frozen=True)
class AuthResult:
    access_token: str
    username: str


def _error_field(response: httpx.Response) -> str | None:
    """Extract {"error": "..."} / {"message": "..."} from an error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        for key in ("error", "message"):
            val = data.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    return None


class VitaApiClient:
    """
    Thin synchronous client for the task/auth backend.

    - one pooled httpx.Client per process,
    - Bearer token taken from the injected SessionStore on every request,
    - no automatic retries: failures surface as ApiError subclasses.
    """

    def __init__(
        self,
        settings,
        session: SessionStore,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._session = session
        base_url = str(getattr(settings, "api_base_url", "http://localhost:8080/api"))
        timeout = float(getattr(settings, "http_timeout_seconds", 10.0))

        self._http = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers={"Accept": "application/json"},
            follow_redirects=True,
            transport=transport,
        )
        logger.info("API client ready base_url=%s", base_url)

    def close(self) -> None:
        self._http.close()

    # ---- low-level helpers ----

    def _auth_headers(self) -> dict[str, str]:
        token = self._session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, *, json: Any = None, auth: bool = True) -> httpx.Response:
        headers = self._auth_headers() if auth else {}
        try:
            response = self._http.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", method, path)
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _raise_for_task_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        if response.status_code in (401, 403):
            raise NotAuthenticatedError(f"HTTP {response.status_code}")
        raise ApiStatusError(response.status_code, response.text[:_BODY_PREVIEW])

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ApiDecodeError(f"Expected JSON from {response.request.url}") from e

    def _optional_task(self, response: httpx.Response) -> Task | None:
        if not response.content.strip():
            return None
        try:
            return Task.from_wire(self._json(response))
        except TaskDecodeError as e:
            raise ApiDecodeError(str(e)) from e

    # ---- tasks ----

    def list_tasks(self) -> list[Task]:
        response = self._request("GET", "/tasks")
        self._raise_for_task_status(response)
        try:
            return decode_task_list(self._json(response))
        except TaskDecodeError as e:
            raise ApiDecodeError(str(e)) from e

    def get_task(self, task_id: int) -> Task:
        response = self._request("GET", f"/tasks/{int(task_id)}")
        self._raise_for_task_status(response)
        task = self._optional_task(response)
        if task is None:
            raise ApiDecodeError(f"Empty body for task {task_id}")
        return task

    def create_task(
        self,
        *,
        title: str,
        description: str = "",
        completed: bool = False,
        reminder_time: str | None = None,
    ) -> Task | None:
        payload = {
            "title": title,
            "description": description,
            "completed": completed,
            "reminderTime": reminder_time,
        }
        response = self._request("POST", "/tasks", json=payload)
        self._raise_for_task_status(response)
        return self._optional_task(response)

    def update_task(self, task: Task) -> Task | None:
        response = self._request("PUT", f"/tasks/{task.id}", json=task.to_wire())
        self._raise_for_task_status(response)
        return self._optional_task(response)

    def delete_task(self, task_id: int) -> None:
        response = self._request("DELETE", f"/tasks/{int(task_id)}")
        self._raise_for_task_status(response)

    # ---- auth ----

    def login(self, username: str, password: str) -> AuthResult:
        response = self._request(
            "POST", "/auth/login", json={"username": username, "password": password}, auth=False
        )
        if response.status_code in (400, 401, 403, 404):
            raise InvalidCredentialsError(_error_field(response) or "Invalid username or password")
        if not response.is_success:
            raise ApiStatusError(response.status_code, response.text[:_BODY_PREVIEW])

        data = self._json(response)
        token = data.get("accessToken") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise ApiDecodeError("Login response has no accessToken")

        name = data.get("username")
        return AuthResult(access_token=token, username=name if isinstance(name, str) and name else username)

    def register(self, username: str, password: str) -> str:
        response = self._request(
            "POST", "/auth/register", json={"username": username, "password": password}, auth=False
        )
        if response.status_code in (400, 409):
            raise UsernameTakenError(
                _error_field(response) or "Failed to create account. Username might be taken."
            )
        if not response.is_success:
            raise ApiStatusError(response.status_code, response.text[:_BODY_PREVIEW])
        return response.text.strip() or "Account created."
