import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


class ApiError(Exception):
    """Non-2xx response from the Taskboard API."""

    def __init__(self, status_code: int, message: str, errors: Optional[dict] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        detail = payload.get("detail") or payload.get("message") or response.reason_phrase
        if not isinstance(detail, str):
            detail = str(detail)
        return cls(response.status_code, detail, payload.get("errors"))


class TaskboardClient:
    """Thin wrapper over the REST API that remembers the bearer token.

    Pass `http` to reuse an existing httpx.Client (FastAPI's TestClient works too).
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", http: Optional[httpx.Client] = None,
                 token: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token
        self.user: Optional[dict] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        if response.status_code >= 400:
            error = ApiError.from_response(response)
            logger.debug("%s %s failed: %s", method, path, error)
            raise error
        return response.json()

    def _remember(self, payload: dict) -> dict:
        self.token = payload["token"]
        self.user = payload["user"]
        return payload

    # auth

    def register(self, name: str, email: str, password: str, password_confirmation: Optional[str] = None) -> dict:
        body = {"name": name, "email": email, "password": password}
        if password_confirmation is not None:
            body["password_confirmation"] = password_confirmation
        return self._remember(self._request("POST", "/register", json=body))

    def login(self, email: str, password: str) -> dict:
        return self._remember(self._request("POST", "/login", json={"email": email, "password": password}))

    def logout(self) -> None:
        try:
            self._request("POST", "/logout")
        finally:
            self.token = None
            self.user = None

    def current_user(self) -> dict:
        self.user = self._request("GET", "/user")
        return self.user

    # tasks

    def list_tasks(self, page: int = 1, per_page: Optional[int] = None, status: Optional[str] = None,
                   q: Optional[str] = None) -> dict:
        params = {"page": page}
        if per_page is not None:
            params["per_page"] = per_page
        if status:
            params["status"] = status
        if q:
            params["q"] = q
        return self._request("GET", "/tasks", params=params)

    def get_task(self, task_id: int) -> dict:
        return self._request("GET", f"/tasks/{task_id}")["task"]

    def create_task(self, title: str, description: Optional[str] = None, status: Optional[str] = None) -> dict:
        body = {"title": title}
        if description is not None:
            body["description"] = description
        if status is not None:
            body["status"] = status
        return self._request("POST", "/tasks", json=body)["task"]

    def update_task(self, task_id: int, **changes) -> dict:
        return self._request("PUT", f"/tasks/{task_id}", json=changes)["task"]

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}")
