"""HTTP client for the storefront auth API."""

from __future__ import annotations

from typing import Any

import httpx


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ApiUnreachableError(ApiError):
    """Raised when the API cannot be reached at all."""


def _error_detail(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("detail")
    except Exception:
        return resp.text[:500] if resp.text else "Unknown error"
    if isinstance(detail, str):
        return detail
    return str(detail)[:500] if detail else f"HTTP {resp.status_code}"


class StorefrontClient:
    """
    Thin synchronous wrapper over the API.

    Takes an httpx.Client whose base_url points at the server (a FastAPI
    TestClient works too) and the API prefix the server mounts routes on.
    """

    def __init__(self, http: httpx.Client, api_prefix: str = "/api/v1") -> None:
        self._http = http
        self._prefix = api_prefix.rstrip("/")

    @classmethod
    def from_base_url(cls, base_url: str, timeout: float = 10.0, api_prefix: str = "/api/v1") -> StorefrontClient:
        return cls(httpx.Client(base_url=base_url, timeout=httpx.Timeout(timeout)), api_prefix)

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = self._http.request(method, f"{self._prefix}{path}", json=json, headers=headers)
        except httpx.TransportError as e:
            raise ApiUnreachableError(f"API unreachable: {e}") from e
        if resp.status_code >= 400:
            raise ApiError(_error_detail(resp), resp.status_code)
        return resp

    def login_staff(self, username: str, password: str) -> dict[str, Any]:
        return self._request(
            "POST", "/staff/login", json={"username": username, "password": password}
        ).json()

    def login_admin(self, username: str, password: str) -> dict[str, Any]:
        return self._request(
            "POST", "/admin/login", json={"username": username, "password": password}
        ).json()

    def logout(self, token: str) -> None:
        self._request("POST", "/auth/logout", token=token)

    def me(self, token: str) -> dict[str, Any]:
        return self._request("GET", "/auth/me", token=token).json()

    def create_admin_credentials(
        self, token: str, username: str, password: str, name: str | None = None
    ) -> dict[str, Any]:
        body = {"username": username, "password": password, "name": name}
        return self._request("POST", "/admin/credentials", token=token, json=body).json()

    def create_staff_credentials(
        self,
        token: str,
        username: str,
        password: str,
        staff_id: int | None = None,
        name: str | None = None,
    ) -> dict[str, Any]:
        body = {"username": username, "password": password, "staffId": staff_id, "name": name}
        return self._request("POST", "/staff/credentials", token=token, json=body).json()

    def list_users(self, token: str) -> list[dict[str, Any]]:
        return self._request("GET", "/users", token=token).json()

    def delete_user(self, token: str, user_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"/users/{user_id}", token=token).json()
