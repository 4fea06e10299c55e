"""Thin async wrapper over the Notionary HTTP API.

Every call maps to exactly one request. Non-2xx responses and transport
failures are raised as :mod:`notionary.client.errors` exceptions; callers
decide what a failure means for their state.
"""
from __future__ import annotations

from typing import Any, Optional

import httpx

from notionary.client.errors import ApiError, TransportError, error_for_status


class NotionaryApi:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"{method} {path}: unreadable response body", response.status_code) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = response.text
        detail = payload.get("detail") if isinstance(payload, dict) else payload
        raise error_for_status(response.status_code, detail)

    # auth

    async def register(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/auth/register", json=body)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self._request("POST", "/auth/login", json={"email": email, "password": password})

    async def get_session(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/session")

    # workspaces

    async def list_workspaces(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/workspaces")

    async def create_workspace(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/workspaces", json=body)

    async def update_workspace(self, workspace_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/workspaces/{workspace_id}", json=body)

    async def delete_workspace(self, workspace_id: str) -> None:
        await self._request("DELETE", f"/workspaces/{workspace_id}")

    # groups

    async def list_groups(self, workspace_id: Optional[str] = None) -> list[dict[str, Any]]:
        params = {"workspaceId": workspace_id} if workspace_id else None
        return await self._request("GET", "/groups", params=params)

    async def create_group(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/groups", json=body)

    async def update_group(self, group_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/groups/{group_id}", json=body)

    async def delete_group(self, group_id: str) -> None:
        await self._request("DELETE", f"/groups/{group_id}")

    # notes

    async def list_notes(
        self, workspace_id: Optional[str] = None, group_id: Optional[str] = None
    ) -> list[dict[str, Any]]:
        params = {}
        if workspace_id:
            params["workspaceId"] = workspace_id
        if group_id:
            params["groupId"] = group_id
        return await self._request("GET", "/notes", params=params or None)

    async def create_note(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/notes", json=body)

    async def update_note(self, note_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/notes/{note_id}", json=body)

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")
