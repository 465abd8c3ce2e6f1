"""
VirtuoHub backend API client
============================

Async client for the action endpoints the replay handlers call:

- GET  /api/posts                     feed (optionally filtered by category)
- POST /api/posts                     create a thread or poll
- POST /api/posts/{postId}/comment    add a comment
- POST /api/posts/{pollId}/vote       cast a poll vote
- POST /api/profile-upsert            create/refresh the profile row after sign-in
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx

from virtuohub.shared.domain.auth import User
from virtuohub.shared.domain.intents import AddCommentPayload, CastVotePayload, CreatePostPayload

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class ApiError(Exception):
    """Non-2xx response or transport failure from the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{status_code}] {message}" if status_code else message)


class VirtuoHubApiClient:
    """Thin async wrapper over the backend action endpoints."""

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Backend root, e.g. ``http://localhost:5000``
            token_provider: Returns the current access token, or None for guests
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _post(self, path: str, body: Dict[str, Any]) -> Any:
        try:
            response = await self.client.post(path, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {path} failed: {e}")
        return self._read(response)

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = await self.client.get(path, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise ApiError(f"Request to {path} failed: {e}")
        return self._read(response)

    @staticmethod
    def _read(response: httpx.Response) -> Any:
        if response.status_code >= 400:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(message or response.text or response.reason_phrase, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def list_posts(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"category": category} if category and category != "All" else None
        return await self._get("/api/posts", params) or []

    async def create_post(self, payload: CreatePostPayload) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "category": payload.category,
            "subtype": payload.subtype,
            "title": payload.title,
            "body": payload.body,
        }
        if payload.subtype == "poll":
            body["subtypeData"] = {"options": list(payload.poll_options)}
        logger.debug(f"Creating {payload.subtype} in '{payload.category}'")
        return await self._post("/api/posts", body)

    async def add_comment(self, payload: AddCommentPayload) -> Dict[str, Any]:
        body = {
            "commentText": payload.comment_text,
            "commentImages": list(payload.comment_images),
        }
        return await self._post(f"/api/posts/{payload.post_id}/comment", body)

    async def cast_vote(self, payload: CastVotePayload) -> Dict[str, Any]:
        return await self._post(f"/api/posts/{payload.poll_id}/vote", {"optionIndex": payload.option_index})

    async def upsert_profile(self, user: User) -> None:
        await self._post("/api/profile-upsert", {"id": user.id, "display_name": user.display_name})

    async def aclose(self) -> None:
        await self.client.aclose()
