"""
Hosted auth provider client (GoTrue REST API, as served by Supabase).

Only the calls the auth modal needs: password sign-in, sign-up, magic link
and sign-out. Token management beyond holding the returned session is out of
scope.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import httpx

from virtuohub.shared.domain.auth import AuthSession, User

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Auth provider rejected the request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GoTrueClient:
    """Async client for the ``/auth/v1`` endpoints."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=f"{self.url}/auth/v1",
            headers={"apikey": anon_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, path: str, body: Optional[Dict[str, Any]] = None,
                       params: Optional[Dict[str, str]] = None,
                       headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            response = await self.client.post(path, json=body or {}, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise AuthError(f"Auth service unreachable: {e}")

        data: Dict[str, Any] = {}
        if response.content:
            try:
                data = response.json()
            except ValueError:
                data = {}

        if not isinstance(data, dict):
            data = {}

        if response.status_code >= 400:
            message = (
                data.get("error_description")
                or data.get("msg")
                or data.get("message")
                or data.get("error")
                or response.reason_phrase
            )
            raise AuthError(str(message), response.status_code)
        return data

    @staticmethod
    def _parse_session(data: Dict[str, Any]) -> AuthSession:
        expires_at: Optional[datetime] = None
        try:
            if data.get("expires_at"):
                expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=timezone.utc)
            elif data.get("expires_in"):
                expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))
            return AuthSession(
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token"),
                token_type=data.get("token_type", "bearer"),
                expires_at=expires_at,
                user=User(**_user_fields(data["user"])),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Malformed session from auth service: {e}")

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._request("/token", {"email": email, "password": password},
                                   params={"grant_type": "password"})
        logger.info("Password sign-in succeeded")
        return self._parse_session(data)

    async def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        """Create an account.

        Returns a session when the project auto-confirms e-mail, otherwise
        None (the user must follow the confirmation link).
        """
        data = await self._request("/signup", {"email": email, "password": password})
        if "access_token" in data:
            return self._parse_session(data)
        return None

    async def sign_in_with_otp(self, email: str, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request("/otp", {"email": email, "create_user": True}, params=params)

    async def sign_out(self, access_token: str) -> None:
        await self._request("/logout", headers={"Authorization": f"Bearer {access_token}"})

    async def aclose(self) -> None:
        await self.client.aclose()


def _user_fields(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": raw["id"],
        "email": raw.get("email"),
        "user_metadata": raw.get("user_metadata") or {},
    }
