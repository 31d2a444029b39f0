"""Async HTTP client for the Supabase auth (GoTrue) and REST (PostgREST) APIs."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlencode

import aiohttp

from codereviewer.exceptions import SupabaseError

PROFILES_TABLE = "user_profiles"


class SupabaseClient:
    """Async HTTP client for the pieces of Supabase the assistant uses.

    The aiohttp session is opened on first use (or on ``__aenter__``) and must
    be released with ``close()``.
    """

    def __init__(self, url: str, anon_key: str):
        self.base_url = url.rstrip("/")
        self.anon_key = anon_key
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
        }

    async def _request(self, method: str, path: str, access_token: Optional[str] = None,
                       headers: Optional[Dict[str, str]] = None, **kwargs) -> Any:
        session = self._ensure_session()
        request_headers = self._headers(access_token)
        if headers:
            request_headers.update(headers)

        try:
            async with session.request(method, f"{self.base_url}{path}", headers=request_headers, **kwargs) as resp:
                if resp.status == 204:
                    return None
                try:
                    payload = await resp.json(content_type=None)
                except ValueError:
                    payload = None
                if resp.status >= 400:
                    raise SupabaseError(resp.status, self._error_message(resp.status, payload))
                return payload
        except aiohttp.ClientError as e:
            raise SupabaseError(0, str(e) or "Could not reach Supabase") from e

    @staticmethod
    def _error_message(status: int, payload: Any) -> str:
        if isinstance(payload, dict):
            for key in ("error_description", "msg", "message", "error"):
                if payload.get(key):
                    return str(payload[key])
        return f"Supabase request failed: {status}"

    # Auth

    def authorize_url(self, provider: str, redirect_to: str, code_challenge: str) -> str:
        """Build the OAuth authorize URL for ``provider`` (PKCE, S256)."""
        query = urlencode({
            "provider": provider,
            "redirect_to": redirect_to,
            "code_challenge": code_challenge,
            "code_challenge_method": "s256",
        })
        return f"{self.base_url}/auth/v1/authorize?{query}"

    async def exchange_code(self, auth_code: str, code_verifier: str) -> Dict[str, Any]:
        """Exchange an OAuth callback code for a session via POST /auth/v1/token."""
        return await self._request(
            "POST",
            "/auth/v1/token?grant_type=pkce",
            json={"auth_code": auth_code, "code_verifier": code_verifier},
        )

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Get the user owning ``access_token`` via GET /auth/v1/user."""
        return await self._request("GET", "/auth/v1/user", access_token=access_token)

    async def sign_out(self, access_token: str):
        """Revoke the session via POST /auth/v1/logout."""
        await self._request("POST", "/auth/v1/logout", access_token=access_token)

    # Profiles

    async def fetch_profile(self, user_id: str, access_token: str) -> Optional[Dict[str, Any]]:
        """Fetch a profile row, or None if the user has none yet."""
        rows: List[Dict[str, Any]] = await self._request(
            "GET",
            f"/rest/v1/{PROFILES_TABLE}?id=eq.{quote(user_id)}&select=*",
            access_token=access_token,
            headers={"Accept": "application/json"},
        ) or []
        return rows[0] if rows else None

    async def upsert_profile(self, user_id: str, fields: Dict[str, Any],
                             access_token: str) -> Dict[str, Any]:
        """Insert or update a profile row and return the stored row."""
        rows = await self._request(
            "POST",
            f"/rest/v1/{PROFILES_TABLE}",
            access_token=access_token,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
            json=[{**fields, "id": user_id}],
        ) or []
        if not rows:
            raise SupabaseError(500, "Profile upsert returned no rows")
        return rows[0]
