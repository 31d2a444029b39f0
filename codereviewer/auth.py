"""Authentication session context backed by Supabase.

``SessionContext`` is created when the service starts and passed to whatever
needs the current user. It is updated on every auth transition, notifies
subscribers, and is closed when the service shuts down.
"""

import base64
import hashlib
import secrets
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codereviewer.console import log
from codereviewer.exceptions import AuthNotConfiguredError, ProfileUpdateError, SupabaseError
from codereviewer.profile import UserProfile
from codereviewer.supabase_client import SupabaseClient

SUPPORTED_PROVIDERS: Tuple[str, ...] = ("google", "github")

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
INITIAL_SESSION = "INITIAL_SESSION"
USER_UPDATED = "USER_UPDATED"


class AuthUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    app_metadata: Dict[str, Any] = Field(default_factory=dict)


class AuthSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    user: AuthUser


AuthCallback = Callable[[str, Optional[AuthSession]], None]


class Subscription:
    """Handle returned by ``SessionContext.subscribe``."""

    def __init__(self, subscribers: List[AuthCallback], callback: AuthCallback):
        self._subscribers = subscribers
        self._callback = callback
        subscribers.append(callback)

    def unsubscribe(self):
        if self._callback in self._subscribers:
            self._subscribers.remove(self._callback)


def _code_challenge(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_session(data: Any) -> AuthSession:
    try:
        return AuthSession.model_validate(data)
    except ValidationError as e:
        raise SupabaseError(502, "Supabase returned an invalid session") from e


class SessionContext:
    """Current session and profile for the signed-in user."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self.client = client
        self.session: Optional[AuthSession] = None
        self.profile: Optional[UserProfile] = None
        self._subscribers: List[AuthCallback] = []
        self._code_verifier: Optional[str] = None

    @property
    def configured(self) -> bool:
        return self.client is not None

    @property
    def user(self) -> Optional[AuthUser]:
        return self.session.user if self.session else None

    def _require_client(self) -> SupabaseClient:
        if self.client is None:
            raise AuthNotConfiguredError()
        return self.client

    # Subscription

    def subscribe(self, callback: AuthCallback) -> Subscription:
        """Call ``callback(event, session)`` on every auth transition."""
        return Subscription(self._subscribers, callback)

    def _emit(self, event: str):
        for callback in list(self._subscribers):
            callback(event, self.session)

    def get_current_session(self) -> Optional[AuthSession]:
        return self.session

    # Transitions

    def sign_in_with_provider(self, provider: str, redirect_to: str) -> str:
        """Start an OAuth sign-in and return the provider URL to redirect to."""
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")
        client = self._require_client()
        self._code_verifier = secrets.token_urlsafe(48)
        return client.authorize_url(provider, redirect_to, _code_challenge(self._code_verifier))

    async def complete_sign_in(self, auth_code: str) -> AuthSession:
        """Finish an OAuth sign-in with the code from the provider callback."""
        client = self._require_client()
        if not self._code_verifier:
            raise SupabaseError(400, "No sign-in in progress")
        data = await client.exchange_code(auth_code, self._code_verifier)
        self._code_verifier = None
        self.session = _parse_session(data)
        await self.sync_profile()
        self._emit(SIGNED_IN)
        return self.session

    async def restore(self, access_token: str) -> Optional[AuthSession]:
        """Restore a session from an existing access token."""
        client = self._require_client()
        user = await client.get_user(access_token)
        self.session = _parse_session({"access_token": access_token, "user": user})
        await self.sync_profile()
        self._emit(INITIAL_SESSION)
        return self.session

    async def sign_out(self):
        client = self._require_client()
        if self.session is not None:
            await client.sign_out(self.session.access_token)
        self.session = None
        self.profile = None
        self._emit(SIGNED_OUT)

    # Profile

    async def sync_profile(self):
        """Create or refresh the profile row from the identity metadata.

        Failures are logged; the session stays valid without a profile.
        """
        user = self.user
        if user is None or self.client is None:
            return
        token = self.session.access_token
        updates = {
            "email": user.email,
            "full_name": user.user_metadata.get("full_name"),
            "avatar_url": user.user_metadata.get("avatar_url"),
            "provider": user.app_metadata.get("provider"),
            "updated_at": _now(),
        }
        try:
            existing = await self.client.fetch_profile(user.id, token)
            if existing is None:
                updates["created_at"] = _now()
            row = await self.client.upsert_profile(user.id, updates, token)
            self.profile = UserProfile.model_validate(row)
        except (SupabaseError, ValidationError) as e:
            log(f"Error updating user profile: {e}", style="red")

    async def fetch_profile(self) -> Optional[UserProfile]:
        client = self._require_client()
        if self.user is None:
            return None
        row = await client.fetch_profile(self.user.id, self.session.access_token)
        self.profile = UserProfile.model_validate(row) if row else None
        return self.profile

    async def save_profile(self, fields: Dict[str, Any]) -> UserProfile:
        """Store edited profile fields and make them the committed record."""
        client = self._require_client()
        if self.user is None:
            raise ProfileUpdateError("You must be signed in to update your profile.")
        try:
            row = await client.upsert_profile(
                self.user.id, {**fields, "updated_at": _now()}, self.session.access_token
            )
        except SupabaseError as e:
            log(f"Error updating profile: {e}", style="red")
            raise ProfileUpdateError() from e
        self.profile = UserProfile.model_validate(row)
        self._emit(USER_UPDATED)
        return self.profile

    async def close(self):
        """Drop the session and release the HTTP client."""
        self._subscribers.clear()
        self.session = None
        self.profile = None
        if self.client is not None:
            await self.client.close()
