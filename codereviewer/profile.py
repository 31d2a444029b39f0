"""User profile record and the local editable draft."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from codereviewer.exceptions import AuthNotConfiguredError, ProfileUpdateError, ProfileValidationError

EDITABLE_FIELDS = ("full_name", "bio", "location", "website", "twitter", "github", "linkedin")


class UserProfile(BaseModel):
    """Row of the ``user_profiles`` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    provider: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    twitter: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileDraft(BaseModel):
    """Editable copy of the profile fields a user may change."""

    full_name: str = ""
    bio: str = ""
    location: str = ""
    website: str = ""
    twitter: str = ""
    github: str = ""
    linkedin: str = ""

    @classmethod
    def from_profile(cls, profile: Optional[UserProfile]) -> "ProfileDraft":
        if profile is None:
            return cls()
        return cls(**{name: getattr(profile, name) or "" for name in EDITABLE_FIELDS})

    def cleaned(self) -> Dict[str, str]:
        """Return the trimmed fields, rejecting an empty name."""
        fields = {name: getattr(self, name).strip() for name in EDITABLE_FIELDS}
        if not fields["full_name"]:
            raise ProfileValidationError(
                "Name cannot be empty. Please enter a valid name.", title="Error"
            )
        return fields


class ProfileEditor:
    """Keeps the user's draft apart from the committed profile.

    The draft only replaces the committed record after a successful save and
    survives a failed one.
    """

    def __init__(self):
        self.draft = ProfileDraft()
        self.is_editing = False

    def begin_edit(self, profile: Optional[UserProfile]):
        self.draft = ProfileDraft.from_profile(profile)
        self.is_editing = True

    def update(self, **fields: Any):
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        self.draft = self.draft.model_copy(update={k: v or "" for k, v in fields.items()})

    def cancel(self, profile: Optional[UserProfile]):
        self.draft = ProfileDraft.from_profile(profile)
        self.is_editing = False

    async def save(self, session) -> UserProfile:
        """Validate and store the draft through ``session`` (a SessionContext).

        Raises:
            ProfileValidationError: if the draft is invalid
            ProfileUpdateError: if the store rejects the update
            AuthNotConfiguredError: if there is no store to save to
        """
        fields = self.draft.cleaned()
        try:
            profile = await session.save_profile(fields)
        except (ProfileUpdateError, AuthNotConfiguredError):
            raise
        except Exception as e:
            raise ProfileUpdateError() from e
        self.draft = ProfileDraft.from_profile(profile)
        self.is_editing = False
        return profile
