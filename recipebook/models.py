"""
Record models for the recipe book.

This module defines the canonical schemas shared by the feed, the forms and
every backend. All records are pydantic models with snake_case attributes and
camelCase aliases; the camelCase form is what the store sees.

# NOTE: Older records were written with scalar strings for ingredients,
    instructions and tags. Those are still accepted on read and normalized
    into lists, so the list-typed shape below is the only one the rest of
    the code deals with.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PrivacyLevel(str, Enum):
    """Per-recipe visibility setting."""
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class EntityKind(str, Enum):
    """Record collections held by the store."""
    RECIPES = "recipes"
    RATINGS = "ratings"
    COMMENTS = "comments"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (millisecond precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def _split_lines(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return value


def _split_tags(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    tags: List[str] = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class RecordModel(BaseModel):
    """Base for store records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the camelCase dict sent to the store."""
        return self.model_dump(mode="json", by_alias=True)


class UserIdentity(BaseModel):
    """The authenticated user as reported by the session provider."""
    id: str
    email: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        if self.email:
            return self.email.split("@")[0]
        return self.id


class AuthState(BaseModel):
    """Payload delivered to auth-state listeners."""
    user: Optional[UserIdentity] = None
    is_loading: bool = False

    model_config = ConfigDict(frozen=True)


class Recipe(RecordModel):
    """A shared recipe. `user_id` is fixed at creation and `privacy_level` must be stored."""
    id: str
    title: str
    description: Optional[str] = None
    instructions: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)
    servings: Optional[int] = Field(None, ge=0)
    cuisine_type: Optional[str] = None
    meal_type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None
    source_url: Optional[str] = None
    privacy_level: PrivacyLevel = Field(
        ...,
        validation_alias=AliasChoices("privacyLevel", "privacy_level", "privacy"),
        serialization_alias="privacyLevel",
    )
    user_id: str
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("title must not be empty")
        return value

    @field_validator("instructions", "ingredients", mode="before")
    @classmethod
    def _coerce_lines(cls, value: Any) -> Any:
        return _split_lines(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        return _split_tags(value)


class RecipeRating(RecordModel):
    """One user's star rating for a recipe; at most one per (recipe, user)."""
    id: str
    recipe_id: str
    user_id: str
    rating: int = Field(..., ge=1, le=5)
    created_at: str = Field(default_factory=utc_now_iso)


class RecipeComment(RecordModel):
    """A comment on a recipe. `parent_id` is carried but not used for threading yet."""
    id: str
    recipe_id: str
    user_id: str
    user_email: Optional[str] = None
    content: str = Field(..., min_length=1, validation_alias=AliasChoices("content", "comment"))
    parent_id: Optional[str] = None
    created_at: str = Field(default_factory=utc_now_iso)

    @property
    def author_name(self) -> str:
        if self.user_email:
            return self.user_email.split("@")[0]
        return "Anonymous"


class RecipeAccess(RecordModel):
    """Access grant for a protected recipe. Stored, but not consulted by visibility."""
    id: str
    recipe_id: str
    user_id: str
    granted_by: str
    created_at: str = Field(default_factory=utc_now_iso)
