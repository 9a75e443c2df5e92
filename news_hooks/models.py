from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    feed_url: str


class RawArticle(BaseModel):
    title: str
    url: str
    content_snippet: str = ""
    published_date: Optional[datetime] = None
    domain: str = ""


class ContentType(str, Enum):
    SOCIAL_POST = "social_post"
    PRESS_PITCH = "press_pitch"
    BLOG_POST = "blog_post"
    PRESS_RELEASE = "press_release"
    THREAD = "thread"
    QUOTE = "quote"
    TALKING_POINTS = "talking_points"
    BRIEFING_DOC = "briefing_doc"
    ANNOUNCEMENT = "announcement"
    OPINION_PIECE = "opinion_piece"
    EMAIL_BLAST = "email_blast"
    INVESTOR_NOTE = "investor_note"
    QUICK_REACTION = "quick_reaction"


class Audience(str, Enum):
    BUILDERS = "builders"
    BRANDS = "brands"
    INVESTORS = "investors"
    PRESS = "press"
    INTERNAL = "internal"


def _as_tag(value):
    """'Social Post' / 'social-post' -> 'social_post'. Unknown tags still fail enum validation."""
    if isinstance(value, str):
        return "_".join(value.strip().lower().replace("-", " ").split())
    return value


class ContentPlanItem(BaseModel):
    type: ContentType
    description: str = ""
    priority: int = 1
    audience: Audience

    @field_validator("type", "audience", mode="before")
    @classmethod
    def _normalize_tag(cls, value):
        return _as_tag(value)


class CuratedItem(BaseModel):
    """One news hook as returned by the curator. Wire names are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    headline: str
    outlet: str = ""
    date: str = ""
    url: str = ""
    summary: str = ""
    relevance: str = ""
    angle_title: str = Field("", alias="angleTitle")
    angle_narrative: str = Field("", alias="angleNarrative")
    content_plan: list[ContentPlanItem] = Field(default_factory=list, alias="contentPlan")

    @field_validator("headline")
    @classmethod
    def _headline_required(cls, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise ValueError("headline is empty")
        return value

    @field_validator(
        "outlet", "date", "url", "summary", "relevance", "angle_title", "angle_narrative",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        return str(value).strip()


class CachedNewsHook(CuratedItem):
    id: int
    fetched_at: datetime = Field(alias="fetchedAt")


class CurationResult(BaseModel):
    items: list[CuratedItem] = Field(default_factory=list)
    usable: bool = True
    reason: str = ""               # why the output was unusable, empty when usable
    rejected_tags: list[str] = Field(default_factory=list)


class RefreshResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    items: list[CachedNewsHook] = Field(default_factory=list)
    new_count: int = Field(0, alias="newCount")
    error: Optional[str] = None

    def to_response(self, include_count: bool = True) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        body = {
            "success": True,
            "items": [item.model_dump(by_alias=True, mode="json") for item in self.items],
        }
        if include_count:
            body["newCount"] = self.new_count
        return body
