"""Directory records: people profiles, projects and their embedded summaries."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from lookbook.models.media import MediaItem, normalize_media


class EntityMode(StrEnum):
    """Which collection is being browsed. Values double as route prefixes."""

    PEOPLE = "people"
    PROJECTS = "projects"

    @property
    def entity_type(self) -> str:
        return "Profile" if self is EntityMode.PEOPLE else "Project"


class LayoutMode(StrEnum):
    """How the active collection is presented."""

    GRID = "grid"
    LIST = "list"
    DETAIL = "detail"


def _string_list(value: Any) -> list[str]:
    """API tag arrays can be null or carry stray non-strings."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


class Experience(BaseModel):
    """A role held by a person."""

    role: str = Field(default="", validation_alias=AliasChoices("role", "title"))
    organization: str = Field(default="", validation_alias=AliasChoices("organization", "company"))
    start_date: str | None = None
    end_date: str | None = None


class ProjectSummary(BaseModel):
    """Project as embedded in a profile's "select projects" panel."""

    slug: str
    title: str = ""
    summary: str | None = None
    short_description: str | None = None
    skills: list[str] = Field(default_factory=list)
    sectors: list[str] = Field(default_factory=list)
    main_images: list[MediaItem] = Field(
        default_factory=list, validation_alias=AliasChoices("main_images", "main_image_url")
    )

    @field_validator("skills", "sectors", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("main_images", mode="before")
    @classmethod
    def coerce_media(cls, value: Any) -> list[MediaItem]:
        return normalize_media(value)


class Participant(BaseModel):
    """Team member as embedded in a project."""

    name: str = ""
    slug: str | None = None
    photo_url: str | None = Field(
        default=None, validation_alias=AliasChoices("photo_url", "photoUrl")
    )


class Profile(BaseModel):
    """A person in the directory."""

    model_config = ConfigDict(populate_by_name=True)

    slug: str = Field(description="Stable unique identifier used for routing")
    name: str = ""
    title: str | None = None
    bio: str | None = None
    skills: list[str] = Field(default_factory=list)
    industry_expertise: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("industry_expertise", "industries"),
    )
    open_to_work: bool = False
    photo_url: str | None = Field(
        default=None, validation_alias=AliasChoices("photo_url", "photoUrl")
    )
    projects: list[ProjectSummary] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    featured: bool = False

    @field_validator("skills", "industry_expertise", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("projects", "experience", mode="before")
    @classmethod
    def coerce_nested(cls, value: Any) -> list[Any]:
        return list(value) if isinstance(value, (list, tuple)) else []

    @field_validator("open_to_work", "featured", mode="before")
    @classmethod
    def coerce_flag(cls, value: Any) -> bool:
        return bool(value)


class Project(BaseModel):
    """A project in the directory."""

    model_config = ConfigDict(populate_by_name=True)

    slug: str = Field(description="Stable unique identifier used for routing")
    title: str = ""
    summary: str | None = None
    short_description: str | None = None
    description: str | None = None
    skills: list[str] = Field(default_factory=list)
    sectors: list[str] = Field(default_factory=list)
    has_partner: bool = False
    partner_name: str | None = None
    partner_logo_url: str | None = None
    participants: list[Participant] = Field(default_factory=list)
    icon_url: str | None = None
    main_images: list[MediaItem] = Field(
        default_factory=list, validation_alias=AliasChoices("main_images", "main_image_url")
    )
    demo_videos: list[MediaItem] = Field(
        default_factory=list, validation_alias=AliasChoices("demo_videos", "demo_video_url")
    )
    background_color: str | None = None
    featured: bool = False

    @field_validator("skills", "sectors", mode="before")
    @classmethod
    def coerce_tags(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("main_images", "demo_videos", mode="before")
    @classmethod
    def coerce_media(cls, value: Any) -> list[MediaItem]:
        return normalize_media(value)

    @field_validator("participants", mode="before")
    @classmethod
    def coerce_participants(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        # Older records list participants by name only
        return [{"name": item} if isinstance(item, str) else item for item in value]

    @field_validator("has_partner", "featured", mode="before")
    @classmethod
    def coerce_flag(cls, value: Any) -> bool:
        return bool(value)

    @property
    def partner_label(self) -> str | None:
        """Partner name to display, only when the project has a partner."""
        if not self.has_partner:
            return None
        return self.partner_name or ("Partner" if self.partner_logo_url else None)


class PeopleFacets(BaseModel):
    """Filter vocabulary for people, fetched once per session."""

    model_config = ConfigDict(frozen=True)

    skills: tuple[str, ...] = ()
    industries: tuple[str, ...] = ()

    @field_validator("skills", "industries", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> list[str]:
        return _string_list(value)


class ProjectFacets(BaseModel):
    """Filter vocabulary for projects, fetched once per session."""

    model_config = ConfigDict(frozen=True)

    skills: tuple[str, ...] = ()
    sectors: tuple[str, ...] = ()

    @field_validator("skills", "sectors", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> list[str]:
        return _string_list(value)


@dataclass(frozen=True)
class Page[T]:
    """One server page of records plus the server-reported total."""

    items: list[T]
    total: int


def short_name(full_name: str) -> str:
    """Format "Ada King Lovelace" as "Ada L."."""
    parts = full_name.split()
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return f"{parts[0]} {parts[-1][0]}."


def initials(full_name: str, limit: int = 2) -> str:
    return "".join(part[0] for part in full_name.split())[:limit].upper()
