"""Domain models for the Lookbook directory."""

from lookbook.models.entities import (
    EntityMode,
    Experience,
    LayoutMode,
    Page,
    Participant,
    PeopleFacets,
    Profile,
    Project,
    ProjectFacets,
    ProjectSummary,
    initials,
    short_name,
)
from lookbook.models.media import MediaItem, embed_url, normalize_media

__all__ = [
    "EntityMode",
    "Experience",
    "LayoutMode",
    "MediaItem",
    "Page",
    "Participant",
    "PeopleFacets",
    "Profile",
    "Project",
    "ProjectFacets",
    "ProjectSummary",
    "embed_url",
    "initials",
    "normalize_media",
    "short_name",
]
