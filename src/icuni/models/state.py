"""Persisted application state model."""

from typing import Any, Mapping

from pydantic import BaseModel, Field

from .draft import DraftProject

STATE_VERSION = 1


class PersistedState(BaseModel):
    """The blob written to durable client storage.

    The quick-view selection is transient and never part of it.
    """

    is_sidebar_collapsed: bool = Field(
        default=False, alias="isSidebarCollapsed", description="Sidebar UI flag"
    )
    draft: DraftProject = Field(default_factory=DraftProject, description="Current draft")
    version: int = Field(default=STATE_VERSION, description="Blob format version")

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    @classmethod
    def salvage(cls, blob: Mapping[str, Any]) -> "PersistedState":
        """Recover what is usable from a blob that failed validation."""
        draft = blob.get("draft")
        collapsed = blob.get("isSidebarCollapsed")
        return cls(
            is_sidebar_collapsed=collapsed if isinstance(collapsed, bool) else False,
            draft=DraftProject.salvage(draft) if isinstance(draft, Mapping) else DraftProject(),
        )
