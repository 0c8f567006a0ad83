"""Talent reference data model."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class TalentRef(BaseModel):
    """Talent record as held by the draft and the quick view.

    Only ``talent_id`` is required. Search results carry the card fields,
    full profiles carry more; anything beyond the declared fields is kept
    as-is so a profile survives a save/load round trip.
    """

    talent_id: str = Field(..., description="Unique talent identifier")
    display_name: str = Field(default="", description="Name shown on cards")
    public_slug: str = Field(default="", description="Public profile slug")
    headline: Optional[str] = Field(None, description="One-line pitch")
    city: Optional[str] = Field(None, description="Home city")
    profile_photo_url: Optional[str] = Field(None, description="Avatar URL")
    roles: List[Dict[str, Any]] = Field(default_factory=list, description="Role records")

    class Config:
        """Pydantic config."""
        frozen = False
        extra = "allow"

    @property
    def primary_role(self) -> str:
        """Name of the first listed role."""
        for role in self.roles:
            name = role.get("role_name")
            if name:
                return name
        return "Creative"
