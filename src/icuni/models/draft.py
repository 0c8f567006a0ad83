"""Draft project data model."""

import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .schedule import (
    Phase,
    ScheduleItem,
    default_schedule,
    end_date,
    parse_start_date,
    total_duration_weeks,
)
from .talent import TalentRef

logger = logging.getLogger(__name__)

DEFAULT_BUDGET = 50000
HIGH_BUDGET_THRESHOLD = 50000
CREW_COST_PER_TALENT = 1500


class Currency(str, Enum):
    """Supported budget currencies."""
    GHS = "GHS"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    NGN = "NGN"


class Visibility(str, Enum):
    """Project listing visibility."""
    PUBLIC = "public"
    PRIVATE = "private"


def budget_tier(budget: float) -> str:
    """Map a budget to the API's budget tier."""
    return "high" if budget > HIGH_BUDGET_THRESHOLD else "mid"


class DraftProject(BaseModel):
    """In-progress project assembled before it is submitted to the API."""

    name: str = Field(default="", description="Project title")
    currency: Currency = Field(default=Currency.USD, description="Budget currency")
    brief: str = Field(default="", description="Creative brief")
    type: str = Field(default="", description="Project type")
    sub_type: str = Field(default="", alias="subType", description="Project subtype")
    genre: str = Field(default="", description="Genre")
    budget: float = Field(default=DEFAULT_BUDGET, ge=0, description="Total budget")
    ambition: int = Field(default=5, ge=0, le=10, description="Ambition score 0-10")
    start_date: Optional[str] = Field(None, alias="startDate", description="ISO start date")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="Listing visibility")
    reveal_team: bool = Field(default=False, alias="revealTeam", description="Show roster publicly")
    schedule: List[ScheduleItem] = Field(default_factory=default_schedule, description="Phases")
    selected_talents: List[TalentRef] = Field(
        default_factory=list, alias="selectedTalents", description="Talent added to the project"
    )

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    @field_validator("schedule")
    @classmethod
    def check_phases(cls, schedule: List[ScheduleItem]) -> List[ScheduleItem]:
        phases = [item.phase for item in schedule]
        if phases != list(Phase):
            raise ValueError(
                f"schedule must list the phases {[p.value for p in Phase]} in order"
            )
        return schedule

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, value: Optional[str]) -> Optional[str]:
        parse_start_date(value)
        return value

    @property
    def total_duration_weeks(self) -> int:
        """Total weeks across enabled phases."""
        return total_duration_weeks(self.schedule)

    @property
    def end_date(self) -> Optional[date]:
        """Projected wrap date, or None without a start date."""
        return end_date(self.start_date, self.schedule)

    @property
    def estimated_crew_cost(self) -> int:
        """Rough crew commitment used on the staffing panel."""
        return len(self.selected_talents) * CREW_COST_PER_TALENT

    def has_talent(self, talent_id: str) -> bool:
        """Check whether a talent is already part of the draft."""
        return any(t.talent_id == talent_id for t in self.selected_talents)

    def to_project_payload(self) -> Dict[str, Any]:
        """Build the request body for creating or updating a project."""
        return {
            "title": self.name,
            "type": self.type or "other",
            "budget_tier": budget_tier(self.budget),
            "start_date": self.start_date or "",
            "visibility": Visibility(self.visibility).value,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_project(cls, project: Mapping[str, Any]) -> "DraftProject":
        """Seed a draft from an existing project record."""
        visibility = project.get("visibility") or project.get("public_private") or "public"
        return cls(
            name=project.get("title", ""),
            type=project.get("type", ""),
            budget=project.get("budget") or DEFAULT_BUDGET,
            visibility=visibility,
        )

    @classmethod
    def salvage(cls, data: Mapping[str, Any]) -> "DraftProject":
        """Build a draft from stored data, keeping every field that validates.

        Fields that fail validation fall back to their defaults. Talent
        entries that fail are dropped from the selection.
        """
        kept: Dict[str, Any] = {}
        dropped: List[str] = []
        for key, value in data.items():
            if key in ("selectedTalents", "selected_talents") and isinstance(value, list):
                talents = [t for t in value if _is_valid_talent(t)]
                if len(talents) != len(value):
                    dropped.append(key)
                value = talents
            try:
                cls.model_validate({key: value})
            except ValidationError:
                dropped.append(key)
                continue
            kept[key] = value
        if dropped:
            logger.warning(f"Reset invalid draft fields to defaults: {', '.join(dropped)}")
        return cls.model_validate(kept)

    @classmethod
    def from_yaml(cls, path: Path) -> "DraftProject":
        """Load a draft from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_yaml(self, path: Path) -> None:
        """Save the draft to a YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def _is_valid_talent(value: Any) -> bool:
    try:
        TalentRef.model_validate(value)
    except ValidationError:
        return False
    return True
