"""Production schedule data model."""

import logging
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MIN_DURATION_WEEKS = 1
MAX_DURATION_WEEKS = 20


class Phase(str, Enum):
    """Production phases, in schedule order."""
    DEVELOPMENT = "Development"
    PRE_PRODUCTION = "Pre-Production"
    PRODUCTION = "Production"
    POST_PRODUCTION = "Post-Production"


DEFAULT_DURATIONS: Dict[Phase, int] = {
    Phase.DEVELOPMENT: 4,
    Phase.PRE_PRODUCTION: 8,
    Phase.PRODUCTION: 4,
    Phase.POST_PRODUCTION: 12,
}


class ScheduleItem(BaseModel):
    """A single phase of the production schedule."""

    phase: Phase = Field(..., description="Production phase")
    duration_weeks: int = Field(..., alias="durationWeeks", description="Phase length in weeks")
    enabled: bool = Field(default=True, description="Whether the phase counts toward the total")
    start_day: Optional[int] = Field(
        None, alias="startDay", description="Day offset on the timeline, if positioned"
    )

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True


def default_schedule() -> List[ScheduleItem]:
    """Return a fresh copy of the default four-phase schedule."""
    return [
        ScheduleItem(phase=phase, duration_weeks=DEFAULT_DURATIONS[phase])
        for phase in Phase
    ]


def total_duration_weeks(schedule: Sequence[ScheduleItem]) -> int:
    """Sum the durations of the enabled phases."""
    return sum(item.duration_weeks for item in schedule if item.enabled)


def parse_start_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date or datetime string into a date.

    Accepts plain dates ("2026-03-01") as well as the full timestamps a
    browser date picker stores ("2026-03-01T00:00:00.000Z").
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).date()


def end_date(start_date: Optional[str], schedule: Sequence[ScheduleItem]) -> Optional[date]:
    """Return the wrap date: start date plus the total active duration.

    An unparseable start date counts as unset.
    """
    try:
        start = parse_start_date(start_date)
    except (AttributeError, TypeError, ValueError):
        logger.warning(f"Ignoring unparseable start date: {start_date!r}")
        return None
    if start is None:
        return None
    return start + timedelta(weeks=total_duration_weeks(schedule))
