"""Data models for the ICUNI draft project store."""

from .schedule import Phase, ScheduleItem, default_schedule, total_duration_weeks, end_date
from .talent import TalentRef
from .draft import DraftProject, Currency, Visibility, budget_tier
from .state import PersistedState

__all__ = [
    "Phase",
    "ScheduleItem",
    "default_schedule",
    "total_duration_weeks",
    "end_date",
    "TalentRef",
    "DraftProject",
    "Currency",
    "Visibility",
    "budget_tier",
    "PersistedState",
]
