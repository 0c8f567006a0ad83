"""Application state store for the draft project and quick view."""

import logging
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from ..config import Config, config
from ..models import DraftProject, PersistedState, ScheduleItem, TalentRef
from .quick_view import QuickViewCoordinator
from .repository import DraftRepository, JsonFileRepository, MemoryRepository, StorageError

logger = logging.getLogger(__name__)


def _resolve_fields(model: Type[BaseModel], fields: Dict[str, Any]) -> Dict[str, Any]:
    """Map field names or their camelCase aliases onto model field names.

    Unknown names are dropped so they never end up on the model.
    """
    by_alias = {
        info.alias: name for name, info in model.model_fields.items() if info.alias
    }
    resolved: Dict[str, Any] = {}
    for key, value in fields.items():
        name = key if key in model.model_fields else by_alias.get(key)
        if name is None:
            logger.debug(f"Ignoring unknown {model.__name__} field: {key}")
            continue
        resolved[name] = value
    return resolved


class AppStore:
    """Single source of truth for the in-progress project and UI state.

    Holds the draft project, the quick-view selection and the sidebar flag.
    Draft and sidebar changes are handed to the repository right after they
    are applied; a failed write is logged and the in-memory state stays
    authoritative. The quick-view selection is never persisted.

    Stores are plain objects: build one per test or per process and pass it
    to whatever needs it.
    """

    def __init__(
        self,
        repository: Optional[DraftRepository] = None,
        rehydrate: bool = True,
    ) -> None:
        """Initialize the store.

        Args:
            repository: Persistence backend. Defaults to an in-memory one.
            rehydrate: Load previously saved state from the repository.
        """
        self._repository = repository or MemoryRepository()
        self._quick_view = QuickViewCoordinator()
        self._draft = DraftProject()
        self._sidebar_collapsed = False

        if rehydrate:
            self._rehydrate()

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "AppStore":
        """Build a store backed by the configured storage file."""
        cfg = cfg or config
        return cls(JsonFileRepository(cfg.storage_path, cfg.storage_key))

    @property
    def repository(self) -> DraftRepository:
        return self._repository

    # -- read access -------------------------------------------------------

    @property
    def draft(self) -> DraftProject:
        """The current draft. Treat as read-only; mutate through the store."""
        return self._draft

    @property
    def quick_view(self) -> QuickViewCoordinator:
        return self._quick_view

    @property
    def quick_view_talent(self) -> Optional[TalentRef]:
        return self._quick_view.current

    @property
    def is_sidebar_collapsed(self) -> bool:
        return self._sidebar_collapsed

    @property
    def total_duration_weeks(self) -> int:
        return self._draft.total_duration_weeks

    def snapshot(self) -> PersistedState:
        """Return the persistable part of the state."""
        return PersistedState(
            is_sidebar_collapsed=self._sidebar_collapsed,
            draft=self._draft,
        )

    # -- draft mutations ---------------------------------------------------

    def update_draft(self, **fields: Any) -> None:
        """Shallow-merge the given fields into the draft. No validation."""
        changes = _resolve_fields(DraftProject, fields)
        if not changes:
            return
        self._draft = self._draft.model_copy(update=changes)
        self._persist()

    def update_schedule_item(self, index: int, **fields: Any) -> None:
        """Merge fields into the schedule entry at ``index``.

        An index outside the schedule is a no-op. The phase of an entry is
        fixed and cannot be changed here.
        """
        schedule = list(self._draft.schedule)
        if not 0 <= index < len(schedule):
            logger.warning(f"Ignoring update for schedule index {index} (have {len(schedule)} phases)")
            return

        changes = _resolve_fields(ScheduleItem, fields)
        changes.pop("phase", None)
        schedule[index] = schedule[index].model_copy(update=changes)
        self._draft = self._draft.model_copy(update={"schedule": schedule})
        self._persist()

    def add_to_project(self, talent: TalentRef) -> None:
        """Add a talent unless one with the same id is already selected."""
        if self._draft.has_talent(talent.talent_id):
            return
        selected = [*self._draft.selected_talents, talent]
        self._draft = self._draft.model_copy(update={"selected_talents": selected})
        self._persist()

    def remove_from_project(self, talent_id: str) -> None:
        """Remove every selected talent with the given id."""
        selected = [t for t in self._draft.selected_talents if t.talent_id != talent_id]
        if len(selected) == len(self._draft.selected_talents):
            return
        self._draft = self._draft.model_copy(update={"selected_talents": selected})
        self._persist()

    def set_draft(self, draft: DraftProject) -> None:
        """Replace the whole draft."""
        self._draft = draft
        self._persist()

    def load_project(self, project: Dict[str, Any]) -> None:
        """Start editing an existing project record."""
        self.set_draft(DraftProject.from_project(project))

    def clear_draft(self) -> None:
        """Reset the draft to its defaults. There is no undo."""
        self._draft = DraftProject()
        self._persist()

    # -- quick view --------------------------------------------------------

    def open_quick_view(self, talent: TalentRef) -> None:
        """Preview a talent. The selection is never persisted."""
        self._quick_view.open(talent)

    def close_quick_view(self) -> None:
        """Dismiss the quick view."""
        self._quick_view.close()

    # -- UI flags ----------------------------------------------------------

    def toggle_sidebar(self) -> None:
        """Flip the sidebar flag and persist it."""
        self._sidebar_collapsed = not self._sidebar_collapsed
        self._persist()

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        """Set the sidebar flag and persist it."""
        self._sidebar_collapsed = collapsed
        self._persist()

    # -- persistence -------------------------------------------------------

    def _persist(self) -> None:
        try:
            self._repository.save(self.snapshot())
        except StorageError as e:
            logger.warning(f"Failed to persist app state, keeping it in memory: {e}")

    def _rehydrate(self) -> None:
        try:
            state = self._repository.load()
        except StorageError as e:
            logger.warning(f"Failed to load app state, starting fresh: {e}")
            return

        if state is None:
            return
        self._draft = state.draft
        self._sidebar_collapsed = state.is_sidebar_collapsed
        logger.debug(f"Restored draft '{self._draft.name}' with {len(self._draft.selected_talents)} talent(s)")
