"""Quick-view selection pointer."""

import logging
from typing import Optional

from ..models import TalentRef

logger = logging.getLogger(__name__)


class QuickViewCoordinator:
    """Tracks the one talent currently shown in the quick-view overlay.

    Opening always replaces the previous selection; there is no history.
    """

    def __init__(self) -> None:
        self._talent: Optional[TalentRef] = None

    @property
    def current(self) -> Optional[TalentRef]:
        """The talent being previewed, or None when closed."""
        return self._talent

    @property
    def is_open(self) -> bool:
        """Whether a talent is being previewed."""
        return self._talent is not None

    def open(self, talent: TalentRef) -> None:
        """Show a talent, replacing any current selection."""
        logger.debug(f"Quick view: {talent.talent_id}")
        self._talent = talent

    def close(self) -> None:
        """Clear the selection. Closing when already closed is a no-op."""
        self._talent = None
