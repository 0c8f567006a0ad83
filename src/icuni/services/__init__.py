"""External service integrations."""

from .api import ApiError, ProjectApiClient

__all__ = [
    "ApiError",
    "ProjectApiClient",
]
