"""ICUNI project API client wrapper."""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from ..config import config
from ..models import DraftProject, TalentRef

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the project API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProjectApiClient:
    """Client wrapper for the ICUNI project API with retry logic.

    Every response uses the envelope ``{"ok": bool, "data": ..., "error": str}``.
    Connection failures and 5xx responses are retried with exponential
    backoff; anything else is returned or raised immediately.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: API root. Defaults to ICUNI_API_BASE_URL env var.
            token: Bearer token. Defaults to ICUNI_API_TOKEN env var.
            timeout: Request timeout in seconds. Defaults to config.api_timeout.
            max_retries: Maximum number of attempts per request.
            retry_delay: Base delay between retries in seconds (exponential backoff).
            session: Preconfigured requests session.
        """
        self._base_url = (base_url or config.api_base_url).rstrip("/")
        if not self._base_url:
            raise ValueError(
                "API base URL not provided. Set ICUNI_API_BASE_URL env var."
            )

        self._token = token if token is not None else config.api_token
        self._timeout = timeout or config.api_timeout
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and unwrap the response envelope.

        Raises:
            ApiError: If the request fails after all retries or the API
                reports an error.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"

        for attempt in range(self._max_retries):
            last_attempt = attempt == self._max_retries - 1
            logger.debug(f"{method} {url} (attempt {attempt + 1}/{self._max_retries})")

            try:
                response = self._session.request(
                    method,
                    url,
                    json=payload,
                    params=params,
                    headers=self._headers(),
                    timeout=self._timeout,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if last_attempt:
                    raise ApiError(f"Connection failed: {e}") from e
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"Connection error: {e}. Retrying in {delay:.1f}s...")
                time.sleep(delay)
                continue

            if response.status_code >= 500 and not last_attempt:
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"Server error {response.status_code}. Retrying in {delay:.1f}s...")
                time.sleep(delay)
                continue

            return self._unwrap(response)

        raise ApiError("Max retries exceeded")

    @staticmethod
    def _unwrap(response: requests.Response) -> Any:
        if not response.ok:
            message = f"API Error: {response.status_code} {response.reason}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("error"):
                    message = f"{body['error']} {body.get('details') or ''}".strip()
            except ValueError:
                pass
            logger.error(message)
            raise ApiError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Invalid JSON in API response", status_code=response.status_code) from e

        if not isinstance(body, dict) or not body.get("ok"):
            error = body.get("error") if isinstance(body, dict) else None
            raise ApiError(error or "Unknown API error", status_code=response.status_code)

        return body.get("data")

    # -- projects ----------------------------------------------------------

    def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a project. Returns the API data, including ``project_id``."""
        return self._request("POST", "/projects", payload=payload) or {}

    def update_project(self, project_id: str, payload: Dict[str, Any]) -> Any:
        return self._request("PATCH", f"/projects/{project_id}", payload=payload)

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/projects/{project_id}") or {}

    def save_draft(self, draft: DraftProject, project_id: Optional[str] = None) -> Optional[str]:
        """Submit a draft, creating a project or updating an existing one.

        Returns:
            The id of the saved project.
        """
        payload = draft.to_project_payload()
        if project_id:
            logger.info(f"Updating project {project_id}")
            self.update_project(project_id, payload)
            return project_id

        logger.info(f"Creating project '{draft.name}'")
        data = self.create_project(payload)
        return data.get("project_id")

    # -- talents -----------------------------------------------------------

    def get_talent(self, talent_id: str) -> TalentRef:
        data = self._request("GET", f"/talents/{talent_id}")
        if not data:
            raise ApiError(f"Talent {talent_id} not found", status_code=404)
        return TalentRef.model_validate(data)

    def search_talents(
        self,
        query: Optional[str] = None,
        city: Optional[str] = None,
        roles: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[TalentRef]:
        """Search the talent roster. Empty filters are not sent."""
        params = {
            "query": query,
            "city": city,
            "roles": roles,
            "limit": limit,
            "offset": offset,
        }
        params = {k: v for k, v in params.items() if v not in (None, "")}
        data = self._request("GET", "/talents", params=params) or {}
        return [TalentRef.model_validate(t) for t in data.get("talents", [])]
