"""
GitLab REST client for vc_daily_report.

This module wraps the three GitLab v4 endpoints the report needs: the
current user, a project's metadata and a project's commit list. Every
request authenticates with the ``PRIVATE-TOKEN`` header. Transport
errors, non-200 responses and unparsable bodies are raised as
:class:`GitLabError` so that callers (and unit tests) only have one
exception type to handle.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# GitLab's maximum page size; only the first page is ever requested.
COMMITS_PER_PAGE = 100


class GitLabError(Exception):
    """Raised when a GitLab API request fails."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


@dataclass
class GitLabClient:
    """Client for the GitLab v4 REST API.

    Parameters
    ----------
    base_url : str
        Base URL of the GitLab instance, e.g. ``"https://gitlab.example.com"``.
    token : str
        Personal access token sent as ``PRIVATE-TOKEN``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 30 seconds.
    """

    base_url: str
    token: str
    request_timeout: float = 30.0

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/api/v4/{path.lstrip('/')}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = self._endpoint(path)
        logger.debug("GET %s params=%s", url, params)
        try:
            response = requests.get(
                url,
                headers={"PRIVATE-TOKEN": self.token},
                params=params,
                timeout=self.request_timeout,
            )
        except requests.RequestException as exc:
            raise GitLabError(f"Request to {url} failed: {exc}") from exc
        if response.status_code != 200:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise GitLabError(
                f"GitLab returned status {response.status_code} for {url}", payload
            )
        try:
            return response.json()
        except (ValueError, json.JSONDecodeError) as exc:
            raise GitLabError(f"Failed to parse GitLab response from {url}") from exc

    @staticmethod
    def _project_path(project_id: str) -> str:
        # Ids may also be "group/project" paths, which must be URL-encoded.
        return f"projects/{quote(str(project_id), safe='')}"

    def get_current_user(self) -> Dict[str, Any]:
        """Return the account that owns the access token (``GET /user``)."""
        data = self._get("user")
        if not isinstance(data, dict):
            raise GitLabError("Unexpected response structure for current user", data)
        return data

    def get_project(self, project_id: str) -> Dict[str, Any]:
        """Return project metadata (``GET /projects/{id}``)."""
        data = self._get(self._project_path(project_id))
        if not isinstance(data, dict):
            raise GitLabError(f"Unexpected response structure for project {project_id}", data)
        return data

    def list_commits(self, project_id: str, since: str, until: str) -> List[Dict[str, Any]]:
        """Return the first page of commits created between ``since`` and ``until``."""
        data = self._get(
            f"{self._project_path(project_id)}/repository/commits",
            params={"since": since, "until": until, "per_page": COMMITS_PER_PAGE},
        )
        if not isinstance(data, list):
            raise GitLabError(f"Unexpected response structure for commits of {project_id}", data)
        return data
