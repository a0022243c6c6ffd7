"""
Collection of one author's commits for a single day.

For every configured project the collector fetches the commits created
within the local calendar day, keeps the ones attributed to the
:class:`AuthorIdentity`, drops ``Merge branch 'x' into 'y'`` commits and
tags the survivors with the project id and name. A project that fails to
load is logged and skipped; it never aborts the others.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from vc_daily_report.vcs.gitlab_client import GitLabClient, GitLabError
from vc_daily_report.vcs.identity import AuthorIdentity


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# Matches from the start of the message, so only the first line counts.
MERGE_MESSAGE_PATTERN = re.compile(r"Merge branch '.+' into '.+'")


@dataclass(frozen=True)
class Commit:
    """A single commit attributed to the report author."""

    project_id: str
    project_name: str
    title: str
    message: str
    created_at: datetime
    short_id: str
    url: str


@dataclass(frozen=True)
class ProjectRef:
    """Project id plus display name; ``name_resolved`` is False for the placeholder."""

    project_id: str
    name: str
    name_resolved: bool = True


def is_merge_commit_message(message: Optional[str]) -> bool:
    """Return True if the message starts with an auto-generated merge line."""
    return bool(message) and MERGE_MESSAGE_PATTERN.match(message) is not None


def _to_utc_string(moment: datetime) -> str:
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def day_window(day: Optional[date] = None) -> Tuple[str, str]:
    """Return ``(since, until)`` bounding ``day`` in local time, as UTC ISO strings."""
    if day is None:
        day = date.today()
    elif isinstance(day, datetime):
        day = day.date()
    start = datetime.combine(day, time(0, 0, 0, 0)).astimezone()
    end = datetime.combine(day, time(23, 59, 59, 999000)).astimezone()
    return _to_utc_string(start), _to_utc_string(end)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitLab ISO-8601 timestamp into an aware datetime.

    Raises :class:`ValueError` if ``value`` is not an ISO-8601 string.
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def lookup_project(client: GitLabClient, project_id: str) -> ProjectRef:
    """Resolve a project's display name, falling back to a placeholder."""
    try:
        name = client.get_project(project_id).get("name")
    except GitLabError as exc:
        logger.warning("Could not fetch name of project %s, using default: %s", project_id, exc)
        return ProjectRef(project_id, f"项目 {project_id}", name_resolved=False)
    if not isinstance(name, str) or not name:
        logger.warning("Project %s has no name, using default", project_id)
        return ProjectRef(project_id, f"项目 {project_id}", name_resolved=False)
    return ProjectRef(project_id, name)


def select_author_commits(
    raw_commits: Iterable[Dict[str, Any]], identity: AuthorIdentity
) -> List[Dict[str, Any]]:
    """Keep raw commit records authored by ``identity`` that are not merges.

    Records that are not JSON objects are ignored.
    """
    return [
        raw
        for raw in raw_commits
        if isinstance(raw, dict)
        and identity.matches(raw.get("author_email"), raw.get("author_name"))
        and not is_merge_commit_message(raw.get("message"))
    ]


def _to_commit(project: ProjectRef, raw: Dict[str, Any]) -> Commit:
    return Commit(
        project_id=project.project_id,
        project_name=project.name,
        title=raw.get("title") or "",
        message=raw.get("message") or "",
        created_at=parse_timestamp(raw["created_at"]),
        short_id=raw.get("short_id") or "",
        url=raw.get("web_url") or "",
    )


def collect_project_commits(
    client: GitLabClient,
    project_id: str,
    identity: AuthorIdentity,
    since: str,
    until: str,
) -> List[Commit]:
    """Fetch and filter one project's commits. Raises :class:`GitLabError` on failure."""
    project = lookup_project(client, project_id)
    raw_commits = client.list_commits(project_id, since, until)
    selected = select_author_commits(raw_commits, identity)
    logger.info(
        "%s: %d commits in total, %d after filtering",
        project.name,
        len(raw_commits),
        len(selected),
    )
    commits: List[Commit] = []
    for raw in selected:
        try:
            commits.append(_to_commit(project, raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Skipping malformed commit %s in project %s: %s",
                raw.get("short_id") or raw.get("id"),
                project_id,
                exc,
            )
    return commits


def collect_commits(
    client: GitLabClient,
    project_ids: Iterable[str],
    identity: AuthorIdentity,
    day: Optional[date] = None,
) -> List[Commit]:
    """Collect the author's commits for ``day`` across all projects.

    Parameters
    ----------
    client : GitLabClient
        Client for the GitLab instance.
    project_ids : Iterable[str]
        Projects to scan, in any order.
    identity : AuthorIdentity
        Author to attribute commits to.
    day : date, optional
        Calendar day in local time. Defaults to today.

    Returns
    -------
    List[Commit]
        Flat list of commits from all projects, in no particular order.
    """
    since, until = day_window(day)
    logger.info("Time window: %s ~ %s", since, until)
    logger.info("Filtering by user: %s", identity.configured_username)

    commits: List[Commit] = []
    for project_id in project_ids:
        try:
            commits.extend(collect_project_commits(client, project_id, identity, since, until))
        except (GitLabError, AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.error("Failed to fetch commits of project %s: %s", project_id, exc)
            payload = getattr(exc, "payload", None)
            if payload is not None:
                logger.debug("GitLab error payload: %s", payload)
    return commits
