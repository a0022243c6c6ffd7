"""
Resolution of the report author's identity.

The identity is used to attribute commits to the configured account. A
failed lookup is never fatal: the returned :class:`AuthorIdentity` then
has no email or name and carries the reason in ``degraded_reason``, and
commit attribution falls back to matching the configured username.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from vc_daily_report.vcs.gitlab_client import GitLabClient, GitLabError


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class AuthorIdentity:
    """Matching key for commit attribution.

    Attributes
    ----------
    email : Optional[str]
        Lowercased account email, or ``None`` when unknown.
    name : Optional[str]
        Lowercased display name, or ``None`` when unknown.
    configured_username : str
        Username from the configuration; always present.
    degraded_reason : Optional[str]
        Why the lookup failed, ``None`` when it succeeded.
    """

    email: Optional[str]
    name: Optional[str]
    configured_username: str
    degraded_reason: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.degraded_reason is None

    def matches(self, author_email: Optional[str], author_name: Optional[str]) -> bool:
        """Return True if a commit author belongs to this identity."""
        commit_email = (author_email or "").lower()
        commit_name = (author_name or "").lower()
        if self.email and commit_email == self.email:
            return True
        if self.name and commit_name == self.name:
            return True
        return self.configured_username.lower() in commit_name


def _lowered(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip().lower()
    return None


def resolve_identity(client: GitLabClient, username: str) -> AuthorIdentity:
    """Look up the token owner's email and name.

    Never raises; on failure an identity without email/name is returned.
    """
    try:
        user = client.get_current_user()
    except GitLabError as exc:
        logger.warning("Could not fetch user info, falling back to username matching: %s", exc)
        return AuthorIdentity(None, None, username, degraded_reason=str(exc))

    email = _lowered(user.get("email"))
    name = _lowered(user.get("name"))
    if email is None and name is None:
        logger.warning("User info has neither email nor name, falling back to username matching")
        return AuthorIdentity(None, None, username, degraded_reason="user info has no email or name")

    logger.info("Resolved user: %s (%s)", name, email)
    return AuthorIdentity(email, name, username)
