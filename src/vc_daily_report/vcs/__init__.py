"""
Version control hosting integration.

This package contains the GitLab REST client, the resolution of the
report author's identity and the collection of that author's commits
for a given day.
"""

from .gitlab_client import GitLabClient, GitLabError  # noqa: F401
from .identity import AuthorIdentity, resolve_identity  # noqa: F401
from .commit_collector import Commit, collect_commits  # noqa: F401
