"""
Data models for grouping commits by project.

The :class:`ProjectGroup` holds the commits one project contributed to
the report, in the order they are rendered into the prompt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from vc_daily_report.vcs.commit_collector import Commit


@dataclass
class ProjectGroup:
    """Representation of one project's section of the report.

    Attributes
    ----------
    project_id : str
        GitLab project id the commits belong to.
    project_name : str
        Display name used as the section heading.
    commits : List[Commit]
        The project's commits, oldest first.
    """

    project_id: str
    project_name: str
    commits: List[Commit] = field(default_factory=list)
