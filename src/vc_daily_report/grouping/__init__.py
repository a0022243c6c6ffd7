"""
Grouping of collected commits.

This package removes merge noise from the collected commits, groups them
by project and orders them deterministically. See
:mod:`vc_daily_report.grouping.project_grouper` and
:mod:`vc_daily_report.grouping.group_model` for details.
"""

from .group_model import ProjectGroup  # noqa: F401
from .project_grouper import group_by_project, is_pure_merge_title  # noqa: F401
