"""
Filtering, grouping and ordering of commits for the report prompt.

Commits whose title is nothing but an auto-generated merge line are
dropped, the rest are grouped by project id. Inside a group commits are
ordered oldest first; groups are ordered by project name using the
collation rules of the report locale (``zh_CN`` by default, which sorts
Chinese names by pinyin). When that locale is not installed the names
are compared case-insensitively by code point instead.
"""

from __future__ import annotations

import locale
import logging
import re
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List

from vc_daily_report.grouping.group_model import ProjectGroup
from vc_daily_report.vcs.commit_collector import Commit


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


PURE_MERGE_TITLE_PATTERN = re.compile(
    r"(Merge branch|Merge remote-tracking|Merge pull request)\s+\S+\s+into\s+\S+",
    re.IGNORECASE,
)


def is_pure_merge_title(title: str) -> bool:
    """Return True if the whole title is a merge line with no other content."""
    return PURE_MERGE_TITLE_PATTERN.fullmatch(title or "") is not None


@contextmanager
def collation(locale_name: str) -> Iterator[Callable[[str], str]]:
    """Yield a sort-key function for ``locale_name``.

    ``LC_COLLATE`` is switched only for the duration of the block and then
    restored. Falls back to :meth:`str.casefold` if the locale is missing.
    """
    previous = locale.setlocale(locale.LC_COLLATE)
    for candidate in (f"{locale_name}.UTF-8", f"{locale_name}.utf8", locale_name):
        try:
            locale.setlocale(locale.LC_COLLATE, candidate)
        except locale.Error:
            continue
        try:
            yield locale.strxfrm
        finally:
            locale.setlocale(locale.LC_COLLATE, previous)
        return
    logger.warning(
        "Locale %s is not installed; project names are sorted case-insensitively instead",
        locale_name,
    )
    yield str.casefold


def drop_merge_commits(commits: Iterable[Commit]) -> List[Commit]:
    return [commit for commit in commits if not is_pure_merge_title(commit.title)]


def group_by_project(commits: Iterable[Commit], locale_name: str = "zh_CN") -> List[ProjectGroup]:
    """Group commits by project and order groups and commits.

    Parameters
    ----------
    commits : Iterable[Commit]
        Commits in any order. Pure merge commits are removed here.
    locale_name : str
        Locale whose collation orders the project names.

    Returns
    -------
    List[ProjectGroup]
        Non-empty groups, ordered by project name, commits oldest first.
    """
    groups: Dict[str, ProjectGroup] = {}
    for commit in drop_merge_commits(commits):
        group = groups.get(commit.project_id)
        if group is None:
            group = groups[commit.project_id] = ProjectGroup(commit.project_id, commit.project_name)
        group.commits.append(commit)

    for group in groups.values():
        group.commits.sort(key=lambda commit: commit.created_at)

    with collation(locale_name) as sort_key:
        return sorted(
            groups.values(),
            key=lambda group: (sort_key(group.project_name), group.project_name, group.project_id),
        )
