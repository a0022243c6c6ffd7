"""
Construction of the daily report prompt.

The prompt is a pure function of the commits it is given: a fixed
preamble, a legend of Conventional Commit prefixes, one numbered section
per project and a fixed block of writing requirements. The report itself
is written in Chinese, so the prompt is too.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Iterable, List

from vc_daily_report.grouping.group_model import ProjectGroup
from vc_daily_report.grouping.project_grouper import group_by_project
from vc_daily_report.vcs.commit_collector import Commit


NO_DATA_PROMPT = '今天没有有效的 GitLab 提交记录。请直接返回"今日工作内容：暂无数据"'

PREAMBLE = "以下是我今天在 GitLab 的提交记录,请帮我生成一份工作日报(中文):"

COMMIT_PREFIXES = [
    ("feat", "新增功能"),
    ("fix", "修复错误"),
    ("style", "代码样式修改,不影响逻辑"),
    ("refactor", "代码重构,优化结构但不改变功能"),
    ("build", "构建系统或依赖项变更"),
    ("revert", "回滚之前的提交"),
    ("perf", "性能优化"),
    ("test", "测试相关"),
    ("docs", "文档更新"),
    ("chore", "构建/工具链相关"),
]

REQUIREMENTS = dedent(
    """
    要求:
    - 使用"工作内容"开头
    - 以项目名称为一级标题
    - 以项目内的提交记录作为标题下面的工作内容列表，也就是二级内容
    - **重要**: 每条提交记录要保留原始内容,只是润色语言表达,不要改写成"合并"、"成功合并"这种通用描述
    - 直接使用提交标题作为工作内容,根据提交前缀说明理解含义,必要时补充说明让语句更通顺
    - 偏技术日报风格
    - 根据提交前缀自动标注: feat→【新增】, fix→【修复】, refactor→【优化】, perf→【优化】, style→【样式】
    - 总字数控制在 300 字以内
    - 总体检查一遍看看有无重复内容或者错误输出，无需输出提交记录总结
    """
).lstrip("\n")


def _render_legend() -> List[str]:
    lines = ["提交前缀说明:"]
    lines.extend(f"- {prefix}: {meaning}" for prefix, meaning in COMMIT_PREFIXES)
    lines.append("")
    return lines


def _render_group(group: ProjectGroup) -> List[str]:
    lines = [f"#### {group.project_name}", ""]
    for index, commit in enumerate(group.commits, start=1):
        lines.append(f"{index}. {commit.title}")
        first_line = commit.message.split("\n", 1)[0].strip() if commit.message else ""
        if first_line and first_line != commit.title.strip():
            lines.append(f"   {first_line}")
    lines.append("")
    return lines


def render_prompt(groups: Iterable[ProjectGroup]) -> str:
    """Render already grouped and ordered commits into the prompt text."""
    lines = [PREAMBLE, ""]
    lines.extend(_render_legend())
    for group in groups:
        lines.extend(_render_group(group))
    return "\n".join(lines) + "\n" + REQUIREMENTS


def build_prompt(commits: Iterable[Commit], locale_name: str = "zh_CN") -> str:
    """Build the report prompt from collected commits.

    Pure merge commits are dropped first; if nothing is left the fixed
    :data:`NO_DATA_PROMPT` is returned.
    """
    groups = group_by_project(commits, locale_name)
    if not groups:
        return NO_DATA_PROMPT
    return render_prompt(groups)
