"""
Rendering of the final daily report.

The same content is rendered two ways: as the DingTalk markdown message
that is posted to the group robot, and as a framed plain console block
used in dry-run mode.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union


REPORT_TITLE = "每日工作日报"
FOOTER = "🤖 本日报由 AI 自动生成"
CONSOLE_WIDTH = 60


def format_report_date(day: Optional[Union[date, datetime]] = None) -> str:
    """Format ``day`` as ``YYYY-MM-DD`` (zh-CN numeric date with dashes)."""
    if day is None:
        day = date.today()
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def build_report_markdown(content: str, author: str, team: str, date_str: str) -> str:
    """Build the markdown document posted to DingTalk."""
    return (
        f"### {date_str} 工作日报\n\n"
        f"**姓名:** {author}\n"
        f"**部门:** {team}\n\n"
        f"---\n\n"
        f"{content}\n\n"
        f"---\n\n"
        f"{FOOTER}"
    )


def render_console_report(content: str, author: str, team: str, date_str: str) -> str:
    """Render the report as a framed block for terminal output."""
    heavy = "=" * CONSOLE_WIDTH
    light = "-" * CONSOLE_WIDTH
    return "\n".join(
        [
            "",
            heavy,
            f"{date_str} 工作日报",
            heavy,
            f"姓名: {author}",
            f"部门: {team}",
            light,
            content,
            light,
            heavy,
            "",
        ]
    )
