"""
Report publishing entry points used by the CLI.

:func:`publish_report` posts the report to DingTalk;
:func:`render_dry_run` produces everything dry-run mode shows or copies
without touching the network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from vc_daily_report.config.loader import DingTalkSettings, ReportSettings
from vc_daily_report.publish.dingtalk_client import DeliveryResult, DingTalkClient
from vc_daily_report.publish.plain_text import markdown_to_plain_text
from vc_daily_report.publish.report import (
    REPORT_TITLE,
    build_report_markdown,
    format_report_date,
    render_console_report,
)


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class DryRunOutput:
    markdown: str
    console_text: str
    plain_text: str


def publish_report(
    content: str,
    dingtalk: DingTalkSettings,
    report: ReportSettings,
    day: Optional[date] = None,
) -> DeliveryResult:
    """Post the report as a markdown message to the configured webhook.

    Raises
    ------
    ConfigError
        If no webhook is configured.
    DeliveryError
        If the webhook cannot be reached.
    """
    webhook = dingtalk.require_webhook()
    markdown = build_report_markdown(content, report.author, report.team, format_report_date(day))
    client = DingTalkClient(webhook, dingtalk.secret)
    logger.info("Sending report to DingTalk%s", " (signed)" if dingtalk.secret else "")
    return client.send_markdown(REPORT_TITLE, markdown)


def render_dry_run(content: str, report: ReportSettings, day: Optional[date] = None) -> DryRunOutput:
    date_str = format_report_date(day)
    return DryRunOutput(
        markdown=build_report_markdown(content, report.author, report.team, date_str),
        console_text=render_console_report(content, report.author, report.team, date_str),
        plain_text=markdown_to_plain_text(content),
    )
