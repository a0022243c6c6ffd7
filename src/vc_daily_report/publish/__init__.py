"""
Publishing of the generated report.

This package renders the report, posts it to a DingTalk robot webhook
and, in dry-run mode, converts it to plain text for the clipboard.
"""

from .dingtalk_client import DeliveryError, DeliveryResult, DingTalkClient  # noqa: F401
from .plain_text import copy_to_clipboard, markdown_to_plain_text  # noqa: F401
from .report import build_report_markdown, format_report_date, render_console_report  # noqa: F401
from .publisher import DryRunOutput, publish_report, render_dry_run  # noqa: F401
