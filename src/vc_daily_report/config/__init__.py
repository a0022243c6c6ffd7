"""
Configuration loading for vc_daily_report.

Settings are read from the process environment (optionally seeded from a
``.env`` file). See :mod:`vc_daily_report.config.loader` for details.
"""

from .loader import (  # noqa: F401
    AppConfig,
    ConfigError,
    DingTalkSettings,
    GitLabSettings,
    ProviderConfig,
    ReportSettings,
    load_config,
)
