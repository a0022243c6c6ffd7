"""
Configuration loader for vc_daily_report.

All settings come from environment variables. When no explicit mapping is
passed, a ``.env`` file is loaded first with :mod:`dotenv` (existing
environment variables win). The loader validates the values and returns
an immutable :class:`AppConfig` which is then handed to every component
explicitly; nothing else in the package reads the environment.

If a required key is missing or a numeric key cannot be parsed, a
:class:`ConfigError` is raised.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_AI_TIMEOUT = 60.0
DEFAULT_GITLAB_TIMEOUT = 30.0
DEFAULT_LOCALE = "zh_CN"

REQUIRED_KEYS = [
    "GITLAB_URL",
    "GITLAB_TOKEN",
    "GITLAB_AUTHOR_USERNAME",
    "AI_PROVIDER",
    "AI_API_KEY",
    "AI_API_URL",
]


class ConfigError(Exception):
    """Raised when the environment configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class GitLabSettings:
    """Connection and filter settings for the GitLab API."""

    url: str
    token: str
    project_ids: List[str]
    author_username: str
    request_timeout: float = DEFAULT_GITLAB_TIMEOUT


@dataclass(frozen=True)
class ProviderConfig:
    """Settings selecting and authenticating a text-generation provider.

    ``model`` is optional; when it is ``None`` the provider's default
    model is used.
    """

    provider: str
    api_key: str
    api_url: str
    model: Optional[str] = None
    request_timeout: float = DEFAULT_AI_TIMEOUT


@dataclass(frozen=True)
class DingTalkSettings:
    webhook: Optional[str] = None
    secret: Optional[str] = None
    report_url: Optional[str] = None

    def require_webhook(self) -> str:
        """Return the webhook URL or raise :class:`ConfigError` if unset."""
        if not self.webhook:
            raise ConfigError(
                "Missing required configuration keys: DINGTALK_WEBHOOK "
                "(use --dry-run to render the report locally instead)"
            )
        return self.webhook


@dataclass(frozen=True)
class ReportSettings:
    author: str = ""
    team: str = ""
    locale: str = DEFAULT_LOCALE


@dataclass(frozen=True)
class AppConfig:
    gitlab: GitLabSettings
    provider: ProviderConfig
    dingtalk: DingTalkSettings
    report: ReportSettings


def parse_project_ids(raw: Optional[str]) -> List[str]:
    """Split a comma-separated project id list, dropping blank entries."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _timeout(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _optional(env, key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"'{key}' must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"'{key}' must be positive, got {raw!r}")
    return value


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Build the application configuration from environment variables.

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Mapping to read settings from. Defaults to ``os.environ`` after
        loading ``env_file`` (or a ``.env`` found from the working
        directory) with python-dotenv.
    env_file : Path, optional
        Explicit ``.env`` file to load. Ignored when ``environ`` is given.

    Returns
    -------
    AppConfig
        The validated, immutable configuration.

    Raises
    ------
    ConfigError
        If required keys are missing or a value is malformed.
    """
    if environ is None:
        if env_file is not None and not Path(env_file).exists():
            raise ConfigError(f"Environment file not found: {env_file}")
        dotenv_path = env_file if env_file is not None else find_dotenv(usecwd=True)
        loaded = load_dotenv(dotenv_path, override=False)
        logger.debug("Loaded .env file: %s", loaded)
        environ = os.environ

    missing = [key for key in REQUIRED_KEYS if not _optional(environ, key)]
    if missing:
        logger.error("Environment is missing required keys: %s", missing)
        raise ConfigError(
            f"Missing required configuration keys: {', '.join(missing)}"
        )

    gitlab = GitLabSettings(
        url=environ["GITLAB_URL"].strip().rstrip("/"),
        token=environ["GITLAB_TOKEN"].strip(),
        project_ids=parse_project_ids(environ.get("GITLAB_PROJECT_IDS")),
        author_username=environ["GITLAB_AUTHOR_USERNAME"].strip(),
        request_timeout=_timeout(environ, "GITLAB_REQUEST_TIMEOUT", DEFAULT_GITLAB_TIMEOUT),
    )
    provider = ProviderConfig(
        provider=environ["AI_PROVIDER"].strip().lower(),
        api_key=environ["AI_API_KEY"].strip(),
        api_url=environ["AI_API_URL"].strip(),
        model=_optional(environ, "AI_MODEL"),
        request_timeout=_timeout(environ, "AI_REQUEST_TIMEOUT", DEFAULT_AI_TIMEOUT),
    )
    dingtalk = DingTalkSettings(
        webhook=_optional(environ, "DINGTALK_WEBHOOK"),
        secret=_optional(environ, "DINGTALK_SECRET"),
        report_url=_optional(environ, "DINGTALK_REPORT_URL"),
    )
    report = ReportSettings(
        author=_optional(environ, "REPORT_AUTHOR") or "",
        team=_optional(environ, "REPORT_TEAM") or "",
        locale=_optional(environ, "REPORT_LOCALE") or DEFAULT_LOCALE,
    )

    if not gitlab.project_ids:
        logger.warning("GITLAB_PROJECT_IDS is empty; no commits will be collected")
    logger.debug(
        "Loaded configuration: gitlab=%s projects=%s provider=%s model=%s",
        gitlab.url,
        gitlab.project_ids,
        provider.provider,
        provider.model,
    )
    return AppConfig(gitlab=gitlab, provider=provider, dingtalk=dingtalk, report=report)
