import logging

import pytest

from vc_daily_report.config.loader import REQUIRED_KEYS


OPTIONAL_KEYS = [
    "GITLAB_PROJECT_IDS",
    "GITLAB_REQUEST_TIMEOUT",
    "AI_MODEL",
    "AI_REQUEST_TIMEOUT",
    "DINGTALK_WEBHOOK",
    "DINGTALK_SECRET",
    "DINGTALK_REPORT_URL",
    "REPORT_AUTHOR",
    "REPORT_TEAM",
    "REPORT_LOCALE",
]


@pytest.fixture(autouse=True)
def isolate_report_environment(monkeypatch, tmp_path):
    """Run every test without the developer's report settings.

    Configuration variables are removed from the environment and the
    working directory is moved to an empty temporary directory so that no
    ``.env`` file is picked up.
    """
    for key in REQUIRED_KEYS + OPTIONAL_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo ``logging.basicConfig(force=True)`` calls made by the CLI."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
