"""
Command line interface for the vc_daily_report tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``aidailyreport`` command. It runs the daily
report pipeline strictly in sequence: configuration loading, identity
resolution, commit collection, prompt construction, report generation
and finally publishing to DingTalk (or local rendering with
``--dry-run``). Each fatal failure maps to one of the exit codes below.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from vc_daily_report import __version__
from vc_daily_report.config.loader import ConfigError, load_config
from vc_daily_report.llm.generation_client import GenerationClient
from vc_daily_report.llm.prompt_builder import NO_DATA_PROMPT, build_prompt
from vc_daily_report.llm.providers import LLMError
from vc_daily_report.publish.dingtalk_client import DeliveryError
from vc_daily_report.publish.plain_text import copy_to_clipboard
from vc_daily_report.publish.publisher import publish_report, render_dry_run
from vc_daily_report.vcs.commit_collector import collect_commits
from vc_daily_report.vcs.gitlab_client import GitLabClient
from vc_daily_report.vcs.identity import resolve_identity

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_CONFIG_ERROR = 3
EXIT_LLM_FAILURE = 4
EXIT_DELIVERY_FAILURE = 5

TOTAL_STEPS = 6


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_step(step_num: int, message: str) -> None:
    click.echo(f"\n{'=' * 60}")
    click.echo(f"Step {step_num}/{TOTAL_STEPS}: {message}")
    click.echo(f"{'=' * 60}")


def print_info(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}ℹ {message}")


def print_success(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}✓ {message}")


def print_warning(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}⚠ {message}")


def print_error(message: str, indent: int = 0) -> None:
    click.echo(f"{'  ' * indent}✗ {message}", err=True)


def open_report_page(url: Optional[str]) -> bool:
    """Open the DingTalk report page in the default browser.

    Returns False when no URL is configured or the launch fails.
    """
    if not url:
        return False
    try:
        status = click.launch(url)
    except OSError as exc:
        logger.warning("Failed to open browser: %s", exc)
        return False
    if status != 0:
        logger.warning("Browser launcher exited with status %s", status)
        return False
    print_success("Opened the DingTalk report page")
    return True


@click.command()
@click.option("--dry-run", "dry_run", is_flag=True, help="Print the report locally instead of sending it to DingTalk.")
@click.option(
    "--date",
    "report_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Report on this day (YYYY-MM-DD) instead of today.",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Load settings from this .env file.",
)
@click.option("--no-browser", is_flag=True, help="Do not open the DingTalk report page afterwards.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="aidailyreport")
def main(
    dry_run: bool,
    report_date: Optional[datetime],
    env_file: Optional[Path],
    no_browser: bool,
    verbose: bool,
) -> None:
    """🚀 Turn today's GitLab commits into an AI-written daily report.

    Commits of the configured author are collected from every configured
    project, summarised by the configured AI provider and posted to a
    DingTalk group robot.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    click.echo("\n" + "=" * 60)
    click.echo("🤖 AI Daily Report".center(60))
    click.echo("=" * 60)

    ctx = click.get_current_context(silent=True)
    day: Optional[date] = report_date.date() if report_date else None

    try:
        # Step 1: configuration
        print_step(1, "Loading Configuration")
        try:
            config = load_config(env_file=env_file)
            if not dry_run:
                config.dingtalk.require_webhook()
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        print_success("Configuration loaded successfully")
        print_info(f"GitLab: {config.gitlab.url}", indent=1)
        print_info(f"Projects: {', '.join(config.gitlab.project_ids) or '(none)'}", indent=1)
        print_info(f"AI provider: {config.provider.provider}", indent=1)

        # Step 2: identity
        print_step(2, "Resolving Author Identity")
        gitlab = GitLabClient(
            config.gitlab.url,
            config.gitlab.token,
            request_timeout=config.gitlab.request_timeout,
        )
        identity = resolve_identity(gitlab, config.gitlab.author_username)
        if identity.resolved:
            print_success(f"Author: {identity.name} ({identity.email})")
        else:
            print_warning("Could not fetch user info; matching by username only")

        # Step 3: commits
        print_step(3, "Collecting Commits")
        commits = collect_commits(gitlab, config.gitlab.project_ids, identity, day)
        print_success(f"Collected {len(commits)} commit{'s' if len(commits) != 1 else ''}")

        # Step 4: prompt
        print_step(4, "Building Prompt")
        prompt = build_prompt(commits, config.report.locale)
        if prompt == NO_DATA_PROMPT:
            print_warning("No commits to report; asking for an empty report")
        else:
            print_success("Prompt built")
        logger.debug("Prompt:\n%s", prompt)

        # Step 5: generation
        print_step(5, "Generating Report")
        try:
            content = GenerationClient(config.provider).generate(prompt)
        except LLMError as exc:
            print_error(f"AI error: {exc}")
            payload = getattr(exc, "payload", None)
            if payload is not None:
                print_info(f"Provider response: {payload}", indent=1)
            raise click.exceptions.Exit(EXIT_LLM_FAILURE)
        print_success("Report generated")

        # Step 6: publishing
        if dry_run:
            print_step(6, "Rendering Report (dry run, not sent to DingTalk)")
            output = render_dry_run(content, config.report, day)
            click.echo(output.console_text)
            if copy_to_clipboard(output.plain_text):
                print_success("Plain-text report copied to clipboard")
            else:
                print_warning("Could not copy to clipboard; report is displayed only")
        else:
            print_step(6, "Sending Report to DingTalk")
            try:
                result = publish_report(content, config.dingtalk, config.report, day)
            except DeliveryError as exc:
                print_error(f"Failed to send DingTalk message: {exc}")
                raise click.exceptions.Exit(EXIT_DELIVERY_FAILURE)
            if result.ok:
                print_success("Report sent successfully")
            else:
                print_warning(f"DingTalk returned an error: {result.errcode} {result.errmsg}")

        if not no_browser:
            open_report_page(config.dingtalk.report_url)

        click.echo("\n🎉 Done!\n")
        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        print_info("Please check the configuration and network connection", indent=1)
        ctx.exit(EXIT_GENERIC_ERROR)
