"""Main CLI entry point for renovator."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from renovator.config import Settings, build_settings, load_config_file, resolve_token
from renovator.github.client import GitHubAPIError, GitHubClient
from renovator.triage.driver import run_batch
from renovator.triage.prompt import ConfirmationPrompt
from renovator.triage.search import filter_by_title, search_candidates

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the renovator command."""
    ap = argparse.ArgumentParser(
        prog="renovator",
        description="Approve and merge dependency-update PRs that request your review",
    )
    ap.add_argument("--token", help="GitHub token to use")
    ap.add_argument(
        "--token-variable",
        help="Name of an environment variable to read GitHub token from",
    )
    ap.add_argument("-o", "--org", help="GitHub organization to renovate")
    ap.add_argument("-u", "--user", help="GitHub user who we are renovating for")
    ap.add_argument("-a", "--author", help="The creator of renovate request (default: app/renovate)")
    ap.add_argument("-d", "--dependency", help="The dependency to renovate (exact PR title)")
    ap.add_argument("-m", "--message", help="The default comment for PR approvals (default: LGTM)")
    ap.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Approve all matching eligible PR-s without asking",
    )
    ap.add_argument("--debug", action="store_true", help="Enables additional output")
    ap.add_argument(
        "--retry-until-all-merged",
        action="store_true",
        default=None,
        help="Retry until all PR-s are merged",
    )
    ap.add_argument("--retry-delay", type=float, help="Seconds between retry rounds (default: 5)")
    ap.add_argument(
        "--max-rounds",
        type=int,
        help="Stop retrying after this many rounds (default: no limit)",
    )
    ap.add_argument("--config", type=Path, help="YAML file with default settings")
    ap.add_argument(
        "--api-url",
        help="GitHub REST API base URL (default: $GITHUB_API_URL or https://api.github.com)",
    )
    return ap


def parse_settings(argv: list[str] | None = None) -> Settings:
    """Parse argv (plus --config file and environment) into validated Settings."""
    args = build_parser().parse_args(argv)
    file_values = load_config_file(args.config) if args.config else {}
    cli_values = {k: v for k, v in vars(args).items() if k != "config"}
    if not cli_values.get("api_url") and "api_url" not in file_values:
        cli_values["api_url"] = os.environ.get("GITHUB_API_URL") or None
    settings = build_settings(cli_values, file_values)
    settings.token = resolve_token(settings.token, settings.token_variable)
    return settings


def run(settings: Settings) -> int:
    """Search, filter and process PRs. Returns the process exit code."""
    client = GitHubClient(settings.token, settings.api_url, max_retries=settings.max_retries)
    try:
        candidates = search_candidates(client, settings.org, settings.author, settings.user)
    except GitHubAPIError as e:
        log.error("Error searching PRs: %s", e)
        return 1
    candidates = filter_by_title(candidates, settings.dependency)
    if not settings.dependency:
        print(f"Found {len(candidates)} renovate PRs")

    prompt = ConfirmationPrompt(settings.message, assume_yes=settings.yes)
    result = run_batch(
        candidates,
        client,
        settings.org,
        prompt,
        retry_until_all_merged=settings.retry_until_all_merged,
        retry_delay=settings.retry_delay,
        max_rounds=settings.max_rounds,
    )
    log.debug(
        "Finished after %d round(s), merged %s, converged=%s",
        result.rounds,
        result.merged,
        result.converged,
    )
    return 1 if result.converged is False else 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    settings = parse_settings(argv)
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run(settings))


if __name__ == "__main__":
    main()
