#!/usr/bin/env python3
#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Sync Dependabot alerts into Jira issues.

Input:
- JSON produced by `gh api repos/<owner>/<repo>/dependabot/alerts` (default: alerts.json)
- or, with `--repo`, alerts fetched directly from GitHub (needs GITHUB_TOKEN)

Design intent:
- One Jira issue per Dependabot alert number.
- Match issues by the `Dependabot Alert #<number>` prefix of the summary.
- Open alerts without an issue get one; alerts with an issue get an update comment.
- Open Jira issues whose alert is reported as fixed or dismissed are transitioned to closed;
  alerts missing from the input leave their issue untouched.

Environment variables
---------------------
JIRA_URL, JIRA_USERNAME, JIRA_API_TOKEN   Jira Cloud connection (API token auth).
JIRA_PROJECT_KEY                          Default for --project-key.
GITHUB_TOKEN                              Needed with --repo.
RUNNER_DEBUG                              '1' enables verbose logs.

Draft / debug (no writes):
    `python3 -m jira_workflows.dependabot.sync_alerts --file alerts.json --project-key SEC --dry-run`
"""

from __future__ import annotations

import argparse
import os

from jira_workflows.shared.common import parse_runner_debug, set_verbose_enabled
from jira_workflows.shared.errors import JiraConfigError, JiraSyncError, ValidationError
from jira_workflows.shared.jira_client import create_jira_client

from jira_workflows.dependabot.utils.alert_parser import fetch_alerts_from_github, load_alerts_from_file
from jira_workflows.dependabot.utils.constants import DEFAULT_CLOSE_TRANSITION, DEFAULT_ISSUE_TYPE, LABEL_DEPENDABOT
from jira_workflows.dependabot.utils.issue_sync import sync_alerts
from jira_workflows.dependabot.utils.jql import validate_project_key
from jira_workflows.dependabot.utils.models import SyncConfig
from jira_workflows.dependabot.utils.priority import parse_due_days


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sync Dependabot alerts into Jira issues")
    p.add_argument(
        "--file",
        "-f",
        default="alerts.json",
        help="Dependabot alerts JSON file (default: alerts.json); ignored when --repo is given",
    )
    p.add_argument(
        "--repo",
        default=None,
        help="Fetch alerts from this GitHub repository (owner/repo) instead of --file",
    )
    p.add_argument(
        "--github-token",
        default=os.environ.get("GITHUB_TOKEN"),
        help="GitHub token used with --repo (default: $GITHUB_TOKEN)",
    )
    p.add_argument("--jira-url", default=os.environ.get("JIRA_URL"), help="Jira base URL (default: $JIRA_URL)")
    p.add_argument(
        "--jira-username",
        default=os.environ.get("JIRA_USERNAME"),
        help="Jira user e-mail (default: $JIRA_USERNAME)",
    )
    p.add_argument(
        "--jira-api-token",
        default=os.environ.get("JIRA_API_TOKEN"),
        help="Jira API token (default: $JIRA_API_TOKEN)",
    )
    p.add_argument(
        "--project-key",
        default=os.environ.get("JIRA_PROJECT_KEY"),
        help="Jira project key (default: $JIRA_PROJECT_KEY)",
    )
    p.add_argument(
        "--issue-type",
        default=DEFAULT_ISSUE_TYPE,
        help=f"Issue type for new issues (default: {DEFAULT_ISSUE_TYPE})",
    )
    p.add_argument(
        "--labels",
        default=LABEL_DEPENDABOT,
        help=(
            f"Comma-separated labels for new issues (default: {LABEL_DEPENDABOT}). "
            f"Keep {LABEL_DEPENDABOT!r} in the list, resolved-alert closing searches by it"
        ),
    )
    p.add_argument("--assignee", default=None, help="Assignee for new issues")
    p.add_argument(
        "--due-days",
        default="",
        help="Due-date offsets as severity=days pairs, e.g. 'critical=1,high=7,medium=30,low=90'",
    )
    p.add_argument(
        "--close-transition",
        default=DEFAULT_CLOSE_TRANSITION,
        help=f"Workflow transition used to close issues (default: {DEFAULT_CLOSE_TRANSITION})",
    )
    p.add_argument("--close-comment", default=None, help="Comment added when closing an issue")
    p.add_argument(
        "--no-close-resolved",
        action="store_true",
        help="Do not close Jira issues whose alert is no longer open",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Search Jira but do not create/comment/transition issues; only print intended actions",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logs (also enabled when RUNNER_DEBUG=1)",
    )
    return p.parse_args(argv)


def build_sync_config(args: argparse.Namespace) -> SyncConfig:
    if not args.project_key:
        raise SystemExit("ERROR: --project-key (or JIRA_PROJECT_KEY) is required")
    if not validate_project_key(args.project_key):
        raise SystemExit(f"ERROR: invalid project key {args.project_key!r} (allowed: letters, digits, '_' and '-')")

    try:
        due_days = parse_due_days(args.due_days)
    except ValueError as exc:
        raise SystemExit(f"ERROR: {exc}") from None

    return SyncConfig(
        project_key=args.project_key,
        issue_type=args.issue_type,
        labels=args.labels,
        assignee=args.assignee or None,
        due_days=due_days,
        dry_run=bool(args.dry_run),
        close_transition=args.close_transition,
        close_comment=args.close_comment or None,
        close_resolved=not args.no_close_resolved,
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    set_verbose_enabled(bool(args.verbose) or parse_runner_debug())

    config = build_sync_config(args)

    try:
        client = create_jira_client(args.jira_url, args.jira_username, args.jira_api_token)
    except JiraConfigError as exc:
        raise SystemExit(f"ERROR: {exc}. Set JIRA_URL, JIRA_USERNAME and JIRA_API_TOKEN.") from None

    if args.repo:
        if not args.github_token:
            raise SystemExit("ERROR: --repo needs a GitHub token. Set GITHUB_TOKEN or pass --github-token.")
        alerts = fetch_alerts_from_github(args.repo, args.github_token)
    else:
        alerts = load_alerts_from_file(args.file)

    try:
        sync_alerts(client, config, alerts)
    except ValidationError as exc:
        raise SystemExit(f"ERROR: {exc}") from None
    except JiraSyncError as exc:
        raise SystemExit(f"ERROR: Jira sync failed: {exc}") from None


if __name__ == "__main__":
    main()
