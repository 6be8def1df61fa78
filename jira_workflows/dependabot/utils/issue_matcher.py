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

"""Matching alerts to Jira issues – JQL searches for an alert's issue or
for all open Dependabot issues, and reading the alert id back out of an
issue.

Search failures are soft: a failed lookup is reported as a warning and
treated as "nothing found", so one bad query cannot stop a batch. The
price is a possible duplicate issue.
"""

from __future__ import annotations

import json
import re
import sys
from typing import Any, Mapping

from jira_workflows.shared.adf import to_plain_text
from jira_workflows.shared.common import is_verbose, vprint
from jira_workflows.shared.jira_client import FailureMode, JiraClient, backend_call
from jira_workflows.shared.models import TrackingIssue, issue_field

from .constants import (
    OPEN_ISSUES_MAX_RESULTS,
    PATH_SEARCH,
    SEARCH_FIELDS_EXISTING,
    SEARCH_FIELDS_OPEN,
    SUMMARY_PREFIX,
)
from .jql import coerce_alert_id, existing_issue_jql, open_issues_jql, require_project_key

SUMMARY_ALERT_ID_RE = re.compile(r"Dependabot Alert #(\d+)")
DESCRIPTION_ALERT_ID_RE = re.compile(r"Alert ID:\s*(\d+)")


def _search(client: JiraClient, params: dict[str, Any]) -> list[TrackingIssue]:
    data = client.get(PATH_SEARCH, params=params) or {}
    return [TrackingIssue.from_api(obj) for obj in data.get("issues") or []]


def find_existing_issue(
    client: JiraClient,
    project_key: str,
    alert_id: Any,
) -> TrackingIssue | None:
    """Return the issue whose summary references *alert_id*, or ``None``.

    Raises on an invalid project key or alert id before anything is sent.
    """
    key = require_project_key(project_key)
    number = coerce_alert_id(alert_id)

    params = {
        "jql": existing_issue_jql(key, number),
        "fields": SEARCH_FIELDS_EXISTING,
    }
    issues = backend_call(
        "search for existing issue",
        FailureMode.SOFT,
        lambda: _search(client, params),
        fallback=[],
    )
    # `~` is a text search, so "#4" can also hit "#42"; keep exact references only.
    exact = re.compile(rf"{re.escape(SUMMARY_PREFIX)}{number}(?!\d)")
    matches = [issue for issue in issues if exact.search(issue.summary)]
    return matches[0] if matches else None


def find_open_dependabot_issues(client: JiraClient, project_key: str) -> list[TrackingIssue]:
    key = require_project_key(project_key)
    params = {
        "jql": open_issues_jql(key),
        "fields": SEARCH_FIELDS_OPEN,
        "maxResults": OPEN_ISSUES_MAX_RESULTS,
    }

    print(f"Searching for open Dependabot issues in project {project_key}")
    issues = backend_call(
        "search for open Dependabot issues",
        FailureMode.SOFT,
        lambda: _search(client, params),
        fallback=[],
    )
    print(f"Found {len(issues)} open Dependabot issues")
    return issues


def extract_alert_id_from_issue(issue: TrackingIssue | Mapping[str, Any]) -> str | None:
    """Return the Dependabot alert id referenced by *issue*, as a digit string.

    The summary (``Dependabot Alert #123: ...``) wins; the description
    (``Alert ID: 123``) is only consulted when the summary has no match.
    """
    if isinstance(issue, TrackingIssue):
        key, summary, description = issue.key, issue.summary, issue.description
        raw: Any = issue.raw
    else:
        key = issue.get("key")
        summary = issue_field(issue, "summary")
        description = issue_field(issue, "description")
        raw = issue

    if is_verbose():
        vprint(f"Issue {key} structure: {json.dumps(raw, indent=2, default=str)}")

    m = SUMMARY_ALERT_ID_RE.search(str(summary or ""))
    if m:
        vprint(f"Extracted alert ID {m.group(1)} from summary of issue {key}")
        return m.group(1)

    m = DESCRIPTION_ALERT_ID_RE.search(to_plain_text(description))
    if m:
        vprint(f"Extracted alert ID {m.group(1)} from description of issue {key}")
        return m.group(1)

    print(f"WARN: Could not extract alert ID from issue {key}", file=sys.stderr)
    return None
