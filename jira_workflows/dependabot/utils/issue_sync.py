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

"""Core sync orchestration – creates Jira issues for new alerts, comments
on issues whose alert was synced again, and closes issues whose alert is
no longer open.

Lifecycle per alert id: no issue -> open (create), open -> open (comment),
open -> closed (transition). Closed issues are never reopened here.

Writes fail hard: any create / comment / transition error is reported and
re-raised to the caller.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from jira_workflows.shared.common import is_verbose, vprint
from jira_workflows.shared.errors import TransitionNotFoundError
from jira_workflows.shared.jira_client import FailureMode, JiraClient, backend_call
from jira_workflows.shared.models import Transition

from .constants import DRY_RUN_ISSUE_KEY, PATH_COMMENT, PATH_ISSUE, PATH_TRANSITIONS
from .issue_builder import (
    build_close_comment,
    build_issue_description,
    build_issue_summary,
    build_plain_comment,
    build_update_comment,
)
from .issue_matcher import extract_alert_id_from_issue, find_existing_issue, find_open_dependabot_issues
from .models import Alert, SyncAction, SyncConfig, SyncResult
from .priority import calculate_due_date, map_severity_to_priority


def _split_labels(raw: str | None) -> list[str]:
    return [label.strip() for label in (raw or "").split(",") if label.strip()]


def _print_body_preview(body: Any) -> None:
    if is_verbose():
        print("DRY-RUN: body_preview_begin")
        print(json.dumps(body, indent=2))
        print("DRY-RUN: body_preview_end")


def build_create_payload(config: SyncConfig, alert: Alert) -> dict[str, Any]:
    """Assemble the ``POST /issue`` body for *alert*."""
    fields: dict[str, Any] = {
        "project": {"key": config.project_key},
        "summary": build_issue_summary(alert),
        "description": build_issue_description(alert),
        "issuetype": {"name": config.issue_type},
        "priority": {"name": map_severity_to_priority(alert.severity)},
        "duedate": calculate_due_date(alert.severity, config.due_days, alert.created_at),
    }

    labels = _split_labels(config.labels)
    if labels:
        fields["labels"] = labels

    if config.assignee:
        fields["assignee"] = {"name": config.assignee}

    return {"fields": fields}


def create_jira_issue(
    client: JiraClient,
    config: SyncConfig,
    alert: Alert,
    dry_run: bool = False,
) -> dict[str, Any]:
    payload = build_create_payload(config, alert)
    summary = payload["fields"]["summary"]

    if dry_run:
        print(
            f"DRY-RUN: would create Jira issue: {summary} "
            f"priority={payload['fields']['priority']['name']} duedate={payload['fields']['duedate']}"
        )
        _print_body_preview(payload)
        return {"key": DRY_RUN_ISSUE_KEY, "dryRun": True}

    created = backend_call(
        "create Jira issue",
        FailureMode.HARD,
        lambda: client.post(PATH_ISSUE, payload),
    )
    print(f"Created Jira issue: {created.get('key')}")
    return created


def update_jira_issue(
    client: JiraClient,
    issue_key: str,
    alert: Alert,
    dry_run: bool = False,
) -> dict[str, Any]:
    comment = build_update_comment(alert)

    if dry_run:
        print(f"DRY-RUN: would update Jira issue {issue_key} with comment (alert {alert.id})")
        _print_body_preview(comment)
        return {"updated": True, "dryRun": True}

    backend_call(
        f"update Jira issue {issue_key}",
        FailureMode.HARD,
        lambda: client.post(PATH_COMMENT.format(key=issue_key), {"body": comment}),
    )
    print(f"Updated Jira issue: {issue_key}")
    return {"updated": True}


def _close(client: JiraClient, issue_key: str, transition_name: str, comment: str | None) -> None:
    data = client.get(PATH_TRANSITIONS.format(key=issue_key)) or {}
    available = [Transition.from_api(t) for t in data.get("transitions") or []]

    wanted = transition_name.lower()
    target = next((t for t in available if t.name.lower() == wanted), None)
    if target is None:
        raise TransitionNotFoundError(transition_name, [t.name for t in available])

    # The comment goes in first so it shows under the pre-transition state.
    if comment:
        client.post(PATH_COMMENT.format(key=issue_key), {"body": build_plain_comment(comment)})

    client.post(PATH_TRANSITIONS.format(key=issue_key), {"transition": {"id": target.id}})


def close_jira_issue(
    client: JiraClient,
    issue_key: str,
    transition_name: str,
    comment: str | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    if dry_run:
        print(f'DRY-RUN: would close Jira issue {issue_key} with transition "{transition_name}"')
        return {"closed": False, "dryRun": True}

    backend_call(
        f"close Jira issue {issue_key}",
        FailureMode.HARD,
        lambda: _close(client, issue_key, transition_name, comment),
    )
    print(f'Closed Jira issue: {issue_key} using transition "{transition_name}"')
    return {"closed": True}


# ---------------------------------------------------------------------------
# Batch orchestration
# ---------------------------------------------------------------------------

def sync_alert(client: JiraClient, config: SyncConfig, alert: Alert) -> tuple[SyncAction, str | None]:
    """Create or update the Jira issue for one alert.

    Returns the action taken and the affected issue key.
    """
    existing = find_existing_issue(client, config.project_key, alert.id)

    if existing is not None:
        update_jira_issue(client, existing.key, alert, config.dry_run)
        return SyncAction.UPDATED, existing.key

    if not alert.is_open:
        vprint(f"Skip alert {alert.id}: state={alert.state!r} and no Jira issue to update")
        return SyncAction.SKIPPED, None

    created = create_jira_issue(client, config, alert, config.dry_run)
    return SyncAction.CREATED, str(created.get("key") or "")


def close_resolved_issues(
    client: JiraClient,
    config: SyncConfig,
    resolved_alert_ids: Iterable[int],
) -> list[str]:
    """Close every open Dependabot issue whose alert is in *resolved_alert_ids*.

    Issues of alerts absent from *resolved_alert_ids* are left alone, so a
    partial alert feed never closes anything it did not report on.
    """
    resolved = {str(alert_id) for alert_id in resolved_alert_ids}
    if not resolved:
        vprint("No resolved alerts in this run – nothing to close")
        return []
    closed: list[str] = []

    for issue in find_open_dependabot_issues(client, config.project_key):
        alert_id = extract_alert_id_from_issue(issue)
        if alert_id is None:
            continue
        if alert_id not in resolved:
            vprint(f"Keep issue {issue.key}: alert #{alert_id} is not reported as resolved")
            continue

        comment = config.close_comment or build_close_comment(alert_id)
        result = close_jira_issue(client, issue.key, config.close_transition, comment, config.dry_run)
        if result.get("closed") or result.get("dryRun"):
            closed.append(issue.key)

    return closed


def sync_alerts(client: JiraClient, config: SyncConfig, alerts: Iterable[Alert]) -> SyncResult:
    """Sync *alerts* into Jira one at a time, then close issues of resolved alerts.

    Alerts are processed sequentially in the order given.
    """
    result = SyncResult()
    resolved_ids: list[int] = []

    for alert in alerts:
        if not alert.is_open:
            resolved_ids.append(alert.id)
        action, key = sync_alert(client, config, alert)
        if action is SyncAction.CREATED:
            result.created.append(key or "")
        elif action is SyncAction.UPDATED:
            result.updated.append(key or "")
        else:
            result.skipped.append(alert.id)

    if config.close_resolved:
        result.closed = close_resolved_issues(client, config, resolved_ids)
    else:
        vprint("Closing of resolved alerts disabled – skipping")

    print(
        f"Sync finished: {len(result.created)} created, {len(result.updated)} updated, "
        f"{len(result.closed)} closed, {len(result.skipped)} skipped",
    )
    return result
