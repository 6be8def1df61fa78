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

"""Alert data parsing – mapping Dependabot REST alert objects onto
:class:`Alert`, loading them from a JSON file (``gh api
repos/<owner>/<repo>/dependabot/alerts`` output) or fetching them with
PyGithub.
"""

from __future__ import annotations

import json
import os
from typing import Any

from github import Auth, Github

from jira_workflows.shared.common import vprint

from .models import Alert, Severity


def _obj(data: Any, key: str) -> dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _opt_str(value: Any) -> str | None:
    s = str(value).strip() if value is not None else ""
    return s or None


def _cvss_score(advisory: dict[str, Any]) -> float | None:
    # GitHub reports 0.0 with no vector when an advisory was never scored.
    score = _obj(advisory, "cvss").get("score")
    if score is None:
        return None
    try:
        value = float(score)
    except (TypeError, ValueError):
        return None
    return value or None


def parse_alert(raw: dict[str, Any]) -> Alert:
    """Build an :class:`Alert` from one Dependabot REST alert object.

    Raises ``ValueError`` when the alert ``number`` is missing or not an integer.
    """
    number = raw.get("number")
    try:
        alert_id = int(number)
    except (TypeError, ValueError):
        raise ValueError(f"Dependabot alert has no valid number: {number!r}") from None

    advisory = _obj(raw, "security_advisory")
    vulnerability = _obj(raw, "security_vulnerability")
    package = _obj(_obj(raw, "dependency"), "package") or _obj(vulnerability, "package")

    return Alert(
        id=alert_id,
        title=str(advisory.get("summary") or f"Vulnerability in {package.get('name') or 'dependency'}"),
        package=str(package.get("name") or ""),
        ecosystem=str(package.get("ecosystem") or ""),
        severity=Severity.parse(advisory.get("severity") or vulnerability.get("severity")),
        description=str(advisory.get("description") or ""),
        vulnerable_version_range=str(vulnerability.get("vulnerable_version_range") or ""),
        first_patched_version=str(_obj(vulnerability, "first_patched_version").get("identifier") or ""),
        url=str(raw.get("html_url") or raw.get("url") or ""),
        created_at=str(raw.get("created_at") or ""),
        updated_at=str(raw.get("updated_at") or ""),
        state=str(raw.get("state") or ""),
        cvss=_cvss_score(advisory),
        cve_id=_opt_str(advisory.get("cve_id")),
        ghsa_id=_opt_str(advisory.get("ghsa_id")),
        dismissed_at=_opt_str(raw.get("dismissed_at")),
        dismissed_reason=_opt_str(raw.get("dismissed_reason")),
        dismissed_comment=_opt_str(raw.get("dismissed_comment")),
    )


def parse_alerts(items: list[Any]) -> list[Alert]:
    """Parse raw alert objects, skipping (with a warning) those that cannot be used."""
    alerts: list[Alert] = []
    for item in items or []:
        if not isinstance(item, dict):
            print(f"WARN: skipping non-object alert entry: {item!r}")
            continue
        try:
            alerts.append(parse_alert(item))
        except ValueError as exc:
            print(f"WARN: skipping alert: {exc}")
            continue

        if os.getenv("DEBUG_ALERTS") == "1":
            print(
                f"DEBUG: full alert payload for alert number={item.get('number')}:\n"
                + json.dumps(item, indent=2, sort_keys=True)
            )
    return alerts


def load_alerts_from_file(path: str) -> list[Alert]:
    """Read a JSON list of alerts (or an object with an ``alerts`` list)."""
    if not os.path.exists(path):
        raise SystemExit(f"ERROR: alerts file not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)

    items = data.get("alerts", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise SystemExit(f"ERROR: expected a list of alerts in {path}")

    alerts = parse_alerts(items)
    print(f"Loaded {len(alerts)} alerts from {path}")
    return alerts


def fetch_alerts_from_github(repo_full: str, token: str, *, state: str | None = None) -> list[Alert]:
    """Fetch Dependabot alerts for *repo_full* (``owner/repo``) via PyGithub."""
    gh = Github(auth=Auth.Token(token))
    repo = gh.get_repo(repo_full)

    kwargs: dict[str, Any] = {}
    if state:
        kwargs["state"] = state
    raw = [alert.raw_data for alert in repo.get_dependabot_alerts(**kwargs)]
    vprint(f"Fetched {len(raw)} raw Dependabot alerts from {repo_full}")

    alerts = parse_alerts(raw)
    print(f"Loaded {len(alerts)} alerts from {repo_full}")
    return alerts
