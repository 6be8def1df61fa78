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

"""Severity-to-priority mapping and due-date calculation, plus parsing of
the user-defined ``severity=days`` config string.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jira_workflows.shared.common import parse_timestamp, utc_now

from .models import DueDaysConfig, Severity

SEVERITY_PRIORITY_MAP: dict[str, str] = {
    "critical": "Blocker",
    "high": "High",
    "medium": "Medium",
    "low": "Low",
}
DEFAULT_PRIORITY = "Medium"


def map_severity_to_priority(severity: Any) -> str:
    """Return the Jira priority name for *severity* (case-insensitive).

    Unknown or missing severities map to ``Medium``.
    """
    if not isinstance(severity, str):
        return DEFAULT_PRIORITY
    return SEVERITY_PRIORITY_MAP.get(severity.strip().lower(), DEFAULT_PRIORITY)


def resolve_due_days(severity: Any, due_days: DueDaysConfig | None) -> int:
    """Days until due for *severity*; unknown severities use the medium offset."""
    return (due_days or DueDaysConfig()).days_for(Severity.parse(severity))


def calculate_due_date(
    severity: Any,
    due_days: DueDaysConfig | None,
    created_at: str | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Return ``base + offset`` as ``YYYY-MM-DD`` (UTC calendar date).

    The base is *created_at* when it parses, otherwise the current time.
    """
    base = parse_timestamp(created_at) or now or utc_now()
    if base.tzinfo is None:
        base = base.replace(tzinfo=timezone.utc)
    due = base + timedelta(days=resolve_due_days(severity, due_days))
    return due.astimezone(timezone.utc).date().isoformat()


def parse_due_days(raw: str | None) -> DueDaysConfig:
    """Parse a comma-separated ``severity=days`` string into a :class:`DueDaysConfig`.

    Severities missing from *raw* keep their default.

    Example input:  ``"critical=1,high=7,medium=30,low=90"``
    """
    config = DueDaysConfig()
    for pair in (raw or "").split(","):
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise ValueError(f"Invalid due-days entry {pair!r} (expected severity=days)")
        sev, days = pair.split("=", 1)
        sev = sev.strip().lower()
        if sev not in SEVERITY_PRIORITY_MAP:
            raise ValueError(f"Unknown severity {sev!r} in due-days config")
        try:
            value = int(days.strip())
        except ValueError:
            raise ValueError(f"Due days for {sev!r} must be an integer, got {days.strip()!r}") from None
        if value < 0:
            raise ValueError(f"Due days for {sev!r} must not be negative, got {value}")
        setattr(config, sev, value)
    return config
