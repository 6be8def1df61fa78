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

"""Dependabot-specific data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .constants import ALERT_STATE_OPEN, DEFAULT_CLOSE_TRANSITION, DEFAULT_ISSUE_TYPE, LABEL_DEPENDABOT


class Severity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: Any) -> "Severity":
        """Case-insensitive lookup; anything unrecognised degrades to ``MEDIUM``."""
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.MEDIUM


DEFAULT_DUE_DAYS: dict[Severity, int] = {
    Severity.CRITICAL: 1,
    Severity.HIGH: 7,
    Severity.MEDIUM: 30,
    Severity.LOW: 90,
}


@dataclass(frozen=True)
class Alert:
    """One Dependabot alert, as consumed by the sync (read-only)."""
    id: int
    title: str
    package: str
    ecosystem: str
    severity: Severity
    description: str
    vulnerable_version_range: str
    first_patched_version: str
    url: str
    created_at: str
    updated_at: str
    state: str
    cvss: float | None = None
    cve_id: str | None = None
    ghsa_id: str | None = None
    dismissed_at: str | None = None
    dismissed_reason: str | None = None
    dismissed_comment: str | None = None

    @property
    def is_open(self) -> bool:
        return self.state.strip().lower() == ALERT_STATE_OPEN


@dataclass
class DueDaysConfig:
    """Per-severity due-date offsets in days; ``None`` means "use the default"."""
    critical: int | None = None
    high: int | None = None
    medium: int | None = None
    low: int | None = None

    def days_for(self, severity: Severity) -> int:
        override = getattr(self, severity.value)
        if override is None:
            return DEFAULT_DUE_DAYS[severity]
        return override


@dataclass
class SyncConfig:
    project_key: str
    issue_type: str = DEFAULT_ISSUE_TYPE
    labels: str | None = LABEL_DEPENDABOT   # comma-separated
    assignee: str | None = None
    due_days: DueDaysConfig = field(default_factory=DueDaysConfig)
    dry_run: bool = False
    close_transition: str = DEFAULT_CLOSE_TRANSITION
    close_comment: str | None = None
    close_resolved: bool = True


class SyncAction(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class SyncResult:
    """Aggregated output of a full sync run."""
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    closed: list[str] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
