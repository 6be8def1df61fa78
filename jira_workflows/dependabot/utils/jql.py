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

"""JQL input hygiene and query templates.

Values interpolated into JQL pass two gates: the project key must match
the allowed shape (rejected otherwise), and whatever survives is stripped
of quote and backslash characters. Alert ids are coerced to ``int``,
truncating fractional numbers.
"""

from __future__ import annotations

import math
import re
from typing import Any

from jira_workflows.shared.errors import InvalidAlertIdError, InvalidProjectKeyError

from .constants import LABEL_DEPENDABOT, SUMMARY_PREFIX

PROJECT_KEY_RE = re.compile(r"[A-Z0-9_-]+", re.IGNORECASE)
_JQL_UNSAFE_RE = re.compile(r"['\"\\]")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def sanitize_for_jql(value: Any) -> str:
    if not value or not isinstance(value, str):
        return ""
    return _JQL_UNSAFE_RE.sub("", value).strip()


def validate_project_key(project_key: Any) -> bool:
    if not isinstance(project_key, str):
        return False
    return PROJECT_KEY_RE.fullmatch(project_key) is not None


def require_project_key(project_key: Any) -> str:
    """Return the sanitized *project_key*, raising when its format is invalid."""
    if not validate_project_key(project_key):
        raise InvalidProjectKeyError(project_key)
    return sanitize_for_jql(project_key)


def coerce_alert_id(alert_id: Any) -> int:
    """Read an integer alert id from *alert_id* (leading digits of a string are enough)."""
    if isinstance(alert_id, bool):
        raise InvalidAlertIdError(alert_id)
    if isinstance(alert_id, int):
        return alert_id
    if isinstance(alert_id, float) and math.isfinite(alert_id):
        return int(alert_id)
    if isinstance(alert_id, str):
        m = _LEADING_INT_RE.match(alert_id)
        if m:
            return int(m.group(1))
    raise InvalidAlertIdError(alert_id)


def existing_issue_jql(project_key: str, alert_id: int) -> str:
    return f'project = "{project_key}" AND summary ~ "{SUMMARY_PREFIX}{alert_id}"'


def open_issues_jql(project_key: str) -> str:
    return f'project = "{project_key}" AND labels = "{LABEL_DEPENDABOT}" AND resolution IS EMPTY'
