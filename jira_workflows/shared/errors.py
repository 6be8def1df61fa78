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

"""Exception types raised by the Jira automation."""

from __future__ import annotations

from typing import Any


class JiraSyncError(Exception):
    """Base class for every error raised by ``jira_workflows``."""


class ValidationError(JiraSyncError, ValueError):
    """Input rejected before any request is sent to Jira."""


class InvalidProjectKeyError(ValidationError):
    def __init__(self, project_key: Any) -> None:
        super().__init__(f"Invalid project key format: {project_key}")
        self.project_key = project_key


class InvalidAlertIdError(ValidationError):
    def __init__(self, alert_id: Any) -> None:
        super().__init__(f"Invalid alert ID: {alert_id}")
        self.alert_id = alert_id


class JiraConfigError(ValidationError):
    """Missing or malformed connection settings (URL, username, API token)."""


class TransitionNotFoundError(JiraSyncError, LookupError):
    def __init__(self, transition: str, available: list[str]) -> None:
        super().__init__(
            f'Transition "{transition}" not available. '
            f"Available transitions: {', '.join(available)}"
        )
        self.transition = transition
        self.available = available


class JiraApiError(JiraSyncError):
    """A Jira REST call failed (non-2xx response or transport error)."""

    def __init__(self, message: str, *, status: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
