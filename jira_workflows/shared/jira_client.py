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

"""Jira REST v3 client – session setup (basic auth with an API token),
error translation into :class:`JiraApiError`, and the per-operation
failure policy (:class:`FailureMode`) used by read and write paths.
"""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any, Callable, TypeVar
from urllib.parse import urlparse

import requests

from .errors import JiraApiError, JiraConfigError, JiraSyncError

API_PATH = "/rest/api/3"
DEFAULT_TIMEOUT = 30

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

def _response_payload(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def describe_error_response(resp: requests.Response) -> str:
    """Aggregate status, reason and Jira's error arrays into one line."""
    payload = _response_payload(resp)
    details = f"Status: {resp.status_code} {resp.reason or ''}".rstrip()

    if isinstance(payload, dict):
        error_messages = payload.get("errorMessages")
        if error_messages:
            details += f" | Error Messages: {', '.join(str(m) for m in error_messages)}"
        if payload.get("message"):
            details += f" | Message: {payload['message']}"
        if payload.get("errors"):
            details += f" | Errors: {json.dumps(payload['errors'])}"

    if payload:
        rendered = payload if isinstance(payload, str) else json.dumps(payload)
        details += f" | Response: {rendered}"
    return details


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class JiraClient:
    """Thin JSON wrapper around a ``requests`` session bound to the API base URL."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: dict[str, Any] | None = None) -> Any:
        return self._request("POST", path, json=payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise JiraApiError(f"Jira API Error: {exc}") from exc

        if not resp.ok:
            raise JiraApiError(
                f"Jira API Error: {describe_error_response(resp)}",
                status=resp.status_code,
                payload=_response_payload(resp),
            )

        # Transitions and some comment calls answer 204 with no body.
        if not resp.content:
            return {}
        return resp.json()


def create_jira_client(
    jira_url: str,
    username: str,
    api_token: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> JiraClient:
    """Build a :class:`JiraClient` for ``<jira_url>/rest/api/3``.

    Raises :class:`JiraConfigError` when a setting is missing or the URL is
    not an absolute http(s) URL; nothing is sent over the network here.
    """
    if not jira_url or not username or not api_token:
        raise JiraConfigError("Jira URL, username, and API token are required")

    parsed = urlparse(jira_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise JiraConfigError("Invalid Jira URL format")

    session = requests.Session()
    session.auth = (username, api_token)
    session.headers.update(
        {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
    )
    return JiraClient(jira_url.rstrip("/") + API_PATH, session, timeout=timeout)


# ---------------------------------------------------------------------------
# Failure policy
# ---------------------------------------------------------------------------

class FailureMode(Enum):
    """How a backend failure is surfaced for a given operation."""
    SOFT = "soft"   # warn and degrade to a fallback value (read paths)
    HARD = "hard"   # report and re-raise (write paths)


def backend_call(
    action: str,
    mode: FailureMode,
    fn: Callable[[], T],
    *,
    fallback: Any = None,
) -> T:
    """Run *fn*, applying *mode* when it raises a :class:`JiraSyncError`."""
    try:
        return fn()
    except JiraSyncError as exc:
        if mode is FailureMode.SOFT:
            print(f"WARN: Failed to {action}: {exc}", file=sys.stderr)
            return fallback
        print(f"Failed to {action}: {exc}", file=sys.stderr)
        raise
