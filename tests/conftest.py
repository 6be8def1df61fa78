"""Shared fixtures: an in-memory Jira backend and alert factories."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any

import pytest

from jira_workflows.shared.common import set_verbose_enabled
from jira_workflows.shared.errors import JiraApiError
from jira_workflows.dependabot.utils.models import Alert, Severity, SyncConfig

_SUMMARY_CLAUSE_RE = re.compile(r'summary ~ "([^"]*)"')
_LABEL_CLAUSE_RE = re.compile(r'labels = "([^"]*)"')
_COMMENT_PATH_RE = re.compile(r"^/issue/([^/]+)/comment$")
_TRANSITIONS_PATH_RE = re.compile(r"^/issue/([^/]+)/transitions$")


class FakeJiraClient:
    """Records every call and emulates the handful of Jira endpoints the sync uses.

    Set ``fail_on`` to ``{("GET", "/search/jql"), ...}`` to make a call raise
    :class:`JiraApiError`.
    """

    def __init__(self, transitions: list[dict[str, str]] | None = None) -> None:
        self.calls: list[tuple[str, str, Any]] = []
        self.issues: dict[str, dict[str, Any]] = {}
        self.comments: dict[str, list[Any]] = {}
        self.transitions = transitions if transitions is not None else [
            {"id": "11", "name": "In Progress"},
            {"id": "31", "name": "Done"},
        ]
        self.fail_on: set[tuple[str, str]] = set()
        self._next_id = 1

    # -- helpers ---------------------------------------------------------
    def add_issue(
        self,
        summary: str,
        *,
        labels: list[str] | None = None,
        description: Any = None,
        resolved: bool = False,
    ) -> str:
        key = f"SEC-{self._next_id}"
        self._next_id += 1
        self.issues[key] = {
            "key": key,
            "fields": {
                "summary": summary,
                "description": description,
                "labels": labels or [],
                "status": {"name": "Done" if resolved else "To Do"},
                "resolution": {"name": "Done"} if resolved else None,
                "updated": "2024-01-02T00:00:00.000+0000",
            },
        }
        return key

    def _maybe_fail(self, method: str, path: str) -> None:
        for fail_method, fail_path in self.fail_on:
            if fail_method == method and re.fullmatch(fail_path, path):
                raise JiraApiError(
                    "Jira API Error: Status: 500 Internal Server Error",
                    status=500,
                )

    def _search(self, params: dict[str, Any]) -> dict[str, Any]:
        jql = params["jql"]
        found = []
        for issue in self.issues.values():
            fields = issue["fields"]
            m = _SUMMARY_CLAUSE_RE.search(jql)
            if m and m.group(1) not in fields["summary"]:
                continue
            m = _LABEL_CLAUSE_RE.search(jql)
            if m and m.group(1) not in fields["labels"]:
                continue
            if "resolution IS EMPTY" in jql and fields["resolution"] is not None:
                continue
            found.append(issue)
        return {"issues": found[: params.get("maxResults", 50)]}

    # -- client surface --------------------------------------------------
    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append(("GET", path, params))
        self._maybe_fail("GET", path)
        if path == "/search/jql":
            return self._search(params or {})
        if _TRANSITIONS_PATH_RE.match(path):
            return {"transitions": list(self.transitions)}
        raise AssertionError(f"unexpected GET {path}")

    def post(self, path: str, payload: dict[str, Any] | None = None) -> Any:
        self.calls.append(("POST", path, payload))
        self._maybe_fail("POST", path)
        if path == "/issue":
            fields = payload["fields"]
            key = self.add_issue(
                fields["summary"],
                labels=fields.get("labels"),
                description=fields.get("description"),
            )
            return {"id": "10000", "key": key, "self": f"https://jira.example/rest/api/3/issue/{key}"}
        m = _COMMENT_PATH_RE.match(path)
        if m:
            self.comments.setdefault(m.group(1), []).append(payload["body"])
            return {"id": "1"}
        m = _TRANSITIONS_PATH_RE.match(path)
        if m:
            issue = self.issues[m.group(1)]
            issue["fields"]["resolution"] = {"name": "Done"}
            issue["fields"]["status"] = {"name": "Done"}
            return {}
        raise AssertionError(f"unexpected POST {path}")

    # -- assertions ------------------------------------------------------
    def writes(self) -> list[tuple[str, str, Any]]:
        return [c for c in self.calls if c[0] == "POST"]


@pytest.fixture
def jira() -> FakeJiraClient:
    return FakeJiraClient()


def make_alert(**overrides: Any) -> Alert:
    alert = Alert(
        id=42,
        title="Prototype Pollution in lodash",
        package="lodash",
        ecosystem="npm",
        severity=Severity.HIGH,
        description="Versions of lodash before 4.17.21 are vulnerable.",
        vulnerable_version_range="< 4.17.21",
        first_patched_version="4.17.21",
        url="https://github.com/acme/shop/security/dependabot/42",
        created_at="2024-01-01T00:00:00Z",
        updated_at="2024-01-05T10:30:00Z",
        state="open",
    )
    return replace(alert, **overrides)


@pytest.fixture
def alert() -> Alert:
    return make_alert()


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(project_key="SEC", issue_type="Bug", labels="dependabot, security")


@pytest.fixture(autouse=True)
def _reset_verbose():
    set_verbose_enabled(False)
    yield
    set_verbose_enabled(False)


@pytest.fixture
def alert_factory():
    return make_alert


def make_raw_alert(number: Any = 42, **overrides: Any) -> dict[str, Any]:
    raw = {
        "number": number,
        "state": "open",
        "dependency": {
            "package": {"ecosystem": "npm", "name": "lodash"},
            "manifest_path": "package-lock.json",
        },
        "security_advisory": {
            "ghsa_id": "GHSA-35jh-r3h4-6jhm",
            "cve_id": "CVE-2021-23337",
            "summary": "Command Injection in lodash",
            "description": "lodash versions prior to 4.17.21 are vulnerable.",
            "severity": "high",
            "cvss": {"score": 7.2, "vector_string": "CVSS:3.1/AV:N/AC:L/PR:H/UI:N/S:U/C:H/I:H/A:H"},
        },
        "security_vulnerability": {
            "package": {"ecosystem": "npm", "name": "lodash"},
            "severity": "high",
            "vulnerable_version_range": "< 4.17.21",
            "first_patched_version": {"identifier": "4.17.21"},
        },
        "url": "https://api.github.com/repos/acme/shop/dependabot/alerts/42",
        "html_url": "https://github.com/acme/shop/security/dependabot/42",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-05T10:30:00Z",
        "dismissed_at": None,
        "dismissed_reason": None,
        "dismissed_comment": None,
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def raw_alert_factory():
    """Builds Dependabot REST alert objects as returned by the GitHub API."""
    return make_raw_alert
