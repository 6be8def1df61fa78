"""JQL searches (soft failure) and alert-id extraction from issues."""

from __future__ import annotations

import pytest

from jira_workflows.shared import adf
from jira_workflows.shared.common import set_verbose_enabled
from jira_workflows.shared.errors import InvalidAlertIdError, InvalidProjectKeyError
from jira_workflows.shared.models import TrackingIssue
from jira_workflows.dependabot.utils.issue_matcher import (
    extract_alert_id_from_issue,
    find_existing_issue,
    find_open_dependabot_issues,
)


def test_find_existing_issue_builds_query(jira) -> None:
    key = jira.add_issue("Dependabot Alert #42: Prototype Pollution", labels=["dependabot"])

    issue = find_existing_issue(jira, "SEC", 42)

    assert issue is not None
    assert issue.key == key
    assert issue.summary == "Dependabot Alert #42: Prototype Pollution"
    assert issue.status == "To Do"
    method, path, params = jira.calls[0]
    assert (method, path) == ("GET", "/search/jql")
    assert params == {
        "jql": 'project = "SEC" AND summary ~ "Dependabot Alert #42"',
        "fields": "key,summary,status,updated",
    }


def test_find_existing_issue_none_when_no_match(jira) -> None:
    jira.add_issue("Dependabot Alert #7: other")
    assert find_existing_issue(jira, "SEC", "42") is None


def test_find_existing_issue_ignores_longer_alert_numbers(jira) -> None:
    jira.add_issue("Dependabot Alert #42: not this one")
    wanted = jira.add_issue("Dependabot Alert #4: this one")

    issue = find_existing_issue(jira, "SEC", 4)
    assert issue is not None
    assert issue.key == wanted


def test_find_existing_issue_search_failure_is_soft(jira, capsys) -> None:
    jira.add_issue("Dependabot Alert #42: exists")
    jira.fail_on.add(("GET", "/search/jql"))

    assert find_existing_issue(jira, "SEC", 42) is None
    assert "WARN: Failed to search for existing issue" in capsys.readouterr().err


def test_find_existing_issue_validates_before_searching(jira) -> None:
    with pytest.raises(InvalidProjectKeyError):
        find_existing_issue(jira, "sec ops", 42)
    with pytest.raises(InvalidAlertIdError):
        find_existing_issue(jira, "SEC", "not-a-number")
    assert jira.calls == []


def test_find_open_dependabot_issues(jira) -> None:
    open_key = jira.add_issue("Dependabot Alert #1: a", labels=["dependabot"])
    jira.add_issue("Dependabot Alert #2: b", labels=["dependabot"], resolved=True)
    jira.add_issue("Unrelated bug", labels=["frontend"])

    issues = find_open_dependabot_issues(jira, "SEC")

    assert [issue.key for issue in issues] == [open_key]
    _, _, params = jira.calls[0]
    assert params == {
        "jql": 'project = "SEC" AND labels = "dependabot" AND resolution IS EMPTY',
        "fields": "key,summary,description,status",
        "maxResults": 100,
    }


def test_find_open_dependabot_issues_failure_is_soft(jira, capsys) -> None:
    jira.fail_on.add(("GET", "/search/jql"))
    assert find_open_dependabot_issues(jira, "SEC") == []
    assert "WARN: Failed to search for open Dependabot issues" in capsys.readouterr().err


def test_find_open_dependabot_issues_validates_key(jira) -> None:
    with pytest.raises(InvalidProjectKeyError):
        find_open_dependabot_issues(jira, "SEC AND 1=1")
    assert jira.calls == []


def test_extract_from_flat_summary() -> None:
    assert extract_alert_id_from_issue({"summary": "Dependabot Alert #42: foo"}) == "42"


def test_extract_from_nested_fields() -> None:
    issue = {"key": "SEC-1", "fields": {"summary": "Dependabot Alert #9: foo"}}
    assert extract_alert_id_from_issue(issue) == "9"


def test_extract_falls_back_to_description() -> None:
    assert extract_alert_id_from_issue({"summary": "Manual ticket", "description": "Alert ID: 7"}) == "7"


def test_extract_description_document_tree() -> None:
    description = adf.doc([adf.paragraph(adf.text("Alert ID: 15"))])
    issue = {"key": "SEC-3", "fields": {"summary": "Manual ticket", "description": description}}
    assert extract_alert_id_from_issue(issue) == "15"


def test_extract_prefers_summary_over_description() -> None:
    issue = {"summary": "Dependabot Alert #1: foo", "description": "Alert ID: 2"}
    assert extract_alert_id_from_issue(issue) == "1"


def test_extract_returns_none_when_nothing_matches(capsys) -> None:
    assert extract_alert_id_from_issue({"key": "SEC-5", "summary": "Something else"}) is None
    assert "WARN: Could not extract alert ID from issue SEC-5" in capsys.readouterr().err


def test_extract_accepts_tracking_issue(capsys) -> None:
    set_verbose_enabled(True)
    issue = TrackingIssue(key="SEC-8", summary="Dependabot Alert #88: x", raw={"key": "SEC-8"})
    assert extract_alert_id_from_issue(issue) == "88"
    assert '"key": "SEC-8"' in capsys.readouterr().out
