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

"""Issue summary / description / comment construction from alerts."""

from __future__ import annotations

from typing import Callable

from jira_workflows.shared import adf
from jira_workflows.shared.common import format_timestamp

from .constants import FOOTER_NOTE, SUMMARY_PREFIX
from .models import Alert

# Each optional block is (label, getter); the block is emitted, preceded by
# a spacer paragraph, only when the getter returns a non-empty string.
# Order here is the order in the rendered document.
OptionalBlock = tuple[str, Callable[[Alert], str | None]]


def _fmt_cvss(alert: Alert) -> str | None:
    if alert.cvss is None:
        return None
    return f"{alert.cvss:g}"


ISSUE_OPTIONAL_BLOCKS: tuple[OptionalBlock, ...] = (
    ("CVSS Score: ", _fmt_cvss),
    ("CVE ID: ", lambda alert: alert.cve_id),
    ("GHSA ID: ", lambda alert: alert.ghsa_id),
)

UPDATE_OPTIONAL_BLOCKS: tuple[OptionalBlock, ...] = (
    ("Dismissed At: ", lambda alert: format_timestamp(alert.dismissed_at) if alert.dismissed_at else None),
    ("Dismissed Reason: ", lambda alert: alert.dismissed_reason),
    ("Dismissed Comment: ", lambda alert: alert.dismissed_comment),
)


def _or_na(value: str | None) -> str:
    # Jira rejects empty text runs.
    s = str(value or "").strip()
    return s or "N/A"


def _optional_blocks(alert: Alert, builders: tuple[OptionalBlock, ...]) -> list[adf.Node]:
    nodes: list[adf.Node] = []
    for label, getter in builders:
        value = getter(alert)
        if not value:
            continue
        nodes += [adf.spacer(), adf.labelled(label, value)]
    return nodes


def _alert_url_paragraph(alert: Alert) -> adf.Node:
    url = (alert.url or "").strip()
    if not url:
        return adf.labelled("GitHub Alert URL: ", "N/A")
    return adf.labelled("GitHub Alert URL: ", url, adf.link(url))


def build_issue_summary(alert: Alert) -> str:
    return f"{SUMMARY_PREFIX}{alert.id}: {alert.title}"


def build_issue_description(alert: Alert) -> adf.Node:
    """Render the description document for a new Jira issue."""
    content: list[adf.Node] = [
        adf.heading(f"Dependabot Security Alert #{alert.id}", 2),
        adf.spacer(),
        adf.labelled("Package: ", _or_na(alert.package)),
        adf.labelled("Ecosystem: ", _or_na(alert.ecosystem)),
        adf.labelled("Severity: ", alert.severity.value.upper()),
        adf.labelled("Vulnerable Version Range: ", _or_na(alert.vulnerable_version_range)),
        adf.labelled("First Patched Version: ", _or_na(alert.first_patched_version)),
        adf.spacer(),
        adf.heading("Description", 3),
        adf.paragraph(adf.text(_or_na(alert.description))),
    ]
    content += _optional_blocks(alert, ISSUE_OPTIONAL_BLOCKS)
    content += [
        adf.spacer(),
        _alert_url_paragraph(alert),
        adf.spacer(),
        adf.rule(),
        adf.paragraph(adf.text(FOOTER_NOTE, adf.em())),
    ]
    return adf.doc(content)


def build_update_comment(alert: Alert) -> adf.Node:
    """Render the comment posted on an existing issue when its alert is synced again."""
    content: list[adf.Node] = [
        adf.heading("Dependabot Alert Updated", 3),
        adf.spacer(),
        adf.paragraph(adf.text(f"The Dependabot alert #{alert.id} has been updated.")),
        adf.spacer(),
        adf.labelled("Current Status: ", _or_na(alert.state)),
        adf.labelled("Last Updated: ", _or_na(format_timestamp(alert.updated_at))),
    ]
    content += _optional_blocks(alert, UPDATE_OPTIONAL_BLOCKS)
    content += [
        adf.spacer(),
        _alert_url_paragraph(alert),
    ]
    return adf.doc(content)


def build_plain_comment(message: str) -> adf.Node:
    return adf.doc([adf.paragraph(adf.text(message))])


def build_close_comment(alert_id: str) -> str:
    return f"Dependabot alert #{alert_id} is no longer open. Closing automatically."
