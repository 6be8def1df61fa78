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

"""Jira-side data models shared across automations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def issue_field(issue: Mapping[str, Any], name: str) -> Any:
    """Read *name* from a Jira issue object.

    Search results nest values under ``fields`` while some callers hand
    over already-flattened issues, so the flat shape is tried first and the
    nested ``fields`` container second.
    """
    value = issue.get(name)
    if value:
        return value
    nested = issue.get("fields")
    if isinstance(nested, Mapping):
        return nested.get(name)
    return value


@dataclass
class TrackingIssue:
    key: str
    summary: str
    description: Any = None    # plain string or a document tree (dict)
    status: str = ""
    updated: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, obj: Mapping[str, Any]) -> "TrackingIssue":
        status = issue_field(obj, "status")
        if isinstance(status, Mapping):
            status = status.get("name")
        return cls(
            key=str(obj.get("key") or ""),
            summary=str(issue_field(obj, "summary") or ""),
            description=issue_field(obj, "description"),
            status=str(status or ""),
            updated=str(issue_field(obj, "updated") or ""),
            raw=dict(obj),
        )


@dataclass
class Transition:
    id: str
    name: str

    @classmethod
    def from_api(cls, obj: Mapping[str, Any]) -> "Transition":
        return cls(id=str(obj.get("id") or ""), name=str(obj.get("name") or ""))
