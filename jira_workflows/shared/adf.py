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

"""Atlassian Document Format (ADF) node helpers.

Jira Cloud (REST v3) takes issue descriptions and comments as a document
tree rather than Markdown: a ``doc`` root holding block nodes (headings,
paragraphs, rules), where each paragraph holds inline ``text`` runs that
may carry marks (bold, italic, link).
"""

from __future__ import annotations

from typing import Any, Dict, List

Node = Dict[str, Any]
Mark = Dict[str, Any]


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------

def strong() -> Mark:
    return {"type": "strong"}


def em() -> Mark:
    return {"type": "em"}


def link(href: str) -> Mark:
    return {"type": "link", "attrs": {"href": href}}


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

def text(value: str, *marks: Mark) -> Node:
    """Return an inline text run, with *marks* when given."""
    node: Node = {"type": "text", "text": value}
    if marks:
        node["marks"] = list(marks)
    return node


def paragraph(*content: Node) -> Node:
    return {"type": "paragraph", "content": list(content)}


def spacer() -> Node:
    """An empty paragraph, used as vertical space between sections."""
    return paragraph()


def heading(value: str, level: int) -> Node:
    return {"type": "heading", "attrs": {"level": level}, "content": [text(value)]}


def rule() -> Node:
    return {"type": "rule"}


def labelled(label: str, value: str, *value_marks: Mark) -> Node:
    """Paragraph with a bold *label* run followed by the *value* run."""
    return paragraph(text(label, strong()), text(value, *value_marks))


def doc(content: List[Node]) -> Node:
    return {"type": "doc", "version": 1, "content": content}


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

_BLOCK_TYPES = {"paragraph", "heading", "rule", "listItem", "codeBlock", "blockquote"}


def to_plain_text(node: Any) -> str:
    """Flatten a document tree into plain text, one line per block node.

    Strings pass through unchanged so callers can hand over either form.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(to_plain_text(child) for child in node)
    if not isinstance(node, dict):
        return str(node)

    if node.get("type") == "text":
        return str(node.get("text") or "")
    if node.get("type") == "hardBreak":
        return "\n"

    out = "".join(to_plain_text(child) for child in node.get("content") or [])
    if node.get("type") in _BLOCK_TYPES:
        out += "\n"
    return out
