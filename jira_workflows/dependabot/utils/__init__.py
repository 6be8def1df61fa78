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

"""Dependabot alert to Jira sync utilities.

Modules
-------
constants       Domain constants (label, summary prefix, Jira paths, defaults).
models          Core dataclass definitions (Alert, Severity, SyncConfig, SyncResult).
jql             JQL input sanitizing / validation and query templates.
priority        Severity-to-priority mapping, due-date calculation, due-days parsing.
issue_builder   Issue summary / description / comment documents from alerts.
issue_matcher   JQL searches for existing / open issues and alert-id extraction.
issue_sync      Core sync orchestration (create / update / close, batch sync).
alert_parser    Dependabot alert parsing and loading (JSON file or PyGithub).
"""
