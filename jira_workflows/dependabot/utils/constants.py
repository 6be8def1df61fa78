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

"""Domain constants – label names, summary prefix, Jira paths and defaults."""

LABEL_DEPENDABOT = "dependabot"

# The alert number embedded in the summary is the only link between a
# Dependabot alert and its Jira issue.
SUMMARY_PREFIX = "Dependabot Alert #"

ALERT_STATE_OPEN = "open"

DEFAULT_ISSUE_TYPE = "Bug"
DEFAULT_CLOSE_TRANSITION = "Done"
DRY_RUN_ISSUE_KEY = "DRY-RUN-KEY"

FOOTER_NOTE = "This issue was automatically created by the Dependabot Jira Sync action."

# Jira REST v3 endpoints (relative to the API base).
PATH_SEARCH = "/search/jql"
PATH_ISSUE = "/issue"
PATH_COMMENT = "/issue/{key}/comment"
PATH_TRANSITIONS = "/issue/{key}/transitions"

SEARCH_FIELDS_EXISTING = "key,summary,status,updated"
SEARCH_FIELDS_OPEN = "key,summary,description,status"
OPEN_ISSUES_MAX_RESULTS = 100
