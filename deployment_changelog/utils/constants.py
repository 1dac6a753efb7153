"""Shared constants used across the application."""

# This file is intended to hold shared constants.

# HTTP Constants
# --------------

APPLICATION_JSON = "application/json"
"""Content type sent and accepted by every upstream client."""

DEFAULT_REQUEST_TIMEOUT = 5.0
"""Default per-request timeout in seconds."""

# Aggregation Constants
# ---------------------

DEFAULT_MAX_CONCURRENCY = 16
"""Default upper bound on in-flight upstream requests within one fan-out stage."""

# Bitbucket Constants
# -------------------

BITBUCKET_COMPARE_COMMITS_PATH = "rest/api/latest/projects/{project}/repos/{repository}/compare/commits"
"""Commits reachable from one commit but not from another."""

BITBUCKET_PULL_REQUESTS_FOR_COMMIT_PATH = "rest/api/latest/projects/{project}/repos/{repository}/commits/{commit_id}/pull-requests"
"""Pull requests that contain a commit."""

BITBUCKET_ISSUES_FOR_PULL_REQUEST_PATH = "rest/jira/latest/projects/{project}/repos/{repository}/pull-requests/{pull_request_id}/issues"
"""Jira issue keys linked to a pull request."""

BITBUCKET_PAGE_START_PARAMETER = "start"
BITBUCKET_PAGE_LIMIT_PARAMETER = "limit"

# Jira Constants
# --------------

JIRA_ISSUE_PATH = "rest/api/latest/issue/{issue_key}"
"""A single Jira issue with its fields."""

JIRA_ISSUE_FIELDS = "summary,description,comment,created,updated,status,issuetype"
"""Issue fields requested from Jira."""

# Spinnaker Constants
# -------------------

GRAPHQL_ENDPOINT = "graphql"
"""Path of the GraphQL endpoint relative to the Spinnaker gate URL."""
