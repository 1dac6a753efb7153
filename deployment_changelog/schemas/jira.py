"""Pydantic schemas for Jira REST responses."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Jira renders offsets as +0000 rather than +00:00
_JIRA_OFFSET_PATTERN = re.compile(r"([+-]\d{2})(\d{2})$")


def normalize_jira_timestamp(value: Any) -> Any:
    """Rewrite a Jira timestamp offset into the ISO 8601 form pydantic parses."""
    if isinstance(value, str):
        return _JIRA_OFFSET_PATTERN.sub(r"\1:\2", value)
    return value


class JiraModel(BaseModel):
    """Base model for Jira payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class JiraUser(JiraModel):
    """Pydantic model for a Jira user."""

    name: str | None = None
    key: str | None = None
    display_name: str | None = None


class IssueComment(JiraModel):
    """Pydantic model for a comment on a Jira issue."""

    author: JiraUser | None = None
    body: str
    created_at: datetime = Field(alias="created")
    updated_at: datetime = Field(alias="updated")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, value: Any) -> Any:
        """Accept Jira style timestamp offsets."""
        return normalize_jira_timestamp(value)


class Issue(JiraModel):
    """Pydantic model for a Jira issue.

    Jira nests everything except the key under ``fields``; the model flattens
    that shape when validating a raw API response.
    """

    key: str
    summary: str
    description: str | None = None
    comments: list[IssueComment] = Field(default_factory=list)
    created_at: datetime = Field(alias="created")
    updated_at: datetime = Field(alias="updated")
    status: str | None = None
    issue_type: str | None = Field(default=None, alias="issueType")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, value: Any) -> Any:
        """Accept Jira style timestamp offsets."""
        return normalize_jira_timestamp(value)

    @model_validator(mode="before")
    @classmethod
    def flatten_fields(cls, data: Any) -> Any:
        """Flatten the ``fields`` object of a Jira issue response."""
        if not isinstance(data, dict) or "fields" not in data:
            return data
        fields = data["fields"] or {}
        flattened: dict[str, Any] = {
            "key": data.get("key"),
            "summary": fields.get("summary"),
            "description": fields.get("description"),
            "comments": (fields.get("comment") or {}).get("comments", []),
            "created": fields.get("created"),
            "updated": fields.get("updated"),
        }
        if isinstance(fields.get("status"), dict):
            flattened["status"] = fields["status"].get("name")
        if isinstance(fields.get("issuetype"), dict):
            flattened["issueType"] = fields["issuetype"].get("name")
        return flattened
