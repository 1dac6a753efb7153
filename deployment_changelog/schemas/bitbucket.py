"""Pydantic schemas for Bitbucket Server REST responses."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class BitbucketModel(BaseModel):
    """Base model for Bitbucket payloads: camelCase on the wire, immutable in memory."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class BitbucketUser(BitbucketModel):
    """Pydantic model for a Bitbucket user or commit identity."""

    name: str
    email_address: str | None = None
    display_name: str | None = None


class Commit(BitbucketModel):
    """Pydantic model for a Bitbucket commit."""

    id: str
    display_id: str
    author: BitbucketUser
    committer: BitbucketUser
    message: str
    author_timestamp: datetime | None = None
    committer_timestamp: datetime | None = None


class PullRequestParticipant(BitbucketModel):
    """Pydantic model for a participant (e.g. the author) of a Bitbucket pull request."""

    user: BitbucketUser
    approved: bool = False
    role: str | None = None


class PullRequest(BitbucketModel):
    """Pydantic model for a Bitbucket pull request.

    Equality and hashing cover every field, which is what pull request
    deduplication relies on.
    """

    id: int
    title: str
    description: str | None = None
    is_open: bool = Field(alias="open")
    author: PullRequestParticipant
    created_at: datetime = Field(alias="createdDate")
    updated_at: datetime = Field(alias="updatedDate")


class IssueReference(BitbucketModel):
    """Pydantic model for a Jira issue linked to a Bitbucket pull request."""

    key: str
    url: str


class BitbucketPage(BaseModel, Generic[T]):
    """Pydantic model for one page of a Bitbucket paged API response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    values: list[T]
    size: int
    is_last_page: bool
    start: int = 0
    limit: int | None = None
    next_page_start: int | None = None
