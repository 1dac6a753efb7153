"""Pydantic schemas for upstream service payloads."""

from .bitbucket import BitbucketPage, BitbucketUser, Commit, IssueReference, PullRequest, PullRequestParticipant
from .jira import Issue, IssueComment, JiraUser
from .spinnaker import Application, Artifact, ArtifactStatus, ArtifactVersion, Environment, EnvironmentStatesResponse, GitMetadata

__all__ = [
    "BitbucketPage",
    "BitbucketUser",
    "Commit",
    "IssueReference",
    "PullRequest",
    "PullRequestParticipant",
    "Issue",
    "IssueComment",
    "JiraUser",
    "Application",
    "Artifact",
    "ArtifactStatus",
    "ArtifactVersion",
    "Environment",
    "EnvironmentStatesResponse",
    "GitMetadata",
]
