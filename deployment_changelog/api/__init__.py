"""Clients for the upstream services a changelog is built from."""

from .abc import CommitProviderBase, DeploymentStateProviderBase, IssueProviderBase
from .bitbucket import BitbucketClient, BitbucketPaginated
from .jira import JiraClient
from .pagination import PaginatedCursor, drain_all
from .spinnaker import SpinnakerClient

__all__ = [
    "CommitProviderBase",
    "DeploymentStateProviderBase",
    "IssueProviderBase",
    "BitbucketClient",
    "BitbucketPaginated",
    "JiraClient",
    "PaginatedCursor",
    "drain_all",
    "SpinnakerClient",
]
