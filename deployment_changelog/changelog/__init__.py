"""Changelog aggregation module."""

from .aggregator import ChangelogAggregator, build_changelog
from .exceptions import (
    ApplicationNotFoundError,
    ChangelogStageError,
    CommitRangeResolutionError,
    EnvironmentNotFoundError,
    MissingGitCommitError,
    MissingGitFieldError,
    MissingGitMetadataError,
    MissingGitProjectError,
    MissingGitRepositoryError,
    NoArtifactsInEnvironmentError,
    NoCurrentVersionError,
    NoPendingVersionError,
)
from .models import Changelog, CommitRange, CommitSpecifier, EnvironmentDescriptor
from .resolver import resolve_commit_range

__all__ = [
    "ChangelogAggregator",
    "build_changelog",
    "ApplicationNotFoundError",
    "ChangelogStageError",
    "CommitRangeResolutionError",
    "EnvironmentNotFoundError",
    "MissingGitCommitError",
    "MissingGitFieldError",
    "MissingGitMetadataError",
    "MissingGitProjectError",
    "MissingGitRepositoryError",
    "NoArtifactsInEnvironmentError",
    "NoCurrentVersionError",
    "NoPendingVersionError",
    "Changelog",
    "CommitRange",
    "CommitSpecifier",
    "EnvironmentDescriptor",
    "resolve_commit_range",
]
