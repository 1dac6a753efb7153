"""Custom exceptions raised while resolving commit ranges and building changelogs."""

from typing import Literal

VersionBucket = Literal["pending", "current"]


class CommitRangeResolutionError(Exception):
    """Base class for failures turning a deployment environment into a commit range."""

    def __init__(self, message: str, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the application and environment being resolved."""
        super().__init__(message)
        self.application_name = application_name
        self.environment_name = environment_name


class ApplicationNotFoundError(CommitRangeResolutionError):
    """Raised when the deployment system does not know the application."""

    def __init__(self, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the missing application."""
        super().__init__(f"Spinnaker application {application_name} was not found", application_name, environment_name)


class EnvironmentNotFoundError(CommitRangeResolutionError):
    """Raised when the application has no environment with the requested name."""

    def __init__(self, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the missing environment."""
        super().__init__(f"Spinnaker application {application_name} has no environment {environment_name}", application_name, environment_name)


class NoArtifactsInEnvironmentError(CommitRangeResolutionError):
    """Raised when the environment reports no artifact versions."""

    def __init__(self, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the empty environment."""
        super().__init__(
            f"No artifacts found for environment {environment_name} in Spinnaker application {application_name}",
            application_name,
            environment_name,
        )


class NoPendingVersionError(CommitRangeResolutionError):
    """Raised when no artifact version is about to roll out to the environment."""

    def __init__(self, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the environment lacking a pending version."""
        super().__init__(
            f"There are no pending versions for environment {environment_name} in Spinnaker application {application_name}",
            application_name,
            environment_name,
        )


class NoCurrentVersionError(CommitRangeResolutionError):
    """Raised when no artifact version is live in the environment."""

    def __init__(self, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the environment lacking a current version."""
        super().__init__(
            f"There are no current versions for environment {environment_name} in Spinnaker application {application_name}",
            application_name,
            environment_name,
        )


class MissingGitFieldError(CommitRangeResolutionError):
    """Base class for a latest version that lacks part of its source control metadata."""

    field_description = "Git metadata"

    def __init__(self, bucket: VersionBucket, version: str, application_name: str, environment_name: str) -> None:
        """Initializes the exception with the bucket and version missing the field."""
        super().__init__(
            f"Missing {self.field_description} for the latest {bucket} version {version} "
            f"of Spinnaker application {application_name}, environment {environment_name}",
            application_name,
            environment_name,
        )
        self.bucket = bucket
        self.version = version


class MissingGitMetadataError(MissingGitFieldError):
    """Raised when the latest version of a bucket carries no Git metadata at all."""

    field_description = "Git metadata"


class MissingGitProjectError(MissingGitFieldError):
    """Raised when the latest version of a bucket has no Git project."""

    field_description = "the Git project"


class MissingGitRepositoryError(MissingGitFieldError):
    """Raised when the latest version of a bucket has no Git repository name."""

    field_description = "the Git repository name"


class MissingGitCommitError(MissingGitFieldError):
    """Raised when the latest version of a bucket has no Git commit."""

    field_description = "the Git commit"


class ChangelogStageError(Exception):
    """Raised when a stage of changelog aggregation fails for one of its items.

    The upstream failure is chained as ``__cause__``.
    """

    def __init__(self, stage: str, subject: str, reason: str | None = None) -> None:
        """Initializes the exception with the failing stage and the entity being processed."""
        message = f"Changelog stage '{stage}' failed for {subject}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.stage = stage
        self.subject = subject
