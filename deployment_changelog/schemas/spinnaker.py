"""Pydantic schemas for the Spinnaker Managed Delivery environment states query."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ArtifactStatus(str, Enum):
    """Lifecycle status of an artifact version within an environment."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DEPLOYING = "DEPLOYING"
    CURRENT = "CURRENT"
    PREVIOUS = "PREVIOUS"
    VETOED = "VETOED"
    SKIPPED = "SKIPPED"


class SpinnakerModel(BaseModel):
    """Base model for Spinnaker GraphQL payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GitMetadata(SpinnakerModel):
    """Pydantic model for the source control metadata of an artifact version."""

    commit: str | None = None
    project: str | None = None
    repo_name: str | None = None
    branch: str | None = None
    author: str | None = None


class ArtifactVersion(SpinnakerModel):
    """Pydantic model for one version of an artifact in an environment."""

    version: str
    build_number: str | None = None
    status: ArtifactStatus | None = None
    git_metadata: GitMetadata | None = None


class Artifact(SpinnakerModel):
    """Pydantic model for a deployable artifact in an environment."""

    name: str | None = None
    reference: str | None = None
    versions: list[ArtifactVersion] | None = None


class EnvironmentStateDetails(SpinnakerModel):
    """Pydantic model for the state of an environment."""

    artifacts: list[Artifact] | None = None


class Environment(SpinnakerModel):
    """Pydantic model for a Managed Delivery environment."""

    name: str
    state: EnvironmentStateDetails


class Application(SpinnakerModel):
    """Pydantic model for a Managed Delivery application."""

    name: str
    environments: list[Environment] = []


class EnvironmentStatesResponse(SpinnakerModel):
    """Pydantic model for the data returned by the environment states query."""

    application: Application | None = None
