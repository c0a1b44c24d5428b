"""Global configuration parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from safir.logging import LogLevel, Profile
from safir.pydantic import HumanTimedelta

from .constants import (
    DEFAULT_IMAGE_REPOSITORY,
    RECONCILE_INTERVAL,
    REQUEST_TIMEOUT,
    REQUEUE_INTERVAL,
)

__all__ = [
    "Config",
    "ContainerImage",
]


class ContainerImage(BaseModel):
    """Docker image of the Plex Media Server.

    The tag is not configured here. It comes from the version in each
    ``PlexMediaServer``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    repository: Annotated[
        str,
        Field(
            title="Repository",
            description="Docker repository from which to pull the image",
            examples=[DEFAULT_IMAGE_REPOSITORY],
        ),
    ] = DEFAULT_IMAGE_REPOSITORY


class Config(BaseSettings):
    """Plex operator configuration."""

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    namespace: Annotated[
        str | None,
        Field(
            title="Watched namespace",
            description=(
                "Namespace in which to manage ``PlexMediaServer`` objects. If"
                " not set, objects in all namespaces are managed."
            ),
            examples=["plex"],
        ),
    ] = None

    image: Annotated[
        ContainerImage,
        Field(title="Plex image", description="Image of the Plex server"),
    ] = ContainerImage()

    log_level: Annotated[
        LogLevel,
        Field(
            title="Log level",
            description="Python logging level",
            examples=[LogLevel.INFO],
        ),
    ] = LogLevel.INFO

    profile: Annotated[
        Profile,
        Field(
            title="Application logging profile",
            description=(
                "``production`` uses JSON logging. ``development`` uses"
                " logging that may be easier for humans to read but that"
                " cannot be easily parsed by computers."
            ),
            examples=[Profile.development],
        ),
    ] = Profile.production

    reconcile_interval: Annotated[
        HumanTimedelta,
        Field(
            title="Reconcile interval",
            description=(
                "How long to wait between passes over every Plex server"
                " when no pass asked for a requeue"
            ),
        ),
    ] = RECONCILE_INTERVAL

    requeue_interval: Annotated[
        HumanTimedelta,
        Field(
            title="Requeue interval",
            description=(
                "How long to wait before the next pass when a pass asked for"
                " a requeue or failed"
            ),
        ),
    ] = REQUEUE_INTERVAL

    request_timeout: Annotated[
        HumanTimedelta,
        Field(
            title="Request timeout",
            description=(
                "Timeout for the Kubernetes API calls made by one driver"
                " during one pass"
            ),
        ),
    ] = REQUEST_TIMEOUT

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load the operator configuration from a YAML file.

        Parameters
        ----------
        path
            Path to the configuration file.
        """
        with path.open("r") as f:
            return cls.model_validate(yaml.safe_load(f) or {})
