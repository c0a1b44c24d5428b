"""Test fixtures for Plex operator tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from datetime import timedelta

import pytest
import pytest_asyncio
import structlog
from safir.logging import LogLevel, Profile, configure_logging
from structlog.stdlib import BoundLogger

from plexoperator.config import Config
from plexoperator.constants import ROOT_LOGGER
from plexoperator.factory import Factory

from .support.kubernetes import MockPlexKubernetesApi, patch_kubernetes
from .support.plex import TEST_NAMESPACE


@pytest.fixture
def config() -> Config:
    """Construct default configuration for tests."""
    return Config(
        namespace=TEST_NAMESPACE,
        request_timeout=timedelta(seconds=10),
        log_level=LogLevel.DEBUG,
        profile=Profile.development,
    )


@pytest_asyncio.fixture
async def factory(
    config: Config, mock_kubernetes: MockPlexKubernetesApi
) -> AsyncIterator[Factory]:
    """Create a component factory for tests."""
    async with Factory.standalone(config) as factory:
        yield factory


@pytest.fixture
def logger(config: Config) -> BoundLogger:
    configure_logging(
        name=ROOT_LOGGER, profile=config.profile, log_level=config.log_level
    )
    return structlog.get_logger(ROOT_LOGGER)


@pytest.fixture
def mock_kubernetes() -> Iterator[MockPlexKubernetesApi]:
    yield from patch_kubernetes()
