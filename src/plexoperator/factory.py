"""Component factory for the Plex operator."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from typing import Self

import structlog
from kubernetes_asyncio.client import ApiClient
from structlog.stdlib import BoundLogger

from .background import ReconcileLoop
from .config import Config
from .constants import ROOT_LOGGER
from .services.builder.service import ServiceBuilder
from .services.builder.statefulset import StatefulSetBuilder
from .services.plex import PlexReconciler
from .services.reconcilers.external_service import ExternalServiceReconciler
from .services.reconcilers.service import ServiceReconciler
from .services.reconcilers.statefulset import StatefulSetReconciler
from .services.reconcilers.status import StatusReconciler
from .storage.kubernetes.custom import PlexMediaServerStorage
from .storage.kubernetes.deleter import ServiceStorage, StatefulSetStorage

__all__ = ["Factory"]


class Factory:
    """Build Plex operator components.

    Parameters
    ----------
    config
        Operator configuration.
    api_client
        Shared Kubernetes API client.
    logger
        Logger to use for messages.
    """

    @classmethod
    @asynccontextmanager
    async def standalone(cls, config: Config) -> AsyncIterator[Self]:
        """Async context manager for Plex operator components.

        The Kubernetes client configuration must already be initialized.

        Parameters
        ----------
        config
            Operator configuration.

        Yields
        ------
        Factory
            Newly-created factory. Must be used as a context manager.
        """
        logger = structlog.get_logger(ROOT_LOGGER)
        factory = cls(config, ApiClient(), logger)
        async with aclosing(factory):
            yield factory

    def __init__(
        self, config: Config, api_client: ApiClient, logger: BoundLogger
    ) -> None:
        self._config = config
        self._api_client = api_client
        self._logger = logger

    async def aclose(self) -> None:
        """Free allocated resources."""
        await self._api_client.close()

    def create_plex_reconciler(self) -> PlexReconciler:
        """Create the orchestrator running every driver in order.

        Returns
        -------
        PlexReconciler
            Newly-created orchestrator.
        """
        timeout = self._config.request_timeout
        service_builder = ServiceBuilder()
        service_storage = ServiceStorage(self._api_client, self._logger)
        statefulset_storage = StatefulSetStorage(
            self._api_client, self._logger
        )
        plex_storage = self.create_plex_storage()
        return PlexReconciler(
            reconcilers=[
                ServiceReconciler(
                    builder=service_builder,
                    storage=service_storage,
                    request_timeout=timeout,
                    logger=self._logger,
                ),
                ExternalServiceReconciler(
                    builder=service_builder,
                    storage=service_storage,
                    request_timeout=timeout,
                    logger=self._logger,
                ),
                StatefulSetReconciler(
                    builder=StatefulSetBuilder(self._config.image.repository),
                    storage=statefulset_storage,
                    request_timeout=timeout,
                    logger=self._logger,
                ),
                StatusReconciler(
                    plex_storage=plex_storage,
                    statefulset_storage=statefulset_storage,
                    request_timeout=timeout,
                    logger=self._logger,
                ),
            ],
            plex_storage=plex_storage,
            request_timeout=timeout,
            logger=self._logger,
        )

    def create_plex_storage(self) -> PlexMediaServerStorage:
        """Create storage for ``PlexMediaServer`` objects."""
        return PlexMediaServerStorage(self._api_client, self._logger)

    def create_reconcile_loop(self) -> ReconcileLoop:
        """Create the loop reconciling every ``PlexMediaServer``."""
        return ReconcileLoop(
            config=self._config,
            plex_storage=self.create_plex_storage(),
            plex_reconciler=self.create_plex_reconciler(),
            logger=self._logger,
        )
