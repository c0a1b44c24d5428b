"""Plex operator background processing."""

from __future__ import annotations

import asyncio

from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from .config import Config
from .services.plex import PlexReconciler
from .storage.kubernetes.custom import PlexMediaServerStorage
from .timeout import Timeout

__all__ = ["ReconcileLoop"]


class ReconcileLoop:
    """Periodically reconcile every ``PlexMediaServer``.

    Each pass lists the ``PlexMediaServer`` objects in the configured
    namespace, or in all namespaces if none is configured, and converges each
    in turn. A failure for one object is logged and does not stop the others.
    If any object asked for a requeue or failed, the next pass starts after
    the requeue interval, and otherwise after the reconcile interval.

    Parameters
    ----------
    config
        Operator configuration.
    plex_storage
        Storage for ``PlexMediaServer`` objects.
    plex_reconciler
        Orchestrator for a single ``PlexMediaServer``.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        config: Config,
        plex_storage: PlexMediaServerStorage,
        plex_reconciler: PlexReconciler,
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._storage = plex_storage
        self._reconciler = plex_reconciler
        self._logger = logger

    async def run(self) -> None:
        """Reconcile forever, until cancelled."""
        self._logger.info(
            "Starting reconcile loop", namespace=self._config.namespace
        )
        while True:
            start = current_datetime(microseconds=True)
            try:
                requeue = await self.reconcile_all()
            except Exception:
                # Listing failed. Try again soon.
                self._logger.exception("Unable to list Plex media servers")
                requeue = True
            if requeue:
                interval = self._config.requeue_interval
            else:
                interval = self._config.reconcile_interval
            delay = interval - (current_datetime(microseconds=True) - start)
            if delay.total_seconds() < 1:
                self._logger.warning("Reconciliation is running continuously")
            else:
                await asyncio.sleep(delay.total_seconds())

    async def reconcile_all(self) -> bool:
        """Make one convergence pass over every ``PlexMediaServer``.

        Returns
        -------
        bool
            Whether any object asked for a requeue or failed.

        Raises
        ------
        KubernetesError
            Raised if the objects could not be listed.
        TimeoutError
            Raised if listing the objects timed out.
        """
        timeout = Timeout(self._config.request_timeout)
        servers = await self._storage.list(self._config.namespace, timeout)
        requeue = False
        for plex in servers:
            name = plex.metadata.name
            namespace = plex.metadata.namespace
            if plex.metadata.deletion_timestamp:
                continue
            try:
                if await self._reconciler.reconcile(plex):
                    requeue = True
            except Exception:
                msg = "Failed to reconcile Plex media server"
                self._logger.exception(msg, namespace=namespace, name=name)
                requeue = True
        msg = "Reconciled Plex media servers"
        self._logger.debug(msg, count=len(servers), requeue=requeue)
        return requeue
