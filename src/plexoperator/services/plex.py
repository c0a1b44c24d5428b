"""Convergence of a ``PlexMediaServer`` on its desired state."""

from __future__ import annotations

from datetime import timedelta

from structlog.stdlib import BoundLogger

from ..models.v1.plex import PlexMediaServer
from ..storage.kubernetes.custom import PlexMediaServerStorage
from ..timeout import Timeout
from .reconcilers.base import Reconciler

__all__ = ["PlexReconciler"]


class PlexReconciler:
    """Run every driver for a ``PlexMediaServer`` in order.

    The drivers are run in a fixed order: the headless service, then the
    external service, then the ``StatefulSet``, and finally the status. The
    first failure aborts the pass, since later drivers may depend on the
    objects managed by earlier ones. Every pass starts again from the
    beginning, so a pass that was aborted or asked for a requeue is finished
    by a later one.

    Parameters
    ----------
    reconcilers
        Drivers to run, in order.
    plex_storage
        Storage for ``PlexMediaServer`` objects.
    request_timeout
        Timeout for reading the ``PlexMediaServer``.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        reconcilers: list[Reconciler],
        plex_storage: PlexMediaServerStorage,
        request_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        self._reconcilers = reconcilers
        self._storage = plex_storage
        self._request_timeout = request_timeout
        self._logger = logger

    async def reconcile(self, plex: PlexMediaServer) -> bool:
        """Make one convergence pass for a Plex server.

        Parameters
        ----------
        plex
            Resource to converge.

        Returns
        -------
        bool
            Whether any driver asked for another pass soon.

        Raises
        ------
        KubernetesError
            Raised if a call to the Kubernetes API server failed. The
            remaining drivers are not run.
        TimeoutError
            Raised if a driver ran past its request timeout.
        """
        self._logger.debug(
            "Reconciling Plex media server",
            namespace=plex.metadata.namespace,
            name=plex.metadata.name,
            generation=plex.metadata.generation,
        )
        requeue = False
        for reconciler in self._reconcilers:
            if await reconciler.reconcile(plex):
                requeue = True
        return requeue

    async def reconcile_by_name(self, name: str, namespace: str) -> bool:
        """Read a Plex server and make one convergence pass for it.

        Nothing is done for a server that no longer exists or is being
        deleted, since its managed objects are garbage-collected along with
        it.

        Parameters
        ----------
        name
            Name of the ``PlexMediaServer``.
        namespace
            Namespace of the ``PlexMediaServer``.

        Returns
        -------
        bool
            Whether any driver asked for another pass soon.

        Raises
        ------
        KubernetesError
            Raised if a call to the Kubernetes API server failed.
        TimeoutError
            Raised if a call ran past its request timeout.
        """
        timeout = Timeout(self._request_timeout)
        plex = await self._storage.read(name, namespace, timeout)
        if not plex:
            msg = "Plex media server not found, ignoring"
            self._logger.info(msg, namespace=namespace, name=name)
            return False
        if plex.metadata.deletion_timestamp:
            msg = "Plex media server is being deleted, ignoring"
            self._logger.info(msg, namespace=namespace, name=name)
            return False
        return await self.reconcile(plex)
