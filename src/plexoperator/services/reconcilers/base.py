"""Shared logic for the drivers that converge one object each."""

from __future__ import annotations

import copy
from abc import ABCMeta, abstractmethod
from datetime import timedelta
from typing import Any, Generic, Protocol

from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesConflictError
from ...models.v1.plex import PlexMediaServer
from ...storage.kubernetes.creator import T
from ...storage.kubernetes.deleter import KubernetesObjectDeleter
from ...timeout import Timeout

__all__ = [
    "ObjectReconciler",
    "Reconciler",
]


class Reconciler(Protocol):
    """Interface of a driver converging one aspect of a Plex server."""

    async def reconcile(self, plex: PlexMediaServer) -> bool:
        """Make one convergence step.

        Parameters
        ----------
        plex
            Resource to converge.

        Returns
        -------
        bool
            Whether another pass is needed soon to finish converging.

        Raises
        ------
        KubernetesError
            Raised if a call to the Kubernetes API server failed.
        TimeoutError
            Raised if the pass ran past its request timeout.
        """


class ObjectReconciler(Generic[T], metaclass=ABCMeta):
    """Converge one Kubernetes object on its rendered spec.

    A missing object is created and an object whose spec differs from the
    rendering is replaced. Either way, a requeue is requested so that the
    next pass can confirm the result. A conflict on replace means the object
    changed since it was read, so it is left alone and also requeued.

    Parameters
    ----------
    storage
        Storage for the managed object type.
    request_timeout
        Timeout for the Kubernetes calls of one pass.
    logger
        Logger to use.
    """

    kind: str
    """Description of the managed object for logging."""

    def __init__(
        self,
        *,
        storage: KubernetesObjectDeleter[T],
        request_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        self._storage = storage
        self._request_timeout = request_timeout
        self._logger = logger

    @abstractmethod
    def build(self, plex: PlexMediaServer) -> T:
        """Construct a new object for the given resource."""

    @abstractmethod
    def name(self, plex: PlexMediaServer) -> str:
        """Name of the managed object for the given resource."""

    @abstractmethod
    def render_spec(self, plex: PlexMediaServer, existing: Any) -> Any:
        """Render the desired spec on top of the existing one."""

    async def reconcile(self, plex: PlexMediaServer) -> bool:
        timeout = Timeout(self._request_timeout)
        logger = self._bind_logger(plex)
        namespace = plex.metadata.namespace
        name = self.name(plex)
        existing = await self._storage.read(name, namespace, timeout)
        if not existing:
            logger.info("Creating object")
            await self._storage.create(namespace, self.build(plex), timeout)
            return True
        desired = copy.deepcopy(existing)
        desired.spec = self.render_spec(plex, existing.spec)
        return await self._update(existing, desired, timeout, logger)

    def _bind_logger(self, plex: PlexMediaServer) -> BoundLogger:
        return self._logger.bind(
            kind=self.kind,
            namespace=plex.metadata.namespace,
            name=self.name(plex),
        )

    async def _update(
        self, existing: T, desired: T, timeout: Timeout, logger: BoundLogger
    ) -> bool:
        """Replace the object if its rendered spec differs.

        Parameters
        ----------
        existing
            Object as read from Kubernetes.
        desired
            Copy of the object with the rendered spec.
        timeout
            Timeout on the pass.
        logger
            Logger to use.

        Returns
        -------
        bool
            Whether to requeue.
        """
        if desired.spec == existing.spec:
            return False
        logger.info("Updating object")
        try:
            await self._storage.replace(
                desired.metadata.namespace, desired, timeout
            )
        except KubernetesConflictError:
            logger.info("Conflict on update, requeueing")
        return True
