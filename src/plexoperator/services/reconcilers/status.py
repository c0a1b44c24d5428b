"""Driver for the status of a ``PlexMediaServer``."""

from __future__ import annotations

from datetime import timedelta

from kubernetes_asyncio.client import V1StatefulSet
from structlog.stdlib import BoundLogger

from ...constants import READY_CONDITION
from ...exceptions import KubernetesConflictError
from ...models.domain.kubernetes import ConditionStatus
from ...models.v1.plex import Condition, PlexMediaServer
from ...storage.kubernetes.custom import PlexMediaServerStorage
from ...storage.kubernetes.deleter import StatefulSetStorage
from ...timeout import Timeout

__all__ = ["StatusReconciler"]


class StatusReconciler:
    """Report the readiness of a Plex server in its status.

    The ``Ready`` condition is derived from the ready replicas of the
    ``StatefulSet``. The status is only written if it changed, so a steady
    state causes no writes.

    Parameters
    ----------
    plex_storage
        Storage for ``PlexMediaServer`` objects.
    statefulset_storage
        Storage for ``StatefulSet`` objects.
    request_timeout
        Timeout for the Kubernetes calls of one pass.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        plex_storage: PlexMediaServerStorage,
        statefulset_storage: StatefulSetStorage,
        request_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        self._plex_storage = plex_storage
        self._statefulset_storage = statefulset_storage
        self._request_timeout = request_timeout
        self._logger = logger

    async def reconcile(self, plex: PlexMediaServer) -> bool:
        timeout = Timeout(self._request_timeout)
        name = plex.metadata.name
        namespace = plex.metadata.namespace
        generation = plex.metadata.generation
        logger = self._logger.bind(
            namespace=namespace, name=name, observed_generation=generation
        )

        status = plex.status.model_copy(deep=True)
        status.observed_generation = generation
        statefulset = await self._statefulset_storage.read(
            name, namespace, timeout
        )
        status.set_condition(self._build_condition(statefulset, generation))
        if status == plex.status:
            return False

        updated = plex.model_copy(update={"status": status})
        try:
            await self._plex_storage.replace_status(updated, timeout)
        except KubernetesConflictError:
            logger.info("Conflict updating status, requeueing")
            return True
        logger.info("Updated status")
        return False

    def _build_condition(
        self, statefulset: V1StatefulSet | None, generation: int
    ) -> Condition:
        """Derive the ``Ready`` condition from the ``StatefulSet``."""
        if not statefulset:
            status = ConditionStatus.FALSE
            reason = "NotFound"
            message = "Plex media server deployment not found"
        elif statefulset.status and statefulset.status.ready_replicas:
            status = ConditionStatus.TRUE
            reason = "AsExpected"
            message = "Plex media server has at least 1 ready replica"
        else:
            status = ConditionStatus.FALSE
            reason = "NotReady"
            message = "Plex media server has no ready replicas"
        return Condition(
            type=READY_CONDITION,
            status=status,
            reason=reason,
            message=message,
            observed_generation=generation,
        )
