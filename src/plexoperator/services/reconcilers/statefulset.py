"""Driver for the ``StatefulSet`` running a Plex server."""

from __future__ import annotations

from datetime import timedelta

from kubernetes_asyncio.client import V1StatefulSet, V1StatefulSetSpec
from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesConflictError
from ...models.domain.kubernetes import PropagationPolicy
from ...models.v1.plex import PlexMediaServer
from ...storage.kubernetes.deleter import StatefulSetStorage
from ...timeout import Timeout
from ..builder.statefulset import StatefulSetBuilder
from .base import ObjectReconciler

__all__ = ["StatefulSetReconciler"]


class StatefulSetReconciler(ObjectReconciler[V1StatefulSet]):
    """Converge the ``StatefulSet`` running a Plex server.

    The volume claim templates of a ``StatefulSet`` are immutable. If they
    differ from the rendering, for instance because a volume was switched
    between ``emptyDir`` and persistent storage, the ``StatefulSet`` is
    deleted instead of replaced and recreated by a later pass. Pods are
    removed in the background, and persistent volume claims created from the
    old templates are kept.

    Parameters
    ----------
    builder
        Builder for ``StatefulSet`` objects.
    storage
        Storage for ``StatefulSet`` objects.
    request_timeout
        Timeout for the Kubernetes calls of one pass.
    logger
        Logger to use.
    """

    kind = "StatefulSet"

    def __init__(
        self,
        *,
        builder: StatefulSetBuilder,
        storage: StatefulSetStorage,
        request_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        super().__init__(
            storage=storage, request_timeout=request_timeout, logger=logger
        )
        self._builder = builder

    def build(self, plex: PlexMediaServer) -> V1StatefulSet:
        return self._builder.build_statefulset(plex)

    def name(self, plex: PlexMediaServer) -> str:
        return plex.metadata.name

    def render_spec(
        self, plex: PlexMediaServer, existing: V1StatefulSetSpec | None
    ) -> V1StatefulSetSpec:
        return self._builder.render_statefulset_spec(plex, existing)

    async def _update(
        self,
        existing: V1StatefulSet,
        desired: V1StatefulSet,
        timeout: Timeout,
        logger: BoundLogger,
    ) -> bool:
        old_claims = existing.spec.volume_claim_templates or []
        new_claims = desired.spec.volume_claim_templates or []
        if old_claims == new_claims:
            return await super()._update(existing, desired, timeout, logger)

        logger.info("Volume claim templates changed, deleting StatefulSet")
        try:
            await self._storage.delete(
                existing.metadata.name,
                existing.metadata.namespace,
                timeout,
                propagation_policy=PropagationPolicy.BACKGROUND,
                resource_version=existing.metadata.resource_version,
            )
        except KubernetesConflictError:
            logger.info("Conflict on delete, requeueing")
        return True
