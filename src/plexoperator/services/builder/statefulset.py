"""Construction of the ``StatefulSet`` running Plex."""

from __future__ import annotations

import copy

from kubernetes_asyncio.client import (
    V1Container,
    V1EnvVar,
    V1LabelSelector,
    V1ObjectMeta,
    V1PodSpec,
    V1PodTemplateSpec,
    V1StatefulSet,
    V1StatefulSetSpec,
)

from ...constants import CLAIM_TOKEN_ENV, INSTANCE_LABEL, PLEX_CONTAINER_NAME
from ...models.v1.plex import PlexMediaServer
from .metadata import build_metadata
from .ports import enabled_ports, merge_container_ports
from .volumes import VolumeBuilder

__all__ = ["StatefulSetBuilder"]


class StatefulSetBuilder:
    """Construct the ``StatefulSet`` for a ``PlexMediaServer``.

    Rendering is always done on top of an existing spec, which may be empty.
    Fields the operator does not manage, including defaults filled in by the
    API server, are carried through unchanged, so rendering the result of a
    previous rendering gives an equal spec.

    Parameters
    ----------
    image_repository
        Docker repository of the Plex Media Server image.
    """

    def __init__(self, image_repository: str) -> None:
        self._image_repository = image_repository
        self._volume_builder = VolumeBuilder()

    def build_statefulset(self, plex: PlexMediaServer) -> V1StatefulSet:
        """Construct a new ``StatefulSet``.

        Parameters
        ----------
        plex
            Owning ``PlexMediaServer``.

        Returns
        -------
        kubernetes_asyncio.client.V1StatefulSet
            New object, ready to be created.
        """
        return V1StatefulSet(
            api_version="apps/v1",
            kind="StatefulSet",
            metadata=build_metadata(plex, plex.metadata.name),
            spec=self.render_statefulset_spec(plex, None),
        )

    def render_statefulset_spec(
        self, plex: PlexMediaServer, existing: V1StatefulSetSpec | None
    ) -> V1StatefulSetSpec:
        """Render the desired spec on top of an existing one.

        The existing spec is not modified.

        Parameters
        ----------
        plex
            Owning ``PlexMediaServer``.
        existing
            Spec of the existing ``StatefulSet``, or `None` to render from
            scratch.

        Returns
        -------
        kubernetes_asyncio.client.V1StatefulSetSpec
            Desired spec.
        """
        name = plex.metadata.name
        selector = V1LabelSelector(match_labels={INSTANCE_LABEL: name})
        if existing:
            spec = copy.deepcopy(existing)
        else:
            template = V1PodTemplateSpec()
            spec = V1StatefulSetSpec(
                selector=selector, service_name=name, template=template
            )
        spec.replicas = 1
        spec.service_name = name
        spec.selector = selector

        template = spec.template
        if not template.metadata:
            template.metadata = V1ObjectMeta()
        labels = template.metadata.labels or {}
        template.metadata.labels = {**labels, INSTANCE_LABEL: name}
        if not template.spec:
            template.spec = V1PodSpec(containers=[])
        pod = template.spec
        pod.containers = self._build_containers(plex, pod.containers)
        pod.volumes = self._volume_builder.build_volumes(
            plex.spec.storage, pod.volumes
        )

        spec.volume_claim_templates = (
            self._volume_builder.build_claim_templates(
                plex.spec.storage, spec.volume_claim_templates
            )
        )
        return spec

    def _build_containers(
        self, plex: PlexMediaServer, existing: list[V1Container] | None
    ) -> list[V1Container]:
        """Render the Plex container, passing through any others."""
        containers = []
        plex_container = None
        for container in existing or []:
            if container.name == PLEX_CONTAINER_NAME:
                plex_container = container
            else:
                containers.append(container)
        if not plex_container:
            plex_container = V1Container(name=PLEX_CONTAINER_NAME)

        image = f"{self._image_repository}:{plex.spec.image_tag}"
        plex_container.image = image
        plex_container.env = self._build_env(
            plex.spec.claim_token, plex_container.env
        )
        plex_container.ports = merge_container_ports(
            plex_container.ports, enabled_ports(plex.spec.networking)
        )
        plex_container.volume_mounts = self._volume_builder.build_mounts(
            plex_container.volume_mounts
        )
        containers.append(plex_container)
        return containers

    def _build_env(
        self, claim_token: str, existing: list[V1EnvVar] | None
    ) -> list[V1EnvVar]:
        """Set the claim token, passing through other environment variables.

        An empty token is stored as an unset value, which is how the API
        server returns it.
        """
        env = existing or []
        for variable in env:
            if variable.name == CLAIM_TOKEN_ENV:
                variable.value = claim_token or None
                variable.value_from = None
                return env
        env.append(V1EnvVar(name=CLAIM_TOKEN_ENV, value=claim_token or None))
        return env
