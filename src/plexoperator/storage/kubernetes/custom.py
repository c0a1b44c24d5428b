"""Storage layer for ``PlexMediaServer`` custom objects."""

from __future__ import annotations

from kubernetes_asyncio import client
from kubernetes_asyncio.client import ApiClient, ApiException
from structlog.stdlib import BoundLogger

from ...constants import PLEX_GROUP, PLEX_KIND, PLEX_PLURAL, PLEX_VERSION
from ...exceptions import KubernetesConflictError, KubernetesError
from ...models.v1.plex import PlexMediaServer
from ...timeout import Timeout

__all__ = ["PlexMediaServerStorage"]


class PlexMediaServerStorage:
    """Storage layer for ``PlexMediaServer`` custom objects.

    Custom objects come back from the Kubernetes client as plain
    dictionaries. This class parses them into
    `~plexoperator.models.v1.plex.PlexMediaServer` models, and serializes
    those models when writing status.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        self._api = client.CustomObjectsApi(api_client)
        self._logger = logger

    async def list(
        self, namespace: str | None, timeout: Timeout
    ) -> list[PlexMediaServer]:
        """List ``PlexMediaServer`` objects.

        Parameters
        ----------
        namespace
            Namespace to list, or `None` to list across all namespaces.
        timeout
            Timeout on operation.

        Returns
        -------
        list of PlexMediaServer
            Objects found.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        try:
            if namespace:
                objs = await self._api.list_namespaced_custom_object(
                    PLEX_GROUP,
                    PLEX_VERSION,
                    namespace,
                    PLEX_PLURAL,
                    _request_timeout=timeout.left(),
                )
            else:
                objs = await self._api.list_cluster_custom_object(
                    PLEX_GROUP,
                    PLEX_VERSION,
                    PLEX_PLURAL,
                    _request_timeout=timeout.left(),
                )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error listing objects", e, kind=PLEX_KIND, namespace=namespace
            ) from e
        return [PlexMediaServer.from_custom_object(o) for o in objs["items"]]

    async def read(
        self, name: str, namespace: str, timeout: Timeout
    ) -> PlexMediaServer | None:
        """Read a ``PlexMediaServer`` object.

        Parameters
        ----------
        name
            Name of the object.
        namespace
            Namespace of the object.
        timeout
            Timeout on operation.

        Returns
        -------
        PlexMediaServer or None
            Parsed object, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        try:
            obj = await self._api.get_namespaced_custom_object(
                PLEX_GROUP,
                PLEX_VERSION,
                namespace,
                PLEX_PLURAL,
                name,
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise KubernetesError.from_exception(
                "Error reading object",
                e,
                kind=PLEX_KIND,
                namespace=namespace,
                name=name,
            ) from e
        return PlexMediaServer.from_custom_object(obj)

    async def replace_status(
        self, plex: PlexMediaServer, timeout: Timeout
    ) -> PlexMediaServer:
        """Write the status sub-resource of a ``PlexMediaServer``.

        The ``resourceVersion`` of the model is sent along, so the write is
        rejected if the object changed since it was read.

        Parameters
        ----------
        plex
            Object carrying the new status.
        timeout
            Timeout on operation.

        Returns
        -------
        PlexMediaServer
            Object as stored by the API server.

        Raises
        ------
        KubernetesConflictError
            Raised if the object was modified since it was read.
        KubernetesError
            Raised for other exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        name = plex.metadata.name
        namespace = plex.metadata.namespace
        self._logger.debug(
            "Updating status",
            kind=PLEX_KIND,
            name=name,
            namespace=namespace,
            resource_version=plex.metadata.resource_version,
        )
        try:
            obj = await self._api.replace_namespaced_custom_object_status(
                PLEX_GROUP,
                PLEX_VERSION,
                namespace,
                PLEX_PLURAL,
                name,
                plex.to_custom_object(),
                _request_timeout=timeout.left(),
            )
        except ApiException as e:
            if e.status == 409:
                error: type[KubernetesError] = KubernetesConflictError
            else:
                error = KubernetesError
            raise error.from_exception(
                "Error updating status",
                e,
                kind=PLEX_KIND,
                namespace=namespace,
                name=name,
            ) from e
        return PlexMediaServer.from_custom_object(obj)
