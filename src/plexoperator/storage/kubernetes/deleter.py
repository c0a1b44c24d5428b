"""Generic Kubernetes object storage including replace and delete.

Provides a generic Kubernetes object management class and instantiations of
that class for the Kubernetes object types that the operator converges: the
``StatefulSet`` running Plex and the ``Service`` objects in front of it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Generic

from kubernetes_asyncio import client
from kubernetes_asyncio.client import (
    ApiClient,
    ApiException,
    V1DeleteOptions,
    V1Preconditions,
    V1Service,
    V1StatefulSet,
)
from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesConflictError, KubernetesError
from ...models.domain.kubernetes import PropagationPolicy
from ...timeout import Timeout
from .creator import KubernetesObjectCreator, T

__all__ = [
    "KubernetesObjectDeleter",
    "ServiceStorage",
    "StatefulSetStorage",
]


class KubernetesObjectDeleter(KubernetesObjectCreator, Generic[T]):
    """Generic Kubernetes object storage supporting replace and delete.

    Both replace and delete are guarded against concurrent modification.
    Replace sends the ``resourceVersion`` of the object as read, and delete
    may be given a ``resourceVersion`` precondition. If the object changed in
    the meantime, `~plexoperator.exceptions.KubernetesConflictError` is
    raised instead of the generic
    `~plexoperator.exceptions.KubernetesError`.

    Parameters
    ----------
    create_method
        Method to create this type of object.
    delete_method
        Method to delete this type of object.
    read_method
        Method to read this type of object.
    replace_method
        Method to replace this type of object.
    object_type
        Type of object being acted on.
    kind
        Kubernetes kind of object being acted on.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        create_method: Callable[..., Awaitable[Any]],
        delete_method: Callable[..., Awaitable[Any]],
        read_method: Callable[..., Awaitable[Any]],
        replace_method: Callable[..., Awaitable[Any]],
        object_type: type[T],
        kind: str,
        logger: BoundLogger,
    ) -> None:
        super().__init__(
            create_method=create_method,
            read_method=read_method,
            object_type=object_type,
            kind=kind,
            logger=logger,
        )
        self._delete = delete_method
        self._replace = replace_method

    async def delete(
        self,
        name: str,
        namespace: str,
        timeout: Timeout,
        *,
        propagation_policy: PropagationPolicy | None = None,
        resource_version: str | None = None,
    ) -> None:
        """Delete a Kubernetes object.

        If the object does not exist, this is silently treated as success.
        The deletion is not waited for.

        Parameters
        ----------
        name
            Name of the object.
        namespace
            Namespace of the object.
        timeout
            Timeout on operation.
        propagation_policy
            Propagation policy for the object deletion.
        resource_version
            If given, only delete the object if it still has this resource
            version.

        Raises
        ------
        KubernetesConflictError
            Raised if the object no longer has the given resource version.
        KubernetesError
            Raised for other exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        extra_args: dict[str, str | float] = {
            "_request_timeout": timeout.left()
        }
        if propagation_policy:
            extra_args["propagation_policy"] = propagation_policy.value
        body = None
        if resource_version:
            preconditions = V1Preconditions(resource_version=resource_version)
            body = V1DeleteOptions(preconditions=preconditions)
        self._logger.debug(
            "Deleting object",
            kind=self._kind,
            name=name,
            namespace=namespace,
            options=extra_args,
        )
        try:
            await self._delete(name, namespace, body=body, **extra_args)
        except ApiException as e:
            if e.status == 404:
                return
            if e.status == 409:
                error: type[KubernetesError] = KubernetesConflictError
            else:
                error = KubernetesError
            raise error.from_exception(
                "Error deleting object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e

    async def replace(self, namespace: str, body: T, timeout: Timeout) -> None:
        """Replace an existing Kubernetes object.

        The body must carry the ``resourceVersion`` of the object it was
        derived from.

        Parameters
        ----------
        namespace
            Namespace of the object.
        body
            Updated object.
        timeout
            Timeout on operation.

        Raises
        ------
        KubernetesConflictError
            Raised if the object was modified since it was read.
        KubernetesError
            Raised for other exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        name = body.metadata.name
        self._logger.debug(
            "Updating object",
            kind=self._kind,
            name=name,
            namespace=namespace,
            resource_version=body.metadata.resource_version,
        )
        try:
            await self._replace(
                name, namespace, body, _request_timeout=timeout.left()
            )
        except ApiException as e:
            if e.status == 409:
                error: type[KubernetesError] = KubernetesConflictError
            else:
                error = KubernetesError
            raise error.from_exception(
                "Error updating object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e


class ServiceStorage(KubernetesObjectDeleter[V1Service]):
    """Storage layer for ``Service`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        api = client.CoreV1Api(api_client)
        super().__init__(
            create_method=api.create_namespaced_service,
            delete_method=api.delete_namespaced_service,
            read_method=api.read_namespaced_service,
            replace_method=api.replace_namespaced_service,
            object_type=V1Service,
            kind="Service",
            logger=logger,
        )


class StatefulSetStorage(KubernetesObjectDeleter[V1StatefulSet]):
    """Storage layer for ``StatefulSet`` objects.

    Parameters
    ----------
    api_client
        Kubernetes API client.
    logger
        Logger to use.
    """

    def __init__(self, api_client: ApiClient, logger: BoundLogger) -> None:
        api = client.AppsV1Api(api_client)
        super().__init__(
            create_method=api.create_namespaced_stateful_set,
            delete_method=api.delete_namespaced_stateful_set,
            read_method=api.read_namespaced_stateful_set,
            replace_method=api.replace_namespaced_stateful_set,
            object_type=V1StatefulSet,
            kind="StatefulSet",
            logger=logger,
        )
