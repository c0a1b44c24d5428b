"""Generic Kubernetes object storage supporting only create and read.

Provides a generic Kubernetes object management class that wraps the
asynchronous Kubernetes client with logging and exception conversion.

For object types that also need to be replaced or deleted, see
`~plexoperator.storage.kubernetes.deleter.KubernetesObjectDeleter`, which
subclasses `KubernetesObjectCreator` and adds those operations.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from kubernetes_asyncio.client import ApiException
from structlog.stdlib import BoundLogger

from ...exceptions import KubernetesError
from ...models.domain.kubernetes import KubernetesModel
from ...timeout import Timeout

#: Type of Kubernetes object being manipulated.
T = TypeVar("T", bound=KubernetesModel)

__all__ = [
    "KubernetesObjectCreator",
    "T",
]


class KubernetesObjectCreator(Generic[T]):
    """Generic Kubernetes object storage supporting create and read.

    This class provides a wrapper around any Kubernetes object type that
    implements create and read operations with logging and exception
    conversion.

    This class is not meant to be used directly by code outside of the
    Kubernetes storage layer. Use one of the kind-specific storage classes
    built on top of it instead.

    Parameters
    ----------
    create_method
        Method to create this type of object.
    read_method
        Method to read this type of object.
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
        read_method: Callable[..., Awaitable[Any]],
        object_type: type[T],
        kind: str,
        logger: BoundLogger,
    ) -> None:
        self._create = create_method
        self._read = read_method
        self._type = object_type
        self._kind = kind
        self._logger = logger

    async def create(self, namespace: str, body: T, timeout: Timeout) -> None:
        """Create a new Kubernetes object.

        Parameters
        ----------
        namespace
            Namespace of the object.
        body
            New object.
        timeout
            Timeout on operation.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        self._logger.debug(
            "Creating object",
            kind=self._kind,
            name=body.metadata.name,
            namespace=namespace,
        )
        try:
            await self._create(
                namespace, body, _request_timeout=timeout.left()
            )
        except ApiException as e:
            raise KubernetesError.from_exception(
                "Error creating object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=body.metadata.name,
            ) from e

    async def read(
        self, name: str, namespace: str, timeout: Timeout
    ) -> T | None:
        """Read a Kubernetes object.

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
        typing.Any or None
            Kubernetes object, or `None` if it does not exist.

        Raises
        ------
        KubernetesError
            Raised for exceptions from the Kubernetes API server.
        TimeoutError
            Raised if the timeout expired.
        """
        try:
            return await self._read(
                name, namespace, _request_timeout=timeout.left()
            )
        except ApiException as e:
            if e.status == 404:
                return None
            raise KubernetesError.from_exception(
                "Error reading object",
                e,
                kind=self._kind,
                namespace=namespace,
                name=name,
            ) from e
