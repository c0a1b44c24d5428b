"""Exceptions for the Plex operator."""

from __future__ import annotations

from typing import Self

from kubernetes_asyncio.client import ApiException

__all__ = [
    "KubernetesConflictError",
    "KubernetesError",
]


class KubernetesError(Exception):
    """An API call to Kubernetes failed.

    Parameters
    ----------
    message
        Summary of error.
    namespace
        Namespace of object being acted on.
    name
        Name of object being acted on.
    kind
        Kind of object being acted on.
    status
        Status code of failure, if any.
    body
        Body of failure message, if any.
    """

    @classmethod
    def from_exception(
        cls,
        message: str,
        exc: ApiException,
        *,
        kind: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
    ) -> Self:
        """Create an exception from a Kubernetes API exception.

        Parameters
        ----------
        message
            Brief explanation of what was being attempted.
        exc
            Kubernetes API exception.
        kind
            Kind of object being acted on.
        namespace
            Namespace of object being acted on.
        name
            Name of object being acted on.

        Returns
        -------
        KubernetesError
            Newly-created exception.
        """
        return cls(
            message,
            kind=kind,
            namespace=namespace,
            name=name,
            status=exc.status,
            body=exc.body if exc.body else exc.reason,
        )

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        namespace: str | None = None,
        name: str | None = None,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.namespace = namespace
        self.name = name
        self.status = status
        self.body = body

    def __str__(self) -> str:
        result = self._summary()
        if self.body:
            result += f": {self.body}"
        return result

    def _summary(self) -> str:
        """Summarize the exception without the body."""
        result = self.message
        if self.name:
            obj = self.name
            if self.namespace:
                obj = f"{self.namespace}/{self.name}"
            if self.kind:
                obj = f"{self.kind} {obj}"
            result += f" ({obj})"
        elif self.kind:
            if self.namespace:
                result += f" ({self.kind} in namespace {self.namespace})"
            else:
                result += f" ({self.kind})"
        if self.status:
            result += f" (status {self.status})"
        return result


class KubernetesConflictError(KubernetesError):
    """A write to Kubernetes was rejected because of a version conflict.

    Raised when the ``resourceVersion`` (or a delete precondition) sent with
    a write no longer matches the object in the API server, meaning someone
    else modified it since it was read. Callers are expected to give up on
    the current pass and try again later against fresh state.
    """
