"""Helpers for creating ``PlexMediaServer`` objects in tests."""

from __future__ import annotations

from typing import Any

from plexoperator.constants import (
    PLEX_GROUP,
    PLEX_KIND,
    PLEX_PLURAL,
    PLEX_VERSION,
)
from plexoperator.models.v1.plex import PlexMediaServer

from .kubernetes import MockPlexKubernetesApi

__all__ = [
    "TEST_NAMESPACE",
    "create_plex",
    "make_plex",
    "read_plex",
    "update_plex_spec",
]

TEST_NAMESPACE = "plex"
"""Namespace in which test objects are created."""


def make_plex(
    name: str = "plex",
    spec: dict[str, Any] | None = None,
    *,
    namespace: str = TEST_NAMESPACE,
    generation: int = 1,
) -> PlexMediaServer:
    """Construct a ``PlexMediaServer`` without storing it.

    Parameters
    ----------
    name
        Name of the object.
    spec
        Spec in its serialized form, with camel-case keys.
    namespace
        Namespace of the object.
    generation
        Generation of the object.
    """
    return PlexMediaServer.from_custom_object(
        {
            "apiVersion": f"{PLEX_GROUP}/{PLEX_VERSION}",
            "kind": PLEX_KIND,
            "metadata": {
                "name": name,
                "namespace": namespace,
                "uid": f"{name}-uid",
                "generation": generation,
                "resourceVersion": "1",
            },
            "spec": spec or {},
        }
    )


async def create_plex(
    mock_kubernetes: MockPlexKubernetesApi,
    name: str = "plex",
    spec: dict[str, Any] | None = None,
    *,
    namespace: str = TEST_NAMESPACE,
) -> PlexMediaServer:
    """Store a new ``PlexMediaServer`` in the mock and return it as stored.

    Parameters
    ----------
    mock_kubernetes
        Mock Kubernetes API.
    name
        Name of the object.
    spec
        Spec in its serialized form, with camel-case keys.
    namespace
        Namespace of the object.
    """
    body = {
        "apiVersion": f"{PLEX_GROUP}/{PLEX_VERSION}",
        "kind": PLEX_KIND,
        "metadata": {"name": name},
        "spec": spec or {},
    }
    obj = await mock_kubernetes.create_namespaced_custom_object(
        PLEX_GROUP, PLEX_VERSION, namespace, PLEX_PLURAL, body
    )
    return PlexMediaServer.from_custom_object(obj)


async def read_plex(
    mock_kubernetes: MockPlexKubernetesApi,
    name: str = "plex",
    *,
    namespace: str = TEST_NAMESPACE,
) -> PlexMediaServer:
    """Read the current state of a ``PlexMediaServer`` from the mock."""
    obj = await mock_kubernetes.get_namespaced_custom_object(
        PLEX_GROUP, PLEX_VERSION, namespace, PLEX_PLURAL, name
    )
    return PlexMediaServer.from_custom_object(obj)


async def update_plex_spec(
    mock_kubernetes: MockPlexKubernetesApi,
    plex: PlexMediaServer,
    spec: dict[str, Any],
) -> PlexMediaServer:
    """Change the spec of a stored ``PlexMediaServer``.

    Parameters
    ----------
    mock_kubernetes
        Mock Kubernetes API.
    plex
        Object to change, as last read.
    spec
        New spec in its serialized form, with camel-case keys.

    Returns
    -------
    PlexMediaServer
        Object as stored after the change.
    """
    body = plex.to_custom_object()
    body["spec"] = spec
    obj = await mock_kubernetes.replace_namespaced_custom_object(
        PLEX_GROUP,
        PLEX_VERSION,
        plex.metadata.namespace,
        PLEX_PLURAL,
        plex.metadata.name,
        body,
    )
    return PlexMediaServer.from_custom_object(obj)
