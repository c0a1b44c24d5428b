"""Construction of metadata shared by all managed objects."""

from __future__ import annotations

from kubernetes_asyncio.client import V1ObjectMeta

from ...constants import INSTANCE_LABEL, MANAGED_BY_LABEL, MANAGER_NAME
from ...models.v1.plex import PlexMediaServer

__all__ = ["build_metadata"]


def build_metadata(plex: PlexMediaServer, name: str) -> V1ObjectMeta:
    """Construct the metadata for an object managed for a Plex server.

    The object is labeled with its instance and manager, and owned by the
    ``PlexMediaServer`` so that it is garbage-collected along with it.

    Parameters
    ----------
    plex
        Owning ``PlexMediaServer``.
    name
        Name of the new object.

    Returns
    -------
    kubernetes_asyncio.client.V1ObjectMeta
        Metadata for the new object.
    """
    return V1ObjectMeta(
        name=name,
        namespace=plex.metadata.namespace,
        labels={
            INSTANCE_LABEL: plex.metadata.name,
            MANAGED_BY_LABEL: MANAGER_NAME,
        },
        owner_references=[plex.owner_reference()],
    )
