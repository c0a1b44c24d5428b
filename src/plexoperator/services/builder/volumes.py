"""Construction of Kubernetes objects for the Plex volumes."""

from __future__ import annotations

from kubernetes_asyncio.client import (
    V1EmptyDirVolumeSource,
    V1ObjectMeta,
    V1PersistentVolumeClaim,
    V1PersistentVolumeClaimSpec,
    V1Volume,
    V1VolumeMount,
    V1VolumeResourceRequirements,
)

from ...models.domain.plex import VolumeRole
from ...models.v1.plex import PlexStorageOptions, PlexStorageSpec
from ...units import quantity_to_bytes

__all__ = ["VolumeBuilder"]

_ROLE_NAMES = {r.value for r in VolumeRole}


class VolumeBuilder:
    """Construct the volumes, mounts, and claim templates for Plex.

    Each of the Plex volumes (see
    `~plexoperator.models.domain.plex.VolumeRole`) is backed either by an
    ``emptyDir`` pod volume or, if storage options are given for it, by a
    volume claim template of the same name. All methods
    take the corresponding list from the existing ``StatefulSet`` and return
    a merged list in which entries for the Plex volumes follow every other
    entry in their existing order. Existing objects are modified in place,
    so callers should pass a copy.
    """

    def build_mounts(
        self, existing: list[V1VolumeMount] | None
    ) -> list[V1VolumeMount]:
        """Construct the volume mounts of the Plex container.

        Parameters
        ----------
        existing
            Current volume mounts of the container, if any.

        Returns
        -------
        list of kubernetes_asyncio.client.V1VolumeMount
            Merged volume mounts.
        """
        mounts = []
        found: dict[str, V1VolumeMount] = {}
        for mount in existing or []:
            if mount.name in _ROLE_NAMES:
                found[mount.name] = mount
            else:
                mounts.append(mount)
        for role in VolumeRole:
            mount = found.get(role.value)
            if mount:
                mount.mount_path = role.mount_path
            else:
                mount = V1VolumeMount(
                    name=role.value, mount_path=role.mount_path
                )
            mounts.append(mount)
        return mounts

    def build_volumes(
        self, storage: PlexStorageSpec, existing: list[V1Volume] | None
    ) -> list[V1Volume]:
        """Construct the pod volumes.

        A Plex volume gets an ``emptyDir`` pod volume if and only if no
        storage options are given for it. Any ``emptyDir`` settings on an
        existing volume are kept, but any other volume source is dropped.

        Parameters
        ----------
        storage
            Storage configuration of the ``PlexMediaServer``.
        existing
            Current pod volumes, if any.

        Returns
        -------
        list of kubernetes_asyncio.client.V1Volume
            Merged pod volumes.
        """
        volumes = []
        found: dict[str, V1Volume] = {}
        for volume in existing or []:
            if volume.name in _ROLE_NAMES:
                found[volume.name] = volume
            else:
                volumes.append(volume)
        for role in VolumeRole:
            if storage.for_role(role):
                continue
            empty_dir = None
            if role.value in found:
                empty_dir = found[role.value].empty_dir
            empty_dir = empty_dir or V1EmptyDirVolumeSource()
            volumes.append(V1Volume(name=role.value, empty_dir=empty_dir))
        return volumes

    def build_claim_templates(
        self,
        storage: PlexStorageSpec,
        existing: list[V1PersistentVolumeClaim] | None,
    ) -> list[V1PersistentVolumeClaim] | None:
        """Construct the volume claim templates.

        Parameters
        ----------
        storage
            Storage configuration of the ``PlexMediaServer``.
        existing
            Current volume claim templates, if any.

        Returns
        -------
        list of kubernetes_asyncio.client.V1PersistentVolumeClaim or None
            Merged claim templates, or `None` if there are none.
        """
        claims = []
        found: dict[str, V1PersistentVolumeClaim] = {}
        for claim in existing or []:
            name = claim.metadata.name if claim.metadata else None
            if name in _ROLE_NAMES:
                found[name] = claim
            else:
                claims.append(claim)
        for role in VolumeRole:
            options = storage.for_role(role)
            if not options:
                continue
            claim = found.get(role.value)
            if not claim:
                claim = V1PersistentVolumeClaim(
                    metadata=V1ObjectMeta(name=role.value)
                )
            claims.append(self._build_claim(claim, options))
        return claims or None

    def _build_claim(
        self, claim: V1PersistentVolumeClaim, options: PlexStorageOptions
    ) -> V1PersistentVolumeClaim:
        """Overlay the storage options on a claim template.

        Options that are not set leave the existing value alone.
        """
        if not claim.spec:
            claim.spec = V1PersistentVolumeClaimSpec()
        spec = claim.spec
        if options.access_mode:
            spec.access_modes = [options.access_mode.value]
        if options.capacity and options.has_capacity:
            if not spec.resources:
                spec.resources = V1VolumeResourceRequirements()
            if not spec.resources.requests:
                spec.resources.requests = {}
            current = spec.resources.requests.get("storage")
            if not _same_quantity(current, options.capacity):
                spec.resources.requests["storage"] = options.capacity
        if options.storage_class_name is not None:
            spec.storage_class_name = options.storage_class_name
        if options.selector:
            spec.selector = options.selector.to_kubernetes()
        return claim


def _same_quantity(current: str | None, desired: str) -> bool:
    """Whether an existing quantity is equal to the desired one.

    The API server stores quantities in a canonical form, so ``1.5Gi`` is
    read back as ``1536Mi``. Comparing the strings would report a change on
    every pass.
    """
    if current is None:
        return False
    try:
        return quantity_to_bytes(str(current)) == quantity_to_bytes(desired)
    except ValueError:
        return False
