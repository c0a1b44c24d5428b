"""Models for the ``PlexMediaServer`` custom resource."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Self

from kubernetes_asyncio.client import V1OwnerReference
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from safir.datetime import current_datetime

from ...constants import PLEX_GROUP, PLEX_KIND, PLEX_VERSION
from ...units import quantity_to_bytes
from ..domain.kubernetes import (
    ConditionStatus,
    ExternalServiceType,
    LabelSelector,
    VolumeAccessMode,
)
from ..domain.plex import VolumeRole

__all__ = [
    "Condition",
    "ObjectMetadata",
    "PlexMediaServer",
    "PlexMediaServerSpec",
    "PlexMediaServerStatus",
    "PlexNetworkSpec",
    "PlexStorageOptions",
    "PlexStorageSpec",
]


class PlexStorageOptions(BaseModel):
    """Persistent volume claim attributes for one Plex volume.

    The presence of this object for a volume is itself meaningful: it
    switches that volume from a pod-local ``emptyDir`` to a volume provided
    by a claim template. Fields left unset are not applied, so any value
    already present on the claim template is kept.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    access_mode: Annotated[
        VolumeAccessMode | None,
        Field(
            title="Access mode",
            description="Access mode of the persistent volume claim",
            examples=[VolumeAccessMode.READ_WRITE_ONCE],
        ),
    ] = None

    capacity: Annotated[
        str | None,
        Field(
            title="Requested capacity",
            description=(
                "Storage request of the persistent volume claim, as a"
                " Kubernetes quantity. The provided volume may exceed it."
            ),
            examples=["10Gi"],
        ),
    ] = None

    storage_class_name: Annotated[
        str | None,
        Field(
            title="Storage class",
            description="Storage class of the persistent volume claim",
            examples=["standard"],
        ),
    ] = None

    selector: Annotated[
        LabelSelector | None,
        Field(
            title="Volume selector",
            description="Label query over volumes to consider for binding",
        ),
    ] = None

    @field_validator("capacity", mode="before")
    @classmethod
    def _validate_capacity(cls, v: Any) -> str | None:
        if v is None or v == "":
            return None
        v = str(v)
        quantity_to_bytes(v)
        return v

    @property
    def has_capacity(self) -> bool:
        """Whether a non-zero capacity was requested."""
        return bool(self.capacity) and quantity_to_bytes(self.capacity) != 0


class PlexStorageSpec(BaseModel):
    """Storage configuration for the Plex Media Server volumes."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    config: Annotated[
        PlexStorageOptions | None,
        Field(
            title="Configuration volume",
            description="Claim attributes for Plex's configuration database",
        ),
    ] = None

    transcode: Annotated[
        PlexStorageOptions | None,
        Field(
            title="Transcode volume",
            description="Claim attributes for transcoded media files",
        ),
    ] = None

    data: Annotated[
        PlexStorageOptions | None,
        Field(
            title="Data volume",
            description="Claim attributes for user-provided media",
        ),
    ] = None

    def for_role(self, role: VolumeRole) -> PlexStorageOptions | None:
        """Return the storage options for one of the Plex volumes."""
        match role:
            case VolumeRole.CONFIG:
                return self.config
            case VolumeRole.TRANSCODE:
                return self.transcode
            case VolumeRole.DATA:
                return self.data


class PlexNetworkSpec(BaseModel):
    """Network options for the Plex Media Server."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    external_service_type: Annotated[
        ExternalServiceType | None,
        Field(
            title="External service type",
            description=(
                "Type of an additional externally-reachable service. If"
                " unset, only the headless service is created."
            ),
            examples=[ExternalServiceType.LOAD_BALANCER],
        ),
    ] = None

    enable_discovery: Annotated[
        bool,
        Field(
            title="Enable network discovery",
            description="Expose the GDM network discovery ports",
        ),
    ] = False

    enable_dlna: Annotated[
        bool,
        Field(
            title="Enable DLNA",
            description="Expose the DLNA server ports",
            alias="enableDLNA",
        ),
    ] = False

    enable_roku: Annotated[
        bool,
        Field(title="Enable Roku", description="Expose the Roku port"),
    ] = False

    @field_validator("external_service_type", mode="before")
    @classmethod
    def _validate_external_service_type(cls, v: Any) -> Any:
        return None if v == "" else v


class PlexMediaServerSpec(BaseModel):
    """Desired state of a Plex Media Server."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    version: Annotated[
        str,
        Field(
            title="Plex version",
            description="Image tag to deploy, or ``latest`` if empty",
            examples=["1.32.5.7349-8f4248874"],
        ),
    ] = ""

    claim_token: Annotated[
        str,
        Field(
            title="Claim token",
            description="Token used to register the server with Plex",
        ),
    ] = ""

    storage: Annotated[
        PlexStorageSpec,
        Field(title="Storage", description="Backing volume configuration"),
    ] = PlexStorageSpec()

    networking: Annotated[
        PlexNetworkSpec,
        Field(title="Networking", description="Network exposure options"),
    ] = PlexNetworkSpec()

    @property
    def image_tag(self) -> str:
        """Tag of the Plex Media Server image to run."""
        return self.version or "latest"


class Condition(BaseModel):
    """One entry in the condition set of the resource status."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    type: Annotated[str, Field(title="Condition type", examples=["Ready"])]

    status: Annotated[
        ConditionStatus,
        Field(title="Condition status", examples=[ConditionStatus.TRUE]),
    ]

    reason: Annotated[
        str,
        Field(
            title="Reason",
            description="Machine-readable reason for the last transition",
            examples=["AsExpected"],
        ),
    ] = ""

    message: Annotated[
        str,
        Field(title="Message", description="Human-readable details"),
    ] = ""

    observed_generation: Annotated[
        int | None,
        Field(
            title="Observed generation",
            description="Generation of the resource the condition is for",
        ),
    ] = None

    last_transition_time: Annotated[
        datetime | None,
        Field(
            title="Last transition",
            description="When the status of the condition last changed",
        ),
    ] = None


class PlexMediaServerStatus(BaseModel):
    """Observed state of a Plex Media Server."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    observed_generation: Annotated[
        int,
        Field(
            title="Observed generation",
            description="Generation last observed by the operator",
        ),
    ] = 0

    conditions: Annotated[
        list[Condition],
        Field(title="Conditions", description="Conditions keyed by type"),
    ] = []

    def get_condition(self, condition_type: str) -> Condition | None:
        """Find the condition of the given type, if present."""
        for condition in self.conditions:
            if condition.type == condition_type:
                return condition
        return None

    def set_condition(self, condition: Condition) -> None:
        """Add or update a condition.

        The transition time of an existing condition is only changed if its
        status changes. Reason, message, and observed generation are always
        updated. A new condition without a transition time gets the current
        time.

        Parameters
        ----------
        condition
            New state of the condition.
        """
        existing = self.get_condition(condition.type)
        if not existing:
            if not condition.last_transition_time:
                now = current_datetime()
                condition = condition.model_copy(
                    update={"last_transition_time": now}
                )
            self.conditions.append(condition)
            return
        if existing.status != condition.status:
            existing.status = condition.status
            existing.last_transition_time = (
                condition.last_transition_time or current_datetime()
            )
        existing.reason = condition.reason
        existing.message = condition.message
        existing.observed_generation = condition.observed_generation


class ObjectMetadata(BaseModel):
    """The parts of the resource metadata used by the operator."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    name: str
    namespace: str
    uid: str = ""
    generation: int = 0
    resource_version: str | None = None
    deletion_timestamp: datetime | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


class PlexMediaServer(BaseModel):
    """A ``PlexMediaServer`` custom resource."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="ignore", populate_by_name=True
    )

    api_version: str = f"{PLEX_GROUP}/{PLEX_VERSION}"
    kind: str = PLEX_KIND
    metadata: ObjectMetadata
    spec: PlexMediaServerSpec = PlexMediaServerSpec()
    status: PlexMediaServerStatus = PlexMediaServerStatus()

    @classmethod
    def from_custom_object(cls, obj: dict[str, Any]) -> Self:
        """Parse a custom object as returned by the Kubernetes API.

        Parameters
        ----------
        obj
            Custom object.

        Returns
        -------
        PlexMediaServer
            Parsed resource.
        """
        return cls.model_validate(obj)

    def to_custom_object(self) -> dict[str, Any]:
        """Serialize to a custom object body for the Kubernetes API."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def owner_reference(self) -> V1OwnerReference:
        """Owner reference marking an object as managed by this resource.

        Objects carrying this reference are deleted by the Kubernetes garbage
        collector when the resource is deleted.
        """
        return V1OwnerReference(
            api_version=self.api_version,
            kind=self.kind,
            name=self.metadata.name,
            uid=self.metadata.uid,
            controller=True,
            block_owner_deletion=True,
        )
