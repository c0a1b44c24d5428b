"""Data types for interacting with Kubernetes."""

from __future__ import annotations

from enum import Enum, StrEnum
from typing import Annotated, Any, Protocol, Self

from kubernetes_asyncio.client import (
    V1LabelSelector,
    V1LabelSelectorRequirement,
    V1ObjectMeta,
)
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "ConditionStatus",
    "ExternalServiceType",
    "KubernetesModel",
    "LabelSelector",
    "LabelSelectorOperator",
    "LabelSelectorRequirement",
    "PortProtocol",
    "PropagationPolicy",
    "VolumeAccessMode",
]


class KubernetesModel(Protocol):
    """Protocol for Kubernetes object models.

    The kubernetes_ client models aren't typed, so this tells mypy that all
    the object models we deal with have a metadata attribute and can be
    serialized.
    """

    metadata: V1ObjectMeta

    def to_dict(self) -> dict[str, Any]: ...


class ConditionStatus(StrEnum):
    """Possible values of the ``status`` field of a status condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ExternalServiceType(StrEnum):
    """Kinds of externally-reachable ``Service`` we can create."""

    NODE_PORT = "NodePort"
    LOAD_BALANCER = "LoadBalancer"


class LabelSelectorOperator(Enum):
    """Match operations for label selectors."""

    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


class LabelSelectorRequirement(BaseModel):
    """Single rule for label matching."""

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    key: Annotated[str, Field(title="Key", description="Label key to match")]

    operator: Annotated[
        LabelSelectorOperator,
        Field(title="Operator", description="Label match operator"),
    ]

    values: Annotated[
        list[str],
        Field(
            title="Matching values",
            description=(
                "For ``In`` and ``NotIn``, matches any value in this list. For"
                " ``Exists`` or ``DoesNotExist``, must be empty."
            ),
        ),
    ] = []

    @model_validator(mode="after")
    def _validate(self) -> Self:
        match self.operator:
            case LabelSelectorOperator.IN | LabelSelectorOperator.NOT_IN:
                if len(self.values) < 1:
                    raise ValueError("In and NotIn require a list of values")
            case (
                LabelSelectorOperator.EXISTS
                | LabelSelectorOperator.DOES_NOT_EXIST
            ):
                if self.values:
                    raise ValueError("Exists or DoesNotExist take no values")
        return self

    def to_kubernetes(self) -> V1LabelSelectorRequirement:
        """Convert to the corresponding Kubernetes model."""
        return V1LabelSelectorRequirement(
            key=self.key,
            operator=self.operator.value,
            values=self.values or None,
        )


class LabelSelector(BaseModel):
    """Rule for matching labels, here used to pick persistent volumes.

    All provided expressions must match. (In other words, they are combined
    with and.)
    """

    model_config = ConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )

    match_expressions: Annotated[
        list[LabelSelectorRequirement],
        Field(
            title="Label match expressions",
            description="Rules for matching labels",
        ),
    ] = []

    match_labels: Annotated[
        dict[str, str],
        Field(
            title="Exact label matches",
            description="Label keys and values that must be set",
        ),
    ] = {}

    def to_kubernetes(self) -> V1LabelSelector:
        """Convert to the corresponding Kubernetes model."""
        match_expressions = [e.to_kubernetes() for e in self.match_expressions]
        return V1LabelSelector(
            match_expressions=match_expressions or None,
            match_labels=self.match_labels or None,
        )


class PortProtocol(StrEnum):
    """Network protocol of a container or service port."""

    TCP = "TCP"
    UDP = "UDP"


class PropagationPolicy(Enum):
    """Possible values for the ``propagationPolicy`` parameter to delete."""

    FOREGROUND = "Foreground"
    BACKGROUND = "Background"
    ORPHAN = "Orphan"


class VolumeAccessMode(StrEnum):
    """Access mode for a persistent volume claim."""

    READ_WRITE_ONCE = "ReadWriteOnce"
    READ_ONLY_MANY = "ReadOnlyMany"
    READ_WRITE_MANY = "ReadWriteMany"
    READ_WRITE_ONCE_POD = "ReadWriteOncePod"
