"""Tests for exception formatting."""

from __future__ import annotations

from kubernetes_asyncio.client import ApiException

from plexoperator.exceptions import KubernetesConflictError, KubernetesError


def test_kubernetes_error() -> None:
    exc = ApiException(status=500, reason="Internal error")
    error = KubernetesError.from_exception(
        "Error creating object",
        exc,
        kind="StatefulSet",
        namespace="plex",
        name="plex",
    )
    assert error.status == 500
    assert str(error) == (
        "Error creating object (StatefulSet plex/plex) (status 500):"
        " Internal error"
    )

    error = KubernetesError.from_exception(
        "Error listing objects", exc, kind="PlexMediaServer", namespace="plex"
    )
    assert str(error) == (
        "Error listing objects (PlexMediaServer in namespace plex)"
        " (status 500): Internal error"
    )

    error = KubernetesError("Error listing objects", kind="PlexMediaServer")
    assert str(error) == "Error listing objects (PlexMediaServer)"


def test_conflict_error() -> None:
    exc = ApiException(status=409, reason="Conflict")
    error = KubernetesConflictError.from_exception(
        "Error replacing object", exc, kind="Service", name="plex"
    )
    assert isinstance(error, KubernetesError)
    assert isinstance(error, KubernetesConflictError)
    assert str(error) == (
        "Error replacing object (Service plex) (status 409): Conflict"
    )
