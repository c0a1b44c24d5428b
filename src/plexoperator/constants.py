"""Global constants."""

from datetime import timedelta
from pathlib import Path

__all__ = [
    "CLAIM_TOKEN_ENV",
    "CONFIGURATION_PATH",
    "CONFIGURATION_PATH_ENV_VAR",
    "DEFAULT_IMAGE_REPOSITORY",
    "EXTERNAL_SERVICE_SUFFIX",
    "INSTANCE_LABEL",
    "MANAGED_BY_LABEL",
    "MANAGER_NAME",
    "PLEX_CONTAINER_NAME",
    "PLEX_GROUP",
    "PLEX_KIND",
    "PLEX_PLURAL",
    "PLEX_VERSION",
    "READY_CONDITION",
    "RECONCILE_INTERVAL",
    "REQUEST_TIMEOUT",
    "REQUEUE_INTERVAL",
    "ROOT_LOGGER",
]

CLAIM_TOKEN_ENV = "PLEX_CLAIM"
"""Environment variable through which the claim token reaches the server."""

CONFIGURATION_PATH = Path("/etc/plex-operator/config.yaml")
"""Default path to operator configuration."""

CONFIGURATION_PATH_ENV_VAR = "PLEX_OPERATOR_CONFIG_PATH"
"""Environment variable overriding the path to operator configuration."""

DEFAULT_IMAGE_REPOSITORY = "docker.io/plexinc/pms-docker"
"""Docker repository of the Plex Media Server image.

The image tag is taken from the version in the ``PlexMediaServer`` spec.
"""

EXTERNAL_SERVICE_SUFFIX = "-ext"
"""Suffix appended to the resource name to form the external service name."""

INSTANCE_LABEL = "plex.adambkaplan.com/instance"
"""Label tying pods and services to their ``PlexMediaServer``."""

MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"
"""Standard label recording which controller manages an object."""

MANAGER_NAME = "plex-operator"
"""Value of `MANAGED_BY_LABEL` on every object we create."""

PLEX_CONTAINER_NAME = "plex"
"""Name of the Plex Media Server container in the pod template."""

PLEX_GROUP = "plex.adambkaplan.com"
"""API group of the ``PlexMediaServer`` custom resource."""

PLEX_KIND = "PlexMediaServer"
"""Kind of the custom resource."""

PLEX_PLURAL = "plexmediaservers"
"""API plural of the custom resource."""

PLEX_VERSION = "v1alpha1"
"""API version of the custom resource."""

READY_CONDITION = "Ready"
"""Type of the status condition reporting readiness."""

RECONCILE_INTERVAL = timedelta(minutes=5)
"""How frequently to reconcile every resource when nothing is pending."""

REQUEST_TIMEOUT = timedelta(seconds=30)
"""Overall timeout for the Kubernetes calls of one driver pass."""

REQUEUE_INTERVAL = timedelta(seconds=10)
"""Delay before the next pass when a pass asked for a requeue.

Conflicts and newly-created objects are retried on this schedule rather than
immediately, so that a persistent conflict does not turn into a hot loop.
"""

ROOT_LOGGER = "plexoperator"
"""Name of the root logger of the operator."""
