"""Tests for rendering the Plex ``StatefulSet``."""

from __future__ import annotations

from kubernetes_asyncio.client import (
    V1Container,
    V1ContainerPort,
    V1EnvVar,
    V1HostPathVolumeSource,
    V1ObjectMeta,
    V1PersistentVolumeClaim,
    V1PersistentVolumeClaimSpec,
    V1PodSpec,
    V1PodTemplateSpec,
    V1Volume,
    V1VolumeMount,
)

from plexoperator.constants import DEFAULT_IMAGE_REPOSITORY, INSTANCE_LABEL
from plexoperator.services.builder.statefulset import StatefulSetBuilder

from ...support.plex import make_plex


def _ports(container: V1Container) -> list[tuple[str, int, str]]:
    return [(p.name, p.container_port, p.protocol) for p in container.ports]


def _plex_container(containers: list[V1Container]) -> V1Container:
    return next(c for c in containers if c.name == "plex")


def test_build() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(
        "media",
        {"claimToken": "claim-X", "networking": {"enableRoku": True}},
    )

    statefulset = builder.build_statefulset(plex)

    assert statefulset.metadata.name == "media"
    assert statefulset.metadata.namespace == "plex"
    assert statefulset.metadata.labels[INSTANCE_LABEL] == "media"
    owner = statefulset.metadata.owner_references[0]
    assert owner.kind == "PlexMediaServer"
    assert owner.name == "media"
    assert owner.uid == "media-uid"
    assert owner.controller

    spec = statefulset.spec
    assert spec.replicas == 1
    assert spec.service_name == "media"
    assert spec.selector.match_labels == {INSTANCE_LABEL: "media"}
    assert spec.template.metadata.labels == {INSTANCE_LABEL: "media"}
    assert spec.volume_claim_templates is None

    container = _plex_container(spec.template.spec.containers)
    assert container.image == "docker.io/plexinc/pms-docker:latest"
    assert container.env == [V1EnvVar(name="PLEX_CLAIM", value="claim-X")]
    assert _ports(container) == [
        ("roku", 8324, "TCP"),
        ("plex", 32400, "TCP"),
    ]
    assert [(m.name, m.mount_path) for m in container.volume_mounts] == [
        ("config", "/config"),
        ("transcode", "/transcode"),
        ("data", "/data"),
    ]
    volumes = spec.template.spec.volumes
    assert [v.name for v in volumes] == ["config", "transcode", "data"]
    assert all(v.empty_dir is not None for v in volumes)


def test_version() -> None:
    builder = StatefulSetBuilder("registry.example.com/plex")
    plex = make_plex(spec={"version": "1.32.5"})

    spec = builder.render_statefulset_spec(plex, None)

    container = _plex_container(spec.template.spec.containers)
    assert container.image == "registry.example.com/plex:1.32.5"


def test_idempotent() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(
        spec={
            "claimToken": "token",
            "networking": {
                "enableDiscovery": True,
                "enableDLNA": True,
                "enableRoku": True,
            },
            "storage": {"data": {"capacity": "100Gi"}},
        }
    )

    first = builder.render_statefulset_spec(plex, None)
    second = builder.render_statefulset_spec(plex, first)

    assert first == second


def test_discovery_and_dlna_ports() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(
        spec={"networking": {"enableDiscovery": True, "enableDLNA": True}}
    )

    spec = builder.render_statefulset_spec(plex, None)

    container = _plex_container(spec.template.spec.containers)
    assert _ports(container) == [
        ("dlna-udp", 1900, "UDP"),
        ("plex", 32400, "TCP"),
        ("discovery-0", 32410, "UDP"),
        ("discovery-1", 32412, "UDP"),
        ("discovery-2", 32413, "UDP"),
        ("discovery-3", 32414, "UDP"),
        ("dlna-tcp", 32469, "TCP"),
    ]


def test_merge_existing() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(spec={"claimToken": "new-token"})
    existing = builder.render_statefulset_spec(plex, None)
    existing.template.metadata.labels["team"] = "media"
    existing.template.metadata.annotations = {"example.com/note": "kept"}
    sidecar = V1Container(name="sidecar", image="busybox")
    container = _plex_container(existing.template.spec.containers)
    container.image = "docker.io/plexinc/pms-docker:old"
    container.env = [
        V1EnvVar(name="TZ", value="America/New_York"),
        V1EnvVar(name="PLEX_CLAIM", value="old-token"),
    ]
    container.ports = [
        V1ContainerPort(name="web", container_port=32400),
        V1ContainerPort(name="metrics", container_port=9090, protocol="TCP"),
        V1ContainerPort(name="roku", container_port=8324, protocol="TCP"),
    ]
    container.volume_mounts.append(
        V1VolumeMount(name="extra", mount_path="/extra")
    )
    existing.template.spec.containers.insert(0, sidecar)
    existing.template.spec.volumes.append(V1Volume(name="extra"))
    original = existing.to_dict()

    spec = builder.render_statefulset_spec(plex, existing)

    assert existing.to_dict() == original
    assert spec.template.metadata.labels == {
        INSTANCE_LABEL: "plex",
        "team": "media",
    }
    assert spec.template.metadata.annotations == {"example.com/note": "kept"}
    containers = spec.template.spec.containers
    assert [c.name for c in containers] == ["sidecar", "plex"]
    assert containers[0] == sidecar
    container = containers[1]
    assert container.image == "docker.io/plexinc/pms-docker:latest"
    assert container.env == [
        V1EnvVar(name="TZ", value="America/New_York"),
        V1EnvVar(name="PLEX_CLAIM", value="new-token"),
    ]
    assert _ports(container) == [
        ("metrics", 9090, "TCP"),
        ("plex", 32400, "TCP"),
    ]
    assert [m.name for m in container.volume_mounts] == [
        "extra",
        "config",
        "transcode",
        "data",
    ]
    volumes = spec.template.spec.volumes
    assert [v.name for v in volumes] == [
        "extra",
        "config",
        "transcode",
        "data",
    ]


def test_unknown_port_collisions() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(spec={"networking": {"enableRoku": True}})
    container = V1Container(
        name="plex",
        ports=[
            V1ContainerPort(name="roku", container_port=9000),
            V1ContainerPort(name="custom", container_port=9001),
            V1ContainerPort(
                name="custom-udp", container_port=9001, protocol="UDP"
            ),
        ],
    )
    existing = builder.render_statefulset_spec(plex, None)
    existing.template.spec.containers = [container]

    spec = builder.render_statefulset_spec(plex, existing)

    container = _plex_container(spec.template.spec.containers)
    assert _ports(container) == [
        ("custom", 9001, None),
        ("custom-udp", 9001, "UDP"),
        ("roku", 8324, "TCP"),
        ("plex", 32400, "TCP"),
    ]
    assert builder.render_statefulset_spec(plex, spec) == spec


def test_missing_pod_spec() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex()
    existing = builder.render_statefulset_spec(plex, None)
    existing.template = V1PodTemplateSpec()

    spec = builder.render_statefulset_spec(plex, existing)

    assert spec.template.metadata.labels == {INSTANCE_LABEL: "plex"}
    assert [c.name for c in spec.template.spec.containers] == ["plex"]


def test_empty_claim_token() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex()

    spec = builder.render_statefulset_spec(plex, None)

    container = _plex_container(spec.template.spec.containers)
    assert container.env == [V1EnvVar(name="PLEX_CLAIM")]


def test_persistent_storage() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(
        spec={
            "storage": {
                "config": {
                    "accessMode": "ReadWriteOnce",
                    "capacity": "5Gi",
                    "storageClassName": "fast",
                },
                "data": {
                    "selector": {"matchLabels": {"media": "movies"}},
                },
            }
        }
    )

    spec = builder.render_statefulset_spec(plex, None)

    volumes = spec.template.spec.volumes
    assert [v.name for v in volumes] == ["transcode"]
    claims = spec.volume_claim_templates
    assert [c.metadata.name for c in claims] == ["config", "data"]
    config = claims[0].spec
    assert config.access_modes == ["ReadWriteOnce"]
    assert config.resources.requests == {"storage": "5Gi"}
    assert config.storage_class_name == "fast"
    assert config.selector is None
    data = claims[1].spec
    assert data.access_modes is None
    assert data.resources is None
    assert data.selector.match_labels == {"media": "movies"}
    container = _plex_container(spec.template.spec.containers)
    assert [m.name for m in container.volume_mounts] == [
        "config",
        "transcode",
        "data",
    ]


def test_claim_template_overlay() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(spec={"storage": {"config": {"capacity": "10Gi"}}})
    existing = builder.render_statefulset_spec(plex, None)
    existing.volume_claim_templates = [
        V1PersistentVolumeClaim(
            metadata=V1ObjectMeta(name="backups"),
            spec=V1PersistentVolumeClaimSpec(storage_class_name="slow"),
        ),
        V1PersistentVolumeClaim(
            metadata=V1ObjectMeta(name="config"),
            spec=V1PersistentVolumeClaimSpec(
                access_modes=["ReadWriteMany"], storage_class_name="nfs"
            ),
        ),
    ]

    spec = builder.render_statefulset_spec(plex, existing)

    claims = spec.volume_claim_templates
    assert [c.metadata.name for c in claims] == ["backups", "config"]
    config = claims[1].spec
    assert config.access_modes == ["ReadWriteMany"]
    assert config.storage_class_name == "nfs"
    assert config.resources.requests == {"storage": "10Gi"}


def test_zero_capacity_ignored() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(spec={"storage": {"transcode": {"capacity": "0"}}})

    spec = builder.render_statefulset_spec(plex, None)

    claims = spec.volume_claim_templates
    assert [c.metadata.name for c in claims] == ["transcode"]
    assert claims[0].spec.resources is None


def test_empty_dir_replaces_other_source() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex()
    existing = builder.render_statefulset_spec(plex, None)
    existing.template.spec = V1PodSpec(
        containers=[],
        volumes=[
            V1Volume(
                name="data", host_path=V1HostPathVolumeSource(path="/srv")
            )
        ],
    )

    spec = builder.render_statefulset_spec(plex, existing)

    data = next(v for v in spec.template.spec.volumes if v.name == "data")
    assert data.host_path is None
    assert data.empty_dir is not None


def test_canonical_capacity() -> None:
    builder = StatefulSetBuilder(DEFAULT_IMAGE_REPOSITORY)
    plex = make_plex(spec={"storage": {"config": {"capacity": "1.5Gi"}}})
    existing = builder.render_statefulset_spec(plex, None)
    claim = existing.volume_claim_templates[0]
    claim.spec.resources.requests["storage"] = "1536Mi"

    spec = builder.render_statefulset_spec(plex, existing)

    claims = spec.volume_claim_templates
    assert claims[0].spec.resources.requests == {"storage": "1536Mi"}
    assert spec.volume_claim_templates == existing.volume_claim_templates

    # A different quantity still replaces the canonical one.
    plex = make_plex(spec={"storage": {"config": {"capacity": "2Gi"}}})
    spec = builder.render_statefulset_spec(plex, spec)
    claims = spec.volume_claim_templates
    assert claims[0].spec.resources.requests == {"storage": "2Gi"}
