"""Tests for configuration parsing."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError
from safir.logging import LogLevel, Profile

from plexoperator.config import Config
from plexoperator.constants import (
    DEFAULT_IMAGE_REPOSITORY,
    RECONCILE_INTERVAL,
    REQUEST_TIMEOUT,
    REQUEUE_INTERVAL,
)


def test_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")

    config = Config.from_file(config_path)
    assert config.namespace is None
    assert config.image.repository == DEFAULT_IMAGE_REPOSITORY
    assert config.log_level == LogLevel.INFO
    assert config.profile == Profile.production
    assert config.reconcile_interval == RECONCILE_INTERVAL
    assert config.requeue_interval == REQUEUE_INTERVAL
    assert config.request_timeout == REQUEST_TIMEOUT


def test_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "namespace: media\n"
        "image:\n"
        "  repository: registry.example.com/plex\n"
        "logLevel: DEBUG\n"
        "profile: development\n"
        "reconcileInterval: 10m\n"
        "requeueInterval: 5\n"
        "requestTimeout: 15\n"
    )

    config = Config.from_file(config_path)
    assert config.namespace == "media"
    assert config.image.repository == "registry.example.com/plex"
    assert config.log_level == LogLevel.DEBUG
    assert config.profile == Profile.development
    assert config.reconcile_interval == timedelta(minutes=10)
    assert config.requeue_interval == timedelta(seconds=5)
    assert config.request_timeout == timedelta(seconds=15)


def test_unknown_key(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("namespace: media\nwatchAll: true\n")
    with pytest.raises(ValidationError):
        Config.from_file(config_path)

    config_path.write_text("image:\n  tag: latest\n")
    with pytest.raises(ValidationError):
        Config.from_file(config_path)
