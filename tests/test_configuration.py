"""Mini README: Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stationclock.configuration import StationClockSettings


def test_defaults_and_directory_creation(tmp_path):
    settings = StationClockSettings(data_directory=tmp_path / "ledgers")
    assert settings.data_directory.is_dir()
    assert settings.venue == "billiard"
    assert settings.zone.key == "Africa/Tunis"
    assert settings.refresh_interval_seconds == pytest.approx(1.0)


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STATIONCLOCK_VENUE", " Game-Room ")
    monkeypatch.setenv("STATIONCLOCK_STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("STATIONCLOCK_DATA_DIRECTORY", str(tmp_path))
    settings = StationClockSettings()
    assert settings.venue == "game-room"
    assert settings.storage_backend == "memory"


@pytest.mark.parametrize(
    "overrides",
    [
        {"timezone": "Mars/Olympus"},
        {"storage_backend": "s3"},
        {"refresh_interval_seconds": 0},
        {"interface_port": 70000},
    ],
)
def test_invalid_settings_are_rejected(tmp_path, overrides):
    with pytest.raises(ValidationError):
        StationClockSettings(data_directory=tmp_path, **overrides)
