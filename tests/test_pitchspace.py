"""Command line entrypoint tests (no Qt window, no audio device)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import pitchspace
from audio_input import InputDevice
from audio_models import AudioUnavailable
from high_score_store import JsonHighScoreStore, MemoryHighScoreStore


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "pitchspace_config.json"
    path.write_text(json.dumps({"storage": {"high_score_path": str(tmp_path / "hs.json")}}), encoding="utf-8")
    return path


def test_run_tests_flag(capsys: pytest.CaptureFixture[str]) -> None:
    assert pitchspace.main(["pitchspace", "--run-tests"]) == 0
    output = capsys.readouterr().out
    assert "pitch_estimator.py: ok" in output
    assert "collision.py: ok" in output


def test_list_devices(monkeypatch, capsys, config_file: Path) -> None:
    devices = [
        InputDevice(index=0, name="Built-in Mic", input_channels=1, sample_rate=48000.0, is_default=True),
        InputDevice(index=3, name="USB Interface", input_channels=2, sample_rate=44100.0, is_default=False),
    ]
    monkeypatch.setattr(pitchspace, "query_input_devices", lambda: devices)

    assert pitchspace.main(["pitchspace", "--config", str(config_file), "--list-devices"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "* [0] Built-in Mic (1 ch, 48000 Hz)",
        "  [3] USB Interface (2 ch, 44100 Hz)",
    ]


def test_list_devices_without_backend(monkeypatch, capsys, config_file: Path) -> None:
    def unavailable():
        raise AudioUnavailable("Audio backend is not available")

    monkeypatch.setattr(pitchspace, "query_input_devices", unavailable)
    assert pitchspace.main(["pitchspace", "--config", str(config_file), "--list-devices"]) == 2
    assert "not available" in capsys.readouterr().out


def test_high_score_store_selection(config_file: Path, tmp_path: Path) -> None:
    config, _ = pitchspace.load_config(config_file)
    assert isinstance(pitchspace._build_high_score_store(config, in_memory=True), MemoryHighScoreStore)
    store = pitchspace._build_high_score_store(config, in_memory=False)
    assert isinstance(store, JsonHighScoreStore)
    assert store.file_path == tmp_path / "hs.json"


def test_argument_parser_flags() -> None:
    parsed = pitchspace.build_argument_parser().parse_args(["--fullscreen", "--no-save", "--log-level", "DEBUG"])
    assert parsed.fullscreen and parsed.no_save
    assert parsed.log_level == "DEBUG"
    assert parsed.config is None


def test_error_reporting_disabled_without_dsn(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(pitchspace.sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    config = pitchspace.AppConfig()
    assert pitchspace.configure_error_reporting(config) is False
    assert calls == []


def test_error_reporting_initialises_sentry_with_dsn(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(pitchspace.sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    config = pitchspace.AppConfig.model_validate(
        {"sentry": {"dsn": " https://key@example.invalid/1 ", "environment": "test"}}
    )
    assert pitchspace.configure_error_reporting(config) is True
    assert calls == [
        {"dsn": "https://key@example.invalid/1", "environment": "test", "traces_sample_rate": 0.0}
    ]
