from __future__ import annotations

import json
from pathlib import Path

from iftarnow_cli import config
from iftarnow_cli.models import Location, TimeOfDay


def _use_tmp_config(tmp_path: Path, monkeypatch) -> Path:
    config_dir = tmp_path / "config"
    config_path = config_dir / "config.json"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    return config_path


def test_missing_config_writes_defaults(tmp_path: Path, monkeypatch) -> None:
    config_path = _use_tmp_config(tmp_path, monkeypatch)

    loaded = config.load_config()

    assert loaded.location == Location(city="Ankara", country="Turkey", method=13)
    assert loaded.work_end == TimeOfDay(17, 0, 0)
    assert loaded.retry_interval_sec == 300.0
    assert loaded.request_timeout_sec == 10.0
    assert json.loads(config_path.read_text(encoding="utf-8"))["work_end"] == "17:00:00"


def test_config_roundtrip(tmp_path: Path, monkeypatch) -> None:
    _use_tmp_config(tmp_path, monkeypatch)

    saved = config.Config(
        location=Location(city="Istanbul", country="Turkey", method=13),
        work_end=TimeOfDay(18, 30),
        retry_interval_sec=60.0,
    )
    config.save_config(saved)

    assert config.load_config() == saved


def test_invalid_values_are_sanitized(tmp_path: Path, monkeypatch) -> None:
    config_path = _use_tmp_config(tmp_path, monkeypatch)
    config_path.parent.mkdir(parents=True)
    config_path.write_text(
        json.dumps(
            {
                "location": {"city": "Konya"},
                "work_end": "quitting time",
                "retry_interval_sec": -5,
                "request_timeout_sec": "fast",
            }
        ),
        encoding="utf-8",
    )

    loaded = config.load_config()

    assert loaded.location.city == "Ankara"
    assert loaded.work_end == TimeOfDay(17, 0, 0)
    assert loaded.retry_interval_sec == 300.0
    assert loaded.request_timeout_sec == 10.0


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path, monkeypatch) -> None:
    config_path = _use_tmp_config(tmp_path, monkeypatch)
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json", encoding="utf-8")

    loaded = config.load_config()

    assert loaded == config.default_config()
