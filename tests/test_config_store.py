import json
from pathlib import Path

from scrollspy.app.config_store import (
    DEFAULT_FILENAME,
    OPTIONS_VERSION,
    SpyOptions,
    load_options,
    save_options,
)


def test_load_returns_defaults_when_missing(tmp_path: Path):
    assert load_options(tmp_path) == SpyOptions()


def test_save_and_reload_round_trip(tmp_path: Path):
    opts = SpyOptions(offset=120, threshold=0.5, hysteresis=200.0, behavior="instant")
    path = save_options(opts, tmp_path)
    assert path.name == DEFAULT_FILENAME
    assert load_options(tmp_path) == opts
    assert not (tmp_path / (DEFAULT_FILENAME + ".tmp")).exists()


def test_to_dict_carries_version():
    data = SpyOptions().to_dict()
    assert data["version"] == OPTIONS_VERSION
    assert data["offset"] == "8%"


def test_corrupt_file_graceful_fallback(tmp_path: Path):
    (tmp_path / DEFAULT_FILENAME).write_text("not json", encoding="utf-8")
    assert load_options(tmp_path) == SpyOptions()


def test_non_object_falls_back(tmp_path: Path):
    (tmp_path / DEFAULT_FILENAME).write_text("[1, 2]", encoding="utf-8")
    assert load_options(tmp_path) == SpyOptions()


def test_version_mismatch_resets(tmp_path: Path):
    data = SpyOptions(threshold=0.2).to_dict()
    data["version"] = OPTIONS_VERSION + 10
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    assert load_options(tmp_path) == SpyOptions()


def test_stored_values_are_sanitized(tmp_path: Path):
    data = {"version": OPTIONS_VERSION, "threshold": 5, "trigger_policy": "bogus"}
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    opts = load_options(tmp_path)
    assert opts.threshold == 1.0
    assert opts.trigger_policy == "fixed"
    assert opts.hysteresis == 150.0
