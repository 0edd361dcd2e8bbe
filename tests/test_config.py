"""Tests for the sizing configuration schema, loader and store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from nodesize.config import ConfigStore, SizingConfig, load_sizing_config
from nodesize.errors import ConfigError


def test_defaults() -> None:
    config = SizingConfig.default()

    assert config.size_multiplier == 2.0
    assert config.multiplier_scale == 1.0
    assert config.max_size == 50
    assert config.max_depth == 3
    assert config.exclude_folders == []
    assert config.exclude_titles == []
    assert config.exclude_tags == []
    assert config.count_missing_links is False


def test_camel_case_keys_are_accepted() -> None:
    config = SizingConfig.from_dict({"sizeMultiplier": 3, "maxDepth": 5})

    assert config.size_multiplier == 3.0
    assert config.max_depth == 5


def test_numeric_values_are_clamped() -> None:
    """Out-of-range numbers are clamped, never rejected."""
    config = SizingConfig.from_dict(
        {"sizeMultiplier": -4, "multiplierScale": 0, "maxSize": 10**9, "maxDepth": 0}
    )

    assert config.size_multiplier > 0
    assert config.multiplier_scale > 0
    assert config.max_size == 10000.0
    assert config.max_depth == 1


def test_slider_depth_is_rounded() -> None:
    assert SizingConfig.from_dict({"maxDepth": 4.0}).max_depth == 4


def test_list_settings_are_normalized() -> None:
    config = SizingConfig.from_dict(
        {
            "excludeFolders": [" Archive ", ""],
            "excludeTitles": "Inbox\n\n /^Draft/ \n",
            "excludeTags": ["#private", " work ", "#"],
        }
    )

    assert config.exclude_folders == ["Archive"]
    assert config.exclude_titles == ["Inbox", "/^Draft/"]
    assert config.exclude_tags == ["private", "work"]


def test_unknown_keys_survive_round_trip() -> None:
    config = SizingConfig.from_dict({"maxSize": 80, "legacyOption": {"a": 1}})

    data = config.to_dict()

    assert data["legacyOption"] == {"a": 1}
    assert data["maxSize"] == 80
    assert SizingConfig.from_dict(data).to_dict() == data


def test_config_is_immutable() -> None:
    config = SizingConfig.default()

    with pytest.raises(ValidationError):
        config.max_size = 10  # type: ignore[misc]


def test_with_updates_accepts_both_key_styles() -> None:
    config = SizingConfig.default().with_updates(maxSize=70, max_depth=6)

    assert config.max_size == 70
    assert config.max_depth == 6
    assert "max_depth" not in config.to_dict()


def test_with_updates_rejects_garbage() -> None:
    with pytest.raises(ValidationError):
        SizingConfig.default().with_updates(maxSize="huge")


def test_load_none_returns_defaults() -> None:
    assert load_sizing_config(None) == SizingConfig.default()


def test_load_dict_merges_over_defaults() -> None:
    config = load_sizing_config({"maxDepth": 7})

    assert config.max_depth == 7
    assert config.size_multiplier == 2.0


def test_load_drops_invalid_values(caplog: pytest.LogCaptureFixture) -> None:
    """One bad value falls back to its default without losing the rest."""
    config = load_sizing_config({"maxSize": "huge", "maxDepth": 6})

    assert config.max_size == 50
    assert config.max_depth == 6
    assert "Ignoring invalid setting maxSize" in caplog.text


def test_load_json_file(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"sizeMultiplier": 4.5}), encoding="utf-8")

    assert load_sizing_config(path).size_multiplier == 4.5


def test_load_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "nodesize.toml"
    path.write_text('maxSize = 120\nexcludeTags = ["private"]\n', encoding="utf-8")

    config = load_sizing_config(path)

    assert config.max_size == 120
    assert config.exclude_tags == ["private"]


def test_load_inline_strings() -> None:
    assert load_sizing_config('{"maxDepth": 2}').max_depth == 2
    assert load_sizing_config("maxDepth = 9").max_depth == 9


def test_load_rejects_non_mapping_and_malformed_text() -> None:
    with pytest.raises(ConfigError):
        load_sizing_config("[1, 2]")
    with pytest.raises(ConfigError):
        load_sizing_config("{not json")


def test_store_without_file_uses_defaults(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / "missing.json")

    assert store.load() == SizingConfig.default()


def test_store_update_persists_and_keeps_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"maxSize": 60, "theme": "dark"}), encoding="utf-8")
    store = ConfigStore(path)
    store.load()

    store.update(sizeMultiplier=3.0)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["sizeMultiplier"] == 3.0
    assert saved["maxSize"] == 60
    assert saved["theme"] == "dark"


def test_store_snapshots_are_stable() -> None:
    """A snapshot taken before an update is not affected by it."""
    store = ConfigStore()
    before = store.snapshot()

    store.update(maxSize=99)

    assert before.max_size == 50
    assert store.snapshot().max_size == 99


def test_restore_defaults_resets_numeric_settings_only(tmp_path: Path) -> None:
    store = ConfigStore(tmp_path / "data.json")
    store.update(sizeMultiplier=7, maxDepth=9, excludeFolders=["Archive"])

    config = store.restore_defaults()

    assert config.size_multiplier == 2.0
    assert config.max_depth == 3
    assert config.exclude_folders == ["Archive"]


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_are_rejected(value: float) -> None:
    for key in ("sizeMultiplier", "multiplierScale", "maxSize", "maxDepth"):
        with pytest.raises(ValidationError):
            SizingConfig.from_dict({key: value})


def test_store_update_rejects_nan() -> None:
    store = ConfigStore()

    with pytest.raises(ValidationError):
        store.update(sizeMultiplier=float("nan"))

    assert store.snapshot().size_multiplier == 2.0


def test_load_drops_non_finite_values(caplog: pytest.LogCaptureFixture) -> None:
    """NaN in a hand-edited settings file falls back to the default."""
    config = load_sizing_config('{"sizeMultiplier": NaN, "maxSize": Infinity, "maxDepth": 2}')

    assert config.size_multiplier == 2.0
    assert config.max_size == 50
    assert config.max_depth == 2
    assert "Ignoring invalid setting sizeMultiplier" in caplog.text


def test_exclude_tags_strip_a_single_hash() -> None:
    config = SizingConfig.from_dict({"excludeTags": ["#work", "##nested", "plain"]})

    assert config.exclude_tags == ["work", "#nested", "plain"]
