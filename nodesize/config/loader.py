"""Helpers for loading and persisting the sizing configuration.

`load_sizing_config` accepts various configuration sources:

* None -> default SizingConfig
* dict -> merged over the defaults
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings

`ConfigStore` owns the persisted settings file and hands out immutable
snapshots to the sizing driver.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from nodesize.config.schema import NUMERIC_SETTINGS, SizingConfig
from nodesize.errors import ConfigError

logger = logging.getLogger("nodesize.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _parse_toml(text: str) -> Dict[str, Any]:
    """Parse TOML text into a dict."""
    import tomllib

    return tomllib.loads(text)


def _validate_lenient(data: Dict[str, Any]) -> SizingConfig:
    """Validate ``data`` over the defaults, dropping keys that fail validation.

    A single bad value in a hand-edited settings file should not discard
    the rest of the user's configuration.
    """
    try:
        return SizingConfig.from_dict(data)
    except ValidationError as exc:
        bad_keys = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        for key in sorted(bad_keys):
            logger.warning(
                "Ignoring invalid setting %s=%r; using default", key, data.get(key)
            )
        cleaned = {k: v for k, v in data.items() if k not in bad_keys}
        return SizingConfig.from_dict(cleaned)


def _read_source_text(source: Union[str, Path]) -> tuple[str, str]:
    path = Path(source)
    try:
        is_file = isinstance(source, Path) or path.exists()
    except OSError:
        # Inline text longer than the OS path limit
        is_file = False
    if is_file:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = "json" if text.lstrip().startswith("{") else "toml"
        logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        return text, fmt

    text = str(source)
    fmt = "json" if text.lstrip().startswith("{") else "toml"
    logger.info("Loading configuration from inline %s string", fmt)
    return text, fmt


def load_sizing_config(source: ConfigSource) -> SizingConfig:
    """Load SizingConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns SizingConfig.default()
            * dict: treated as an already-parsed settings mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        SizingConfig instance. Unset keys inherit the defaults.

    Raises:
        ConfigError: If the source cannot be read or is not a mapping.
    """
    if source is None:
        logger.debug("No config source provided; using default SizingConfig")
        return SizingConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading SizingConfig from provided dict")
        return _validate_lenient(source)

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    text, fmt = _read_source_text(source)
    try:
        data = json.loads(text) if fmt == "json" else _parse_toml(text)
    except ValueError as exc:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are both ValueErrors
        raise ConfigError(f"Malformed {fmt} configuration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level configuration must be a mapping/dict")

    return _validate_lenient(data)


class ConfigStore:
    """Persisted settings record with snapshot access.

    The settings file is a flat JSON object merged over the defaults on
    load. Every change produces a new immutable snapshot, so a sizing pass
    that already holds one is unaffected by concurrent edits.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        """Initialize store.

        Args:
            path: Settings file location. When None, the store is memory-only.
        """
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self._config = SizingConfig.default()

    def snapshot(self) -> SizingConfig:
        """Return the current configuration snapshot."""
        with self._lock:
            return self._config

    def load(self) -> SizingConfig:
        """Load settings from disk, falling back to defaults when absent."""
        if self.path is None or not self.path.exists():
            logger.debug("No settings file; using defaults")
            config = SizingConfig.default()
        else:
            config = load_sizing_config(self.path)
        with self._lock:
            self._config = config
        return config

    def save(self) -> None:
        """Write the current snapshot to disk (no-op for memory-only stores)."""
        if self.path is None:
            return
        with self._lock:
            data = self._config.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.debug("Saved settings to %s", self.path)

    def update(self, **changes: Any) -> SizingConfig:
        """Apply and persist setting changes.

        Raises:
            ValidationError: If a changed value cannot be coerced.
        """
        with self._lock:
            self._config = self._config.with_updates(**changes)
            config = self._config
        self.save()
        logger.info("Updated settings: %s", ", ".join(sorted(changes)))
        return config

    def restore_defaults(self) -> SizingConfig:
        """Reset the numeric settings to their defaults and persist.

        Exclusion lists and unknown keys are kept.
        """
        defaults = SizingConfig.default().to_dict()
        return self.update(**{key: defaults[key] for key in NUMERIC_SETTINGS})


__all__ = ["ConfigStore", "load_sizing_config"]
