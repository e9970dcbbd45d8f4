# src/claude_mode/config/config_store.py
"""
On-disk state for claude-mode.

``ConfigStore`` owns ``claude-mode.json``; ``ModelCacheStore`` owns
``cache/models.json``. Both are plain JSON files with last-write-wins
semantics and no locking.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from claude_mode.config.defaults import (
    CACHE_DIR_NAME,
    CONFIG_DIR_NAME,
    CONFIG_FILENAME,
    ENV_FILENAME,
    MODEL_CACHE_FILENAME,
)
from claude_mode.config.env_vars import EnvVar, get_env
from claude_mode.config.models import LauncherConfig
from claude_mode.errors import config_parse_error
from claude_mode.providers.models import Model, ModelCacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def now_ms() -> float:
    """Wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def get_config_dir() -> Path:
    """Config directory: ``$CLAUDE_MODE_HOME`` or ``~/.claude-mode``."""
    override = get_env(EnvVar.HOME_DIR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME


class ConfigStore:
    """Loads, caches and persists the launcher config file."""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or get_config_dir()
        self.config_file = self.config_dir / CONFIG_FILENAME
        self.cache_file = self.config_dir / CACHE_DIR_NAME / MODEL_CACHE_FILENAME
        self.env_file = self.config_dir / ENV_FILENAME
        self._config: LauncherConfig | None = None

    def load(self) -> LauncherConfig:
        """
        Return the config, reading the file at most once until invalidated.

        A missing file yields defaults. An invalid field or custom provider
        entry is logged and dropped so the rest of the file still applies. A
        file that is not a JSON object is logged as a warning and yields
        defaults; it is left on disk untouched.
        """
        if self._config is not None:
            return self._config

        config = LauncherConfig()
        if self.config_file.exists():
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("top-level JSON value must be an object")
                config = self._validate_leniently(data)
            except (OSError, ValueError, ValidationError) as e:
                # json.JSONDecodeError is a ValueError
                error = config_parse_error(str(self.config_file), e)
                logger.warning("%s: %s. Using defaults.", error.message, e)
                config = LauncherConfig()

        self._config = config
        return config

    def _validate_leniently(self, data: dict[str, Any]) -> LauncherConfig:
        try:
            return LauncherConfig.model_validate(data)
        except ValidationError as e:
            errors = e.errors()

        data = dict(data)
        bad_providers: set[int] = set()
        for err in errors:
            loc = err["loc"]
            if not loc:
                raise ValueError(err["msg"])
            logger.warning(
                "Ignoring invalid config value %s in %s: %s",
                ".".join(str(part) for part in loc),
                self.config_file,
                err["msg"],
            )
            if loc[0] == "customProviders" and len(loc) > 1 and isinstance(loc[1], int):
                bad_providers.add(loc[1])
            else:
                data.pop(loc[0], None)

        if bad_providers and isinstance(data.get("customProviders"), list):
            data["customProviders"] = [
                entry
                for index, entry in enumerate(data["customProviders"])
                if index not in bad_providers
            ]
        # Anything still invalid falls back to defaults in load()
        return LauncherConfig.model_validate(data)

    def get(self, name: str) -> Any:
        """Single config value by Python field name."""
        return getattr(self.load(), name)

    def save(self, config: LauncherConfig) -> None:
        """Write the full config and drop the cached copy."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.to_file_dict(), f, indent=2)
            f.write("\n")
        logger.debug("Saved config to %s", self.config_file)
        self.invalidate()

    def update(self, **changes: Any) -> LauncherConfig:
        """Merge *changes* (Python field names) into the config and save it."""
        config = self.load().model_copy(update=changes)
        self.save(config)
        return self.load()

    def init(self) -> Path:
        """Create a default config file if none exists; return its path."""
        if not self.config_file.exists():
            self.save(LauncherConfig())
            logger.info("Created default config at %s", self.config_file)
        return self.config_file

    def invalidate(self) -> None:
        self._config = None


class ModelCacheStore:
    """Best-effort disk cache of discovered models, one entry per provider."""

    def __init__(self, cache_file: Path, clock: Clock = now_ms):
        self.cache_file = cache_file
        self._clock = clock

    def load(self) -> dict[str, ModelCacheEntry]:
        """Every cached entry; an unreadable file counts as empty."""
        if not self.cache_file.exists():
            return {}
        try:
            with open(self.cache_file, encoding="utf-8") as f:
                data = json.load(f)
            return {
                key: ModelCacheEntry.model_validate(entry)
                for key, entry in data.items()
            }
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.warning("Ignoring unreadable model cache %s: %s", self.cache_file, e)
            return {}

    def get_models(self, provider_key: str) -> list[Model] | None:
        entry = self.load().get(provider_key)
        return entry.models if entry else None

    def save(self, provider_key: str, models: list[Model]) -> ModelCacheEntry:
        """Overwrite one provider's entry, keeping the others."""
        entries = self.load()
        entry = ModelCacheEntry(models=models, timestamp=self._clock())
        entries[provider_key] = entry
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "w", encoding="utf-8") as f:
                json.dump(
                    {key: value.model_dump(mode="json") for key, value in entries.items()},
                    f,
                    indent=2,
                )
        except OSError as e:
            logger.warning("Failed to write model cache %s: %s", self.cache_file, e)
        return entry
