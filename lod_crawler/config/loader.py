"""Configuration loading helpers for the LOD crawler."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import CrawlerConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "crawler_config.yaml"
HOME_ENV = "LOD_CRAWLER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path(__file__).resolve().parents[2]).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    def resolve_output(self, config: CrawlerConfig) -> Path:
        """Return the configured outputs directory anchored at the project root."""

        target = config.outputs_dir
        if not target.is_absolute():
            target = self.project_root / target
        target.mkdir(parents=True, exist_ok=True)
        return target


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: CrawlerConfig | None = None

    def load(self, path: Path | None = None) -> CrawlerConfig:
        """Load configuration, writing defaults on first use.

        An explicit ``path`` bypasses the cache and is never created.
        """

        if path is not None:
            if path.suffix not in CONFIG_EXTENSIONS:
                raise ValueError(f"Unsupported configuration file type: {path}")
            if not path.exists():
                raise FileNotFoundError(f"Configuration not found: {path}")
            return CrawlerConfig.model_validate(_read_file(path))
        if self._cache is not None:
            return self._cache
        default_path = self.locator.config_path()
        if default_path.exists():
            config = CrawlerConfig.model_validate(_read_file(default_path))
        else:
            config = CrawlerConfig()
            self.save(config)
        self._cache = config
        return config

    def save(self, config: CrawlerConfig, path: Path | None = None) -> Path:
        target = path or self.locator.config_path()
        _write_file(target, config.model_dump(mode="json"))
        if path is None:
            self._cache = config
        return target

    def reset(self) -> CrawlerConfig:
        """Overwrite the stored configuration with defaults."""

        config = CrawlerConfig()
        self.save(config)
        return config


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV"]
