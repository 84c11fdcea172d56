# ABOUTME: YAML configuration for sync runs: servers, batching, threshold, and export path.
# ABOUTME: Loads config.yml into frozen dataclasses and validates the required server fields.

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from shelfsync.matching.engine import DEFAULT_THRESHOLD

DEFAULT_CONFIG_PATH = Path("config.yml")
DEFAULT_EXPORT_PATH = Path("goodreads_library_export.csv")
DEFAULT_BATCH_SIZE = 10


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass(frozen=True)
class ServerConfig:
    """One Audiobookshelf server and the 1Password item holding its login."""

    base_url: str
    onepassword_item: str
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.base_url


@dataclass(frozen=True)
class SyncConfig:
    """Settings for one sync run. Passed explicitly; nothing reads globals."""

    servers: list[ServerConfig] = field(default_factory=list)
    batch_size: int = DEFAULT_BATCH_SIZE
    dry_run: bool = False
    confidence_threshold: float = DEFAULT_THRESHOLD
    goodreads_export_file: Path = DEFAULT_EXPORT_PATH
    test_limit: int | None = None

    def with_overrides(self, **overrides: Any) -> "SyncConfig":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def _parse_servers(raw: Any, source: Path) -> list[ServerConfig]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"No servers configured in {source}")

    servers = []
    for index, entry in enumerate(raw, start=1):
        if not isinstance(entry, dict) or not entry.get("base_url") or not entry.get(
            "onepassword_item"
        ):
            raise ConfigError(f"Server {index} missing base_url or onepassword_item")
        servers.append(
            ServerConfig(
                base_url=str(entry["base_url"]),
                onepassword_item=str(entry["onepassword_item"]),
                name=entry.get("name"),
            )
        )
    return servers


def parse_config(data: Any, source: Path = DEFAULT_CONFIG_PATH) -> SyncConfig:
    """Build a SyncConfig from an already-parsed YAML document."""
    if not isinstance(data, dict):
        raise ConfigError(f"{source} must contain a mapping")

    servers = _parse_servers(data.get("servers"), source)
    try:
        batch_size = int(data.get("batch_size") or DEFAULT_BATCH_SIZE)
        threshold = data.get("confidence_threshold")
        threshold = float(threshold) if threshold is not None else DEFAULT_THRESHOLD
        test_limit = data.get("test_limit")
        test_limit = int(test_limit) if test_limit is not None else None
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value in {source}: {exc}") from exc

    if batch_size < 1:
        raise ConfigError(f"batch_size must be at least 1 in {source}")
    if not 0.0 <= threshold <= 1.0:
        raise ConfigError(f"confidence_threshold must be between 0.0 and 1.0 in {source}")

    return SyncConfig(
        servers=servers,
        batch_size=batch_size,
        dry_run=_parse_bool(data.get("dry_run", False)),
        confidence_threshold=threshold,
        goodreads_export_file=Path(data.get("goodreads_export_file") or DEFAULT_EXPORT_PATH),
        test_limit=test_limit,
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> SyncConfig:
    """Load and validate the YAML configuration file.

    Raises:
        ConfigError: If the file is missing, unparseable, or lacks servers.
    """
    if not path.is_file():
        raise ConfigError(
            f"{path} not found. Copy config.example.yml to {path} and configure your settings."
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    return parse_config(data, path)
