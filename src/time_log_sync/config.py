"""Configuration management for time log synchronizer."""

from pathlib import Path
from typing import Any

from time_log_sync.errors import ConfigError
from time_log_sync.sync.resolver import ServiceMapping
from time_log_sync.utils.storage import StorageManager

DEFAULT_BASE_URL = "https://app.timecamp.com/third_party/api/"


class Config:
    """Manages application configuration and service mappings."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_dir: Directory for storing configuration.
        """
        self.storage = StorageManager(config_dir)
        self._config = self.storage.load_config()

    def get_config(self) -> dict[str, Any]:
        """Get the raw configuration dictionary."""
        return self._config

    @property
    def time_log_path(self) -> Path | None:
        """Path of the CSV time log, if configured."""
        path = self._config.get("time_log", {}).get("path")
        return Path(path).expanduser() if path else None

    @property
    def time_log_client(self) -> str | None:
        """Client column value to keep when reading the time log."""
        return self._config.get("time_log", {}).get("client") or None

    @property
    def base_url(self) -> str:
        """TimeCamp API base URL."""
        return self._config.get("timecamp", {}).get("base_url") or DEFAULT_BASE_URL

    def set_time_log(self, path: Path, client: str | None = None) -> None:
        """Store the time log location and client filter.

        Args:
            path: Path of the CSV time log.
            client: Client column value to keep, or None to keep every row.
        """
        self._config["time_log"] = {"path": str(path), "client": client}
        self.storage.save_config(self._config)

    def get_timecamp_token(self) -> str:
        """Get the TimeCamp API token.

        Raises:
            ConfigError: If no token has been configured.
        """
        token = self.storage.get_token("timecamp")
        if not token:
            raise ConfigError("TimeCamp API token not configured. Run: time-log-sync configure")
        return token

    def set_timecamp_token(self, token: str) -> None:
        """Store the TimeCamp API token."""
        self.storage.set_token("timecamp", token)

    def get_service_mappings(self) -> list[dict[str, str]]:
        """Get configured service to task path mappings.

        Returns:
            List of {"service": ..., "task": ...} dictionaries.
        """
        return list(self._config.get("service_mappings") or [])

    def get_service_mapping(self) -> ServiceMapping:
        """Build the bidirectional rename table from configuration.

        Raises:
            ConfigError: If an entry is incomplete or a label or task path is duplicated.
        """
        pairs = []
        for item in self.get_service_mappings():
            service = item.get("service")
            task = item.get("task")
            if not service or not task:
                raise ConfigError(f"Service mapping needs both 'service' and 'task': {item}")
            pairs.append((service, task))
        return ServiceMapping(pairs)

    def update_service_mapping(self, service: str, task: str) -> None:
        """Add or replace the mapping for a service label.

        Args:
            service: Service label used in the time log.
            task: TimeCamp task path ("Project - Task").
        """
        mappings = [m for m in self.get_service_mappings() if m.get("service") != service]
        mappings.append({"service": service, "task": task})
        self._config["service_mappings"] = mappings
        self.storage.save_config(self._config)
