"""Storage of configuration and tokens for time log synchronizer."""

import json
from pathlib import Path
from typing import Any

import yaml

from time_log_sync.utils.logging import DEFAULT_CONFIG_DIR


class StorageManager:
    """Manages configuration and token storage."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize storage manager.

        Args:
            config_dir: Directory to store configuration. Defaults to ~/.time-log-sync/
        """
        self.config_dir = config_dir or DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / "config.yaml"
        self.tokens_file = self.config_dir / "tokens.json"

    def load_config(self) -> dict[str, Any]:
        """Load the YAML configuration.

        Returns:
            Configuration dictionary, empty if no file exists yet.
        """
        if self.config_file.exists():
            with open(self.config_file) as f:
                return yaml.safe_load(f) or {}
        return {}

    def save_config(self, config: dict[str, Any]) -> None:
        """Save the YAML configuration.

        Args:
            config: Configuration to save.
        """
        with open(self.config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    def load_tokens(self) -> dict[str, str]:
        """Load cached authentication tokens.

        Returns:
            Dictionary of service names to tokens.
        """
        if self.tokens_file.exists():
            with open(self.tokens_file) as f:
                return json.load(f)
        return {}

    def save_tokens(self, tokens: dict[str, str]) -> None:
        """Save authentication tokens.

        Args:
            tokens: Dictionary of service names to tokens.
        """
        with open(self.tokens_file, "w") as f:
            json.dump(tokens, f)
        # User read/write only
        self.tokens_file.chmod(0o600)

    def get_token(self, service: str) -> str | None:
        """Get cached token for a service.

        Args:
            service: Service name (e.g., "timecamp").

        Returns:
            Token if available, None otherwise.
        """
        return self.load_tokens().get(service)

    def set_token(self, service: str, token: str) -> None:
        """Save token for a service.

        Args:
            service: Service name.
            token: Authentication token.
        """
        tokens = self.load_tokens()
        tokens[service] = token
        self.save_tokens(tokens)
