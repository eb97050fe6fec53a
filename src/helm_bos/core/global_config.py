"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.helm-bos/config.toml.
Environment variables override file values; CLI flags override both (applied
in create_context).
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path

from helm_bos.core.index_sync import DEFAULT_MAX_ATTEMPTS

DEFAULT_ENDPOINT = "https://s3.bj.bcebos.com"
DEFAULT_REGION = "bj"


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in HelmBosContext.
    All fields are read-only after construction.
    """

    access_key: str | None = None
    secret_key: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    region: str = DEFAULT_REGION
    conditional_writes: bool = True
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    debug: bool = False


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def apply_env_overrides(config: GlobalConfig, env: dict[str, str] | None = None) -> GlobalConfig:
    """Override config values from HELM_BOS_* environment variables.

    Args:
        config: Config loaded from file (or defaults)
        env: Environment mapping (defaults to os.environ)

    Returns:
        New GlobalConfig with overrides applied
    """
    environ = os.environ if env is None else env
    overrides: dict[str, object] = {}
    if ak := environ.get("HELM_BOS_AK"):
        overrides["access_key"] = ak
    if sk := environ.get("HELM_BOS_SK"):
        overrides["secret_key"] = sk
    if endpoint := environ.get("HELM_BOS_ENDPOINT"):
        overrides["endpoint"] = endpoint
    if debug := environ.get("HELM_BOS_DEBUG"):
        overrides["debug"] = _env_flag(debug)
    return replace(config, **overrides)


class GlobalConfigOps(ABC):
    """Abstract interface for global config operations.

    Provides dependency injection for global config access, enabling
    in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config.

        Returns:
            GlobalConfig instance with loaded values

        Raises:
            FileNotFoundError: If config doesn't exist
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for error messages and debugging)."""
        ...

    def load_or_default(self) -> GlobalConfig:
        """Load global config, falling back to defaults when none exists."""
        if not self.exists():
            return GlobalConfig()
        return self.load()


class FilesystemGlobalConfigOps(GlobalConfigOps):
    """Production implementation that reads ~/.helm-bos/config.toml."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        """Load global config from ~/.helm-bos/config.toml.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file is not valid TOML or a value has the wrong type
        """
        config_path = self.path()

        if not config_path.exists():
            raise FileNotFoundError(f"Global config not found at {config_path}")

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config file {config_path}: {e}") from e

        max_attempts = data.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
        if not isinstance(max_attempts, int) or max_attempts < 1:
            raise ValueError(f"'max_attempts' in {config_path} must be a positive integer")

        return GlobalConfig(
            access_key=data.get("access_key"),
            secret_key=data.get("secret_key"),
            endpoint=str(data.get("endpoint", DEFAULT_ENDPOINT)),
            region=str(data.get("region", DEFAULT_REGION)),
            conditional_writes=bool(data.get("conditional_writes", True)),
            max_attempts=max_attempts,
            debug=bool(data.get("debug", False)),
        )

    def path(self) -> Path:
        """Get the path to the global config file.

        Returns:
            Path to ~/.helm-bos/config.toml
        """
        if self._path is not None:
            return self._path
        return Path.home() / ".helm-bos" / "config.toml"


class InMemoryGlobalConfigOps(GlobalConfigOps):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory config ops.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            raise FileNotFoundError(f"Global config not found at {self.path()}")
        return self._config

    def path(self) -> Path:
        return Path("/fake/helm-bos/config.toml")
