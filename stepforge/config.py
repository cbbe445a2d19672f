"""Runtime settings — env-driven.

Reads from a ``.env`` file and ``STEPFORGE_*`` environment variables.
Directories are resolved relative to ``project_root`` unless absolute.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class StepforgeSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export STEPFORGE_PROJECT_ROOT=~/books/worldbuilding
        export STEPFORGE_LOG_LEVEL=DEBUG
        export STEPFORGE_CACHE_DIR=/data/stepforge-cache
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STEPFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "development"
    log_level: str = "INFO"

    project_root: Path = Path(".")
    state_dir: Path = Path(".stepforge")
    cache_dir: Path = Path("cache")

    def _under_root(self, path: Path) -> Path:
        path = path.expanduser()
        return path if path.is_absolute() else self.project_root.expanduser() / path

    @property
    def state_path(self) -> Path:
        """Resolved directory for step manifests."""
        return self._under_root(self.state_dir)

    @property
    def cache_path(self) -> Path:
        """Resolved directory for memoized external calls."""
        return self._under_root(self.cache_dir)

    @property
    def config_path(self) -> Path:
        """Resolved location of the project configuration document."""
        return self.state_path / "config.json"
