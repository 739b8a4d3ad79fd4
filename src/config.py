"""
Configuration for Palimpsest.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

ENV_PREFIX = "PALIMPSEST_"


def _env(name: str, default: Any) -> Any:
    """Read PALIMPSEST_<name>, converted to the type of default."""
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or value == "":
        return default
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


class ReconcilerConfig(BaseModel):
    """Scratch reconciliation loop configuration."""

    poll_interval: float = Field(default=300.0, gt=0)  # seconds to sleep while scratch is empty
    drain_interval: float = Field(default=1.0, ge=0)  # pause between back-to-back draining passes
    owner: str = "reaper"  # holder name used on the autosave guard
    guard_poll_interval: float = Field(default=0.5, gt=0)
    # 0 = terminate permanently on the first failure; counts consecutive failures
    max_restarts: int = Field(default=0, ge=0)
    restart_backoff: float = Field(default=5.0, ge=0)
    # False = delete cortex/corcode from scratch before committing them
    delete_after_commit: bool = False


class StoreConfig(BaseModel):
    """Document store configuration."""

    backend: str = "sqlite"  # sqlite, memory
    db_path: str = "data/palimpsest.db"
    scratch_collection: str = "scratch"
    cortex_collection: str = "cortex"
    corcode_collection: str = "corcode"
    annotations_collection: str = "annotations"


class MergeConfig(BaseModel):
    """Merge engine configuration."""

    engine: str = "simple"
    direct_align: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    reconciler: ReconcilerConfig = Field(default_factory=ReconcilerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables (all prefixed PALIMPSEST_):
            POLL_INTERVAL, DRAIN_INTERVAL, RECONCILER_OWNER, GUARD_POLL_INTERVAL,
            MAX_RESTARTS, RESTART_BACKOFF, DELETE_AFTER_COMMIT: reconciler loop
            STORE_BACKEND (sqlite, memory), DB_PATH, SCRATCH_COLLECTION,
            CORTEX_COLLECTION, CORCODE_COLLECTION, ANNOTATIONS_COLLECTION: storage
            MERGE_ENGINE (simple), MERGE_DIRECT_ALIGN: merge engine
            LOG_LEVEL, LOG_TO_FILE, LOG_DIR, LOG_FILE_ROTATION, LOG_FILE_RETENTION,
            LOG_COMPRESSION, LOG_SERIALIZE: logging
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        reconciler = ReconcilerConfig()
        store = StoreConfig()
        merge = MergeConfig()
        logs = LoggingConfig()

        return cls(
            reconciler=ReconcilerConfig(
                poll_interval=_env("POLL_INTERVAL", reconciler.poll_interval),
                drain_interval=_env("DRAIN_INTERVAL", reconciler.drain_interval),
                owner=_env("RECONCILER_OWNER", reconciler.owner),
                guard_poll_interval=_env("GUARD_POLL_INTERVAL", reconciler.guard_poll_interval),
                max_restarts=_env("MAX_RESTARTS", reconciler.max_restarts),
                restart_backoff=_env("RESTART_BACKOFF", reconciler.restart_backoff),
                delete_after_commit=_env("DELETE_AFTER_COMMIT", reconciler.delete_after_commit),
            ),
            store=StoreConfig(
                backend=_env("STORE_BACKEND", store.backend),
                db_path=_env("DB_PATH", store.db_path),
                scratch_collection=_env("SCRATCH_COLLECTION", store.scratch_collection),
                cortex_collection=_env("CORTEX_COLLECTION", store.cortex_collection),
                corcode_collection=_env("CORCODE_COLLECTION", store.corcode_collection),
                annotations_collection=_env("ANNOTATIONS_COLLECTION", store.annotations_collection),
            ),
            merge=MergeConfig(
                engine=_env("MERGE_ENGINE", merge.engine),
                direct_align=_env("MERGE_DIRECT_ALIGN", merge.direct_align),
            ),
            logging=LoggingConfig(
                level=_env("LOG_LEVEL", logs.level),
                log_to_file=_env("LOG_TO_FILE", logs.log_to_file),
                log_dir=_env("LOG_DIR", logs.log_dir),
                file_rotation=_env("LOG_FILE_ROTATION", logs.file_rotation),
                file_retention=_env("LOG_FILE_RETENTION", logs.file_retention),
                compression=_env("LOG_COMPRESSION", logs.compression),
                serialize=_env("LOG_SERIALIZE", logs.serialize),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Merged field by field: an env var only replaces the YAML value of the
        field it names.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        merged: dict[str, dict[str, Any]] = {}
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                merged = yaml.safe_load(f) or {}

        env_config = cls.from_env(env_file=env_file).model_dump()
        defaults = cls().model_dump()

        for section, values in env_config.items():
            overrides = {
                name: value
                for name, value in values.items()
                if value != defaults[section][name]
            }
            if overrides:
                merged[section] = {**merged.get(section, {}), **overrides}

        return cls(**merged)


# Default config instance
default_config = Config()
