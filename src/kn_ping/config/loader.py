"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from kn_ping.config.schema import Config

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_CLUSTER_ENV_MAP: dict[str, str] = {
    "kubeconfig": "KN_KUBECONFIG",
    "context": "KN_CONTEXT",
    "namespace": "KN_NAMESPACE",
    "request_timeout": "KN_REQUEST_TIMEOUT",
    "in_cluster": "KN_IN_CLUSTER",
}

_CLUSTER_BOOL_FIELDS: frozenset[str] = frozenset({"in_cluster"})


def _resolve_cluster(raw_cluster: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Resolve cluster fields from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field, env_key in _CLUSTER_ENV_MAP.items():
        val = raw_cluster.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            if field in _CLUSTER_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def load_config(path: Path | str, *, required: bool = True) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    With ``required=False`` a missing file is treated as empty, so settings
    come from the environment alone.

    Raises:
        ConfigError: On YAML parse errors, a missing required file, or
            validation failures.
    """
    path = Path(path)

    if not path.is_file() and not required:
        logger.debug("No config file at %s, using environment only", path)
        raw: Any = {}
    else:
        try:
            raw = YAML(typ="safe").load(path)
        except Exception as exc:
            raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    raw_cluster = raw.get("cluster") or {}
    if not isinstance(raw_cluster, dict):
        raise ConfigError(f"{path}: 'cluster' must be a mapping")

    try:
        raw["cluster"] = _resolve_cluster(raw_cluster, path.parent)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info("Loaded config from %s", path)
    return config
