"""Configuration loading and convenience update API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kn_ping.config.loader import ConfigError, load_config
from kn_ping.config.schema import ClusterConfig, Config
from kn_ping.core.provider import KubeProvider
from kn_ping.engine.sink import KubeSinkResolver
from kn_ping.engine.store import KubePingSourceStore
from kn_ping.engine.update import PingSourceUpdater

if TYPE_CHECKING:
    from pathlib import Path

    from kn_ping.engine.types import UpdateRequest, UpdateResult

__all__ = [
    "ClusterConfig",
    "Config",
    "ConfigError",
    "load",
    "load_config",
    "resolve_namespace",
    "update",
    "updater_from_config",
]


def load(path: Path | str, *, required: bool = True) -> Config:
    """Load a YAML configuration file."""
    return load_config(path, required=required)


def _provider_from_config(config: Config) -> KubeProvider:
    cluster = config.cluster
    return KubeProvider(
        kubeconfig=cluster.kubeconfig,
        context=cluster.context,
        in_cluster=cluster.in_cluster,
    )


def resolve_namespace(
    config: Config, provider: KubeProvider, namespace: str | None = None
) -> str:
    """Pick the namespace: explicit > configured > kubeconfig context > ``default``."""
    return namespace or config.cluster.namespace or provider.default_namespace()


def updater_from_config(
    config: Config,
    *,
    namespace: str | None = None,
    timeout: float | None = None,
) -> PingSourceUpdater:
    """Build a ``PingSourceUpdater`` wired to the configured cluster."""
    provider = _provider_from_config(config)
    store = KubePingSourceStore(provider, resolve_namespace(config, provider, namespace))
    return PingSourceUpdater(
        store,
        KubeSinkResolver(provider),
        timeout=timeout if timeout is not None else config.cluster.request_timeout,
    )


def update(
    config: Config,
    name: str,
    request: UpdateRequest,
    *,
    namespace: str | None = None,
    timeout: float | None = None,
    dry_run: bool = False,
) -> UpdateResult:
    """Update the PingSource *name* with the fields set in *request*."""
    updater = updater_from_config(config, namespace=namespace, timeout=timeout)
    return updater.update(name, request, dry_run=dry_run)
