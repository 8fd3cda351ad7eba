"""Configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClusterConfig(BaseSettings):
    """Cluster connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``KN_`` prefix.  Constructor kwargs take precedence.

    ``namespace`` left unset falls back to the kubeconfig context's
    namespace, then to ``default``.
    """

    model_config = SettingsConfigDict(env_prefix="KN_")

    kubeconfig: str | None = None
    context: str | None = None
    namespace: str | None = None
    request_timeout: float | None = Field(default=None, gt=0)
    in_cluster: bool = False


class Config(BaseModel):
    """Top-level configuration file."""

    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
