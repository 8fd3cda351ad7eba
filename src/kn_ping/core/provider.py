"""Kubernetes provider - connection configuration for a cluster."""

import os
from functools import cached_property
from pathlib import Path
from typing import Self

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from pydantic import BaseModel, ConfigDict

DEFAULT_NAMESPACE = "default"
SERVICE_ACCOUNT_NAMESPACE = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")


class KubeProvider(BaseModel):
    """Connection configuration for a Kubernetes cluster.

    For normal use, point at a kubeconfig (or leave unset for the default
    ``~/.kube/config``) and optionally pick a context.  Inside a pod, set
    ``in_cluster``.  For tests, use ``from_client`` to inject a client.

    Examples:
        # Current kubeconfig context
        provider = KubeProvider()

        # Explicit context
        provider = KubeProvider(kubeconfig="~/.kube/staging", context="admin@staging")

        # Mocked client
        provider = KubeProvider.from_client(MagicMock())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kubeconfig: str | None = None
    context: str | None = None
    in_cluster: bool = False

    # Injected client (for testing)
    _injected_client: k8s_client.ApiClient | None = None

    @classmethod
    def from_client(cls, api_client: k8s_client.ApiClient) -> Self:
        """Create a provider with an injected API client."""
        provider = cls.model_construct()
        provider._injected_client = api_client
        return provider

    @cached_property
    def client(self) -> k8s_client.ApiClient:
        """Get the Kubernetes API client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.in_cluster:
            k8s_config.load_incluster_config()
            return k8s_client.ApiClient()

        return k8s_config.new_client_from_config(
            config_file=self.kubeconfig,
            context=self.context,
        )

    @cached_property
    def custom_objects(self) -> k8s_client.CustomObjectsApi:
        return k8s_client.CustomObjectsApi(self.client)

    @cached_property
    def core(self) -> k8s_client.CoreV1Api:
        return k8s_client.CoreV1Api(self.client)

    def default_namespace(self) -> str:
        """Namespace to use when none is configured.

        Inside a pod this is ``POD_NAMESPACE`` or the service account's
        namespace file; otherwise the active kubeconfig context's namespace.
        Falls back to ``default``.
        """
        if self._injected_client is not None:
            return DEFAULT_NAMESPACE
        if self.in_cluster:
            return _pod_namespace()
        try:
            contexts, active = k8s_config.list_kube_config_contexts(config_file=self.kubeconfig)
        except k8s_config.ConfigException:
            return DEFAULT_NAMESPACE
        if self.context is not None:
            active = next((c for c in contexts if c.get("name") == self.context), active)
        return (active or {}).get("context", {}).get("namespace") or DEFAULT_NAMESPACE


def _pod_namespace() -> str:
    if namespace := os.environ.get("POD_NAMESPACE", "").strip():
        return namespace
    try:
        namespace = SERVICE_ACCOUNT_NAMESPACE.read_text(encoding="utf-8").strip()
    except OSError:
        return DEFAULT_NAMESPACE
    return namespace or DEFAULT_NAMESPACE
