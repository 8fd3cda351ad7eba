"""Core infrastructure components for kn-ping."""

from kn_ping.core.provider import DEFAULT_NAMESPACE, KubeProvider

__all__ = ["DEFAULT_NAMESPACE", "KubeProvider"]
