"""Knative resource definitions."""

from kn_ping.resources.destination import Destination, KReference
from kn_ping.resources.ping_source import PingSource

__all__ = ["Destination", "KReference", "PingSource"]
