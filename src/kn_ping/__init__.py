"""Selective updates for Knative PingSource resources."""

__version__ = "0.1.0"
