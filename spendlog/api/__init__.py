"""HTTP API package."""

from spendlog.api.server import create_app, router

__all__ = ["create_app", "router"]
