"""HTTP interface."""

from .app import DispatchApp, create_app

__all__ = ["DispatchApp", "create_app"]
