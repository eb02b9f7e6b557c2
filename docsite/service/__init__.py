"""Optional HTTP service over a built content catalog."""

from .app import create_app, run_service

__all__ = ["create_app", "run_service"]
