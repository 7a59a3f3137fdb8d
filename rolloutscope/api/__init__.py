"""REST API for rolloutscope."""

from rolloutscope.api.app import create_app

__all__ = ["create_app"]
