"""Routers for JSON:API."""

from .base import JSONAPIRouter

__all__ = ["JSONAPIRouter"]
