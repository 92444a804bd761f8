"""Viewsets for JSON:API."""

from .base import JSONAPIViewSet

__all__ = ["JSONAPIViewSet"]
