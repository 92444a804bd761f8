"""SQLAlchemy helpers for JSON:API."""

from .data_layer import SQLAlchemyDataLayer, SQLAlchemyRecordAdapter

__all__ = ["SQLAlchemyDataLayer", "SQLAlchemyRecordAdapter"]
