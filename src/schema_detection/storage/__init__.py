"""Storage layer for detector configuration persistence.

This module provides:
- Base: SQLAlchemy declarative base for all models
- get_engine, get_session_factory: Database engine management
- init_database: Schema management
"""

from schema_detection.storage.base import (
    Base,
    get_engine,
    get_session_factory,
    init_database,
    metadata_obj,
)

__all__ = [
    # Base and metadata
    "Base",
    "metadata_obj",
    # Database management
    "get_engine",
    "get_session_factory",
    "init_database",
]
