"""Persistence layer (SQLAlchemy async)."""

from storagebridge.infrastructure.persistence.base import BaseModel, BaseMutableModel
from storagebridge.infrastructure.persistence.database import Database

__all__ = ["BaseModel", "BaseMutableModel", "Database"]
