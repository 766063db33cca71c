"""Database layer for paycore."""

from paycore.db.repository import PayrollRepository
from paycore.db.schema import create_schema

__all__ = ["PayrollRepository", "create_schema"]
