"""
SQLAlchemy base configuration.

This module provides the declarative base for SQLAlchemy models.
"""

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase, AsyncAttrs):
    """SQLAlchemy 2.0 declarative base with async support."""
