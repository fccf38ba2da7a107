"""Mixins for SQLAlchemy models."""

from sqlalchemy import Column, DateTime, func


class CreatedAtMixin:
    """Mixin to add a created_at column set once by the database."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
