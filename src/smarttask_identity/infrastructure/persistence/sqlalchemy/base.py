"""SQLAlchemy declarative base for smarttask_identity models.

The consuming application should include IdentityBase.metadata in its
migration configuration.

Examples
--------
# In Alembic env.py:
from smarttask_identity.infrastructure.persistence.sqlalchemy import IdentityBase
target_metadata = IdentityBase.metadata
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from smarttask_identity.domain.shared.time import utc_now


class IdentityBase(DeclarativeBase):
    """Declarative base for identity models."""


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps (utc_now)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
