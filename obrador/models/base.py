# Obrador - Base Model and Mixins

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from obrador.config import get_settings


settings = get_settings()
SCHEMA = settings.db_schema

# Use a metadata instance with a default schema so models and Alembic agree
_metadata = MetaData(schema=SCHEMA) if SCHEMA else MetaData()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""
    metadata = _metadata


class TimestampMixin:
    """Mixin that adds created_at timestamp to models."""
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False
    )
