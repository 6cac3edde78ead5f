"""Relational persistence for notifications, delivery log, preferences and
push subscriptions (SQLAlchemy async)."""

from infrastructure.persistence.database import Base, Database

__all__ = ["Base", "Database"]
