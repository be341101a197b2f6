"""Persistence: SQLAlchemy engine, models, repositories, Alembic migrations."""
