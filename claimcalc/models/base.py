"""Declarative base shared by every model (and by Alembic's env.py)."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
