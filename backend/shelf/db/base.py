"""SQLAlchemy Declarative Base — shared base class for mapped models served by shelf.

Invariants:
    - Models exposed through build_registry() inherit from Base (or any DeclarativeBase)
    - Base is the single source of truth for table metadata

Design Decisions:
    - Separate file for Base: avoids circular imports between models (ADR: SQLAlchemy best practice)
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models served through shelf."""
    pass
