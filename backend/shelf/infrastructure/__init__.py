"""Infrastructure Layer — SQLAlchemy data access and cross-cutting concerns.

Invariants:
    - SQLAlchemy types never cross into core/: fetchers hand back Records
    - All database failures mapped to FetchError

Design Decisions:
    - Data layer implements the core's RecordFetcher Protocol (ADR: ExMA dependency inversion)
"""
