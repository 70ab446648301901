"""Core Layer — pure JSON:API transform, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic over their inputs

Design Decisions:
    - Functional core separated from imperative shell (ADR: ExMA impureim sandwich)
"""
