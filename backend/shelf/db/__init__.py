"""Database Declarations — declarative base shared by application models.

Invariants:
    - No engine or session created at import time
"""
