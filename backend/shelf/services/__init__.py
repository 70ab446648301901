"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services await IO once, then hand loaded data to core/ functions
    - Request failures returned as values, never raised to callers
"""
