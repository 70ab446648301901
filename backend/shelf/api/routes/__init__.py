"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with tags
    - Routes never contain business logic (delegate to the adapter)

Design Decisions:
    - Explicit registration in create_app over auto-discovery (ADR: ExMA anti-pattern)
"""
