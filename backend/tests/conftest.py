"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database
os.environ.setdefault(
    "SHELF_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("SHELF_LOG_FORMAT", "text")
