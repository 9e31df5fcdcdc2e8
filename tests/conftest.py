"""Root conftest — shared test configuration."""

import os

# Ensure tests never point at a real database by accident
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")
