"""Root conftest - shared test configuration."""

import os

# Tests never touch a real Postgres or seed the starter catalog
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SHOP_TIMEZONE", "UTC")
os.environ.setdefault("SEED_CATALOG", "false")
