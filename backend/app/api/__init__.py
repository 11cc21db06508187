"""API Layer - FastAPI routers and global error handlers.

Invariants:
    - Routes validate with Pydantic and delegate to services
    - Domain errors become structured JSON via error_handlers.py
"""
