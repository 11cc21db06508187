"""Infrastructure Layer - database access, repositories and cross-cutting concerns.

Invariants:
    - Infrastructure imports core types and protocols, never services/ or api/
    - SQLAlchemy exceptions are mapped to DatabaseError before leaving this layer
"""
