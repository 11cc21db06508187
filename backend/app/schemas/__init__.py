"""API Schemas - Pydantic models for request validation and response shapes.

Invariants:
    - Request models reject unknown fields where a stray field could change
      semantics (in_stock on product writes)
    - Response models expose numbers, never Decimal strings
"""
