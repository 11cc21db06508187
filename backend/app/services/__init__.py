"""Services Layer - async orchestration of core rules around repository IO.

Invariants:
    - Services own transactions (commit/rollback); repositories never commit
    - OrderPlacementService is the only component that creates orders or moves
      stock as a side effect of an order
"""
