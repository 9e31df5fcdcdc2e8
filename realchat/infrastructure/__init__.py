"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - All database failures mapped to core PersistenceError before leaving this layer

Design Decisions:
    - Session manager wrapper over raw engine: one place for rollback and error mapping
"""
