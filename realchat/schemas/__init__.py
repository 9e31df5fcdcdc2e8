"""Pydantic Schemas — validation for inbound WebSocket frames and API responses.

Invariants:
    - Schemas validate at system boundary (client frames, API responses)
    - Domain types from core/ used for tag values

Design Decisions:
    - Separate from models: schemas are wire contracts, models are persistence
"""
