"""API Layer — FastAPI routes, WebSocket gateway and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All HTTP endpoints return structured JSON responses

Design Decisions:
    - Thin routes delegate to services
"""
