"""Services Layer — connection registry, broadcaster, message store, session handler.

Invariants:
    - Shared mutable state lives only in ConnectionRegistry, owned by ChatHub
    - Session handlers never touch the WebSocket directly (outbound goes through ClientConnection)

Design Decisions:
    - One file per collaborator for locality; wiring done once in chat_hub.py
"""
