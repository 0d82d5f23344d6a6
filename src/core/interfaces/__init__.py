"""Core interfaces/abstractions.

Contracts (Protocol) implemented by concrete collaborators. The session
state machine depends on these, never on Rich directly.
"""
