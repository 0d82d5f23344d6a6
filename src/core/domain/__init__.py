"""Domain models and entities.

Strict data structures (Pydantic v2) with no knowledge of files, SDKs or
the CLI.
"""
