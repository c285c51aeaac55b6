"""Infrastructure Layer — database session management and cross-cutting concerns.

Invariants:
    - SQLAlchemy errors are mapped to DatabaseError here, never inside core rules
    - Logging is configured once per process

Design Decisions:
    - Thin wrappers over SQLAlchemy and stdlib logging (ADR: single responsibility)
"""
