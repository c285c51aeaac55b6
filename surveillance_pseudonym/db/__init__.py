"""Database Infrastructure — declarative Base and standalone async session factory.

Invariants:
    - Single async engine per process (initialized via init_db or create_session_factory)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL (ADR: native async, no thread pool overhead)
"""
