"""API Schemas — Pydantic request/response models.

Invariants:
    - Every request body is validated here before reaching a service
"""
