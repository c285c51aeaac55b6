"""Core — pure domain logic (no IO, no database, no framework imports).

Invariants:
    - Functions here are deterministic given their inputs
    - Shell modules (services/, api/) call core, never the other way round
"""
