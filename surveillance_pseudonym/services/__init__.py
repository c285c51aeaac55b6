"""Services — IO shell around the pure core rules.

Invariants:
    - Services own transactions; core rules never touch the database
    - Each service works on the session it is given (one per request or per batch)
"""
