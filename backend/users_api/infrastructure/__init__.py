"""Infrastructure Layer — database pool, user data accessor, logging setup.

Invariants:
    - All driver exceptions are mapped to core/errors.py types before leaving this layer
"""
