"""Users API Package — CRUD service for the user resource.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
