"""Pydantic Schemas — request/response contracts for the users endpoints.

Invariants:
    - Schemas describe shape and constraints only; core/validation.py runs them
    - Separate from models: schemas are API contracts, models are persistence
"""
