"""Core Layer — pure request validation and the error taxonomy, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or db/
    - Validation functions return results; they never raise for bad input
"""
