"""Pydantic Schemas — validation models for the form boundary.

Invariants:
    - Schemas validate at system boundary (submitted forms)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are input contracts, models are table metadata
"""
