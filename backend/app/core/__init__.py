"""Core Layer — pure domain logic: form validation, record mapping, errors, protocols.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO, no async, no clock reads: all functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: services/ await the store
      around these pure steps
"""
