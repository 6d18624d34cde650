"""Database Metadata — declarative Base and dialect-aware column defaults.

Invariants:
    - Metadata only: no engine, no sessions (connections live in infrastructure/database.py)
"""
